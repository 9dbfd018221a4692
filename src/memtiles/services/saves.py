from __future__ import annotations

import json
import logging
from pathlib import Path

from memtiles.engine.persistence import SaveSnapshot
from memtiles.engine.serialize import SnapshotFormatError, snapshot_from_dict, snapshot_to_dict

from .content import schema_errors

log = logging.getLogger(__name__)


class SaveError(RuntimeError):
    pass


class SaveStore:
    """Single save slot kept as a JSON file."""

    def __init__(self, path: Path, schema: object | None = None) -> None:
        self._path = path
        self._schema = schema

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file() and self._path.stat().st_size > 0

    def write(self, snapshot: SaveSnapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(snapshot_to_dict(snapshot), indent=2), encoding="utf-8")

    def read(self) -> SaveSnapshot | None:
        if not self.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SaveError(f"Save file {self._path} is not valid JSON: {e}") from e
        if self._schema is not None:
            problems = schema_errors(raw, self._schema)
            if problems:
                raise SaveError("\n".join([f"Save file {self._path} failed validation:", *problems]))
        if not isinstance(raw, dict):
            raise SaveError("Save file must hold an object")
        try:
            return snapshot_from_dict(raw)
        except SnapshotFormatError as e:
            raise SaveError(str(e)) from e

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
            log.info("saved game cleared")
