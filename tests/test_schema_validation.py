from __future__ import annotations

import json
from pathlib import Path

import pytest

from memtiles.paths import get_paths
from memtiles.services.content import ContentError, ContentService


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_shipped_config_defaults() -> None:
    paths = get_paths()
    gc = ContentService(paths.data_dir, paths.schema_dir).load_config()
    assert (gc.game.rows, gc.game.columns) == (3, 4)
    assert gc.game.mismatch_delay == 1.5
    assert gc.scoring.combo_threshold == 3
    assert [d.id for d in gc.ordered_difficulties()] == ["very_easy", "easy", "medium", "hard", "very_hard"]
    assert gc.difficulty("nope").id == "medium"
    assert gc.difficulty("hard").size_label == "4x4"


def _write_config(tmp_path: Path, mutate) -> ContentService:
    paths = get_paths()
    raw = json.loads((paths.data_dir / "config.json").read_text(encoding="utf-8"))
    mutate(raw)
    (tmp_path / "config.json").write_text(json.dumps(raw), encoding="utf-8")
    return ContentService(tmp_path, paths.schema_dir)


def test_unpairable_difficulty_rejected(tmp_path: Path) -> None:
    content = _write_config(tmp_path, lambda raw: raw["difficulties"].update(odd={"label": "Odd", "rows": 3, "columns": 3}))
    with pytest.raises(ContentError):
        content.load_config()


def test_schema_violation_rejected(tmp_path: Path) -> None:
    content = _write_config(tmp_path, lambda raw: raw["game"].update(intake_mode="sometimes"))
    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_config()


def test_unknown_default_difficulty_rejected(tmp_path: Path) -> None:
    content = _write_config(tmp_path, lambda raw: raw.update(default_difficulty="nightmare"))
    with pytest.raises(ContentError):
        content.load_config()


def test_missing_config_file(tmp_path: Path) -> None:
    paths = get_paths()
    with pytest.raises(ContentError, match="Missing content file"):
        ContentService(tmp_path, paths.schema_dir).load_config()
