from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from memtiles.engine.grid import is_valid_grid_size
from memtiles.engine.types import GameConfig, ScoringConfig


class ContentError(RuntimeError):
    pass


def load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def schema_errors(instance: object, schema: object) -> list[str]:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.absolute_path))
    out: list[str] = []
    for err in errors[:10]:
        loc = "/".join(str(p) for p in err.absolute_path)
        out.append(f"- {loc}: {err.message}")
    return out


def validate_json(instance: object, schema: object, *, context: str) -> None:
    lines = schema_errors(instance, schema)
    if lines:
        raise ContentError("\n".join([f"Schema validation failed for {context}:", *lines]))


@dataclass(frozen=True)
class Difficulty:
    id: str
    label: str
    rows: int
    columns: int

    @property
    def size_label(self) -> str:
        return f"{self.rows}x{self.columns}"


@dataclass(frozen=True)
class GameContent:
    game: GameConfig
    scoring: ScoringConfig
    difficulties: dict[str, Difficulty]
    default_difficulty: str

    def difficulty(self, difficulty_id: str | None) -> Difficulty:
        if difficulty_id is not None and difficulty_id in self.difficulties:
            return self.difficulties[difficulty_id]
        return self.difficulties[self.default_difficulty]

    def ordered_difficulties(self) -> list[Difficulty]:
        return sorted(self.difficulties.values(), key=lambda d: (d.rows * d.columns, d.id))


def _parse_difficulties(raw: Mapping[str, object]) -> dict[str, Difficulty]:
    out: dict[str, Difficulty] = {}
    for key, v in raw.items():
        if not isinstance(v, dict):
            continue
        rows = int(v["rows"])
        columns = int(v["columns"])
        if not is_valid_grid_size(rows, columns):
            raise ContentError(f"Difficulty {key} has an unpairable grid {rows}x{columns}")
        out[key] = Difficulty(id=key, label=str(v["label"]), rows=rows, columns=columns)
    return out


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def save_schema(self) -> object:
        return load_json(self._schema_dir / "save.schema.json")

    def load_config(self) -> GameContent:
        path = self._data_dir / "config.json"
        raw = load_json(path)
        validate_json(raw, load_json(self._schema_dir / "config.schema.json"), context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("config.json must be an object")

        game_raw = raw.get("game", {})
        scoring_raw = raw.get("scoring", {})
        try:
            game = GameConfig(**game_raw) if isinstance(game_raw, dict) else GameConfig()
            scoring = ScoringConfig(**scoring_raw) if isinstance(scoring_raw, dict) else ScoringConfig()
        except ValueError as e:
            raise ContentError(f"Invalid settings in {path}: {e}") from e
        if not is_valid_grid_size(game.rows, game.columns):
            raise ContentError(f"Default grid {game.rows}x{game.columns} cannot be paired")

        difficulties = _parse_difficulties(raw.get("difficulties", {}))
        default = str(raw.get("default_difficulty", ""))
        if default not in difficulties:
            raise ContentError(f"default_difficulty {default!r} is not a known difficulty")
        return GameContent(game=game, scoring=scoring, difficulties=difficulties, default_difficulty=default)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_config()
        _ = self.save_schema()
