from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    difficulty: str = "medium"
    continuous_flipping: bool = True
    auto_save: bool = True

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Settings":
        difficulty = d.get("difficulty", "medium")
        return Settings(
            difficulty=difficulty if isinstance(difficulty, str) else "medium",
            continuous_flipping=bool(d.get("continuous_flipping", True)),
            auto_save=bool(d.get("auto_save", True)),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "difficulty": self.difficulty,
            "continuous_flipping": self.continuous_flipping,
            "auto_save": self.auto_save,
        }


class ProfileService:
    """Player preferences, persisted on every change."""

    def __init__(self, profile_path: Path) -> None:
        self._path = profile_path
        self.settings = self._load_or_create()

    def _load_or_create(self) -> Settings:
        if not self._path.exists():
            settings = Settings()
            self._write(settings)
            return settings
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.warning("profile %s is unreadable (%s), using defaults", self._path, e)
            return Settings()
        if not isinstance(raw, dict):
            return Settings()
        return Settings.from_dict(raw)

    def _write(self, settings: Settings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")

    def update(self, **changes: object) -> Settings:
        self.settings = replace(self.settings, **changes)  # type: ignore[arg-type]
        self._write(self.settings)
        return self.settings
