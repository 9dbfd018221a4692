from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CardState = Literal["face_down", "flipping", "face_up", "matched"]
ProcessorPhase = Literal["idle", "evaluating", "settling"]
IntakeMode = Literal["continuous", "exclusive"]

CARD_STATES: tuple[CardState, ...] = ("face_down", "flipping", "face_up", "matched")
INTAKE_MODES: tuple[IntakeMode, ...] = ("continuous", "exclusive")


@dataclass(frozen=True)
class GameConfig:
    rows: int = 3
    columns: int = 4
    mismatch_delay: float = 1.5
    max_flipped_cards: int = 2
    intake_mode: IntakeMode = "continuous"
    auto_save: bool = True

    def __post_init__(self) -> None:
        if self.mismatch_delay < 0:
            raise ValueError("mismatch_delay must not be negative.")
        if self.max_flipped_cards < 2:
            raise ValueError("max_flipped_cards must be at least 2.")
        if self.intake_mode not in INTAKE_MODES:
            raise ValueError(f"Unknown intake mode: {self.intake_mode}")


@dataclass(frozen=True)
class ScoringConfig:
    base_points: int = 1
    combo_enabled: bool = True
    combo_threshold: int = 3
    multiplier_step: float = 1.5
    max_multiplier: float = 3

    def __post_init__(self) -> None:
        if self.base_points < 1:
            raise ValueError("base_points must be at least 1.")
        if self.combo_threshold < 2:
            raise ValueError("combo_threshold must be at least 2.")
        if self.multiplier_step < 1.0:
            raise ValueError("multiplier_step must be at least 1.0.")
        if self.max_multiplier < 1:
            raise ValueError("max_multiplier must be at least 1.")
