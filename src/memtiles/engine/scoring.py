from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from .events import COMBO_CHANGED, MULTIPLIER_CHANGED, SCORE_CHANGED, EventBus
from .types import ScoringConfig

log = logging.getLogger(__name__)


def round_half_away(value: float) -> int:
    # 0.5 always rounds away from zero (Python's round() goes to even)
    d = Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(d)


class ScoringEngine:
    """Converts match/mismatch outcomes into score, combo level and multiplier."""

    def __init__(self, config: ScoringConfig | None = None, bus: EventBus | None = None) -> None:
        self.config = config or ScoringConfig()
        self._bus = bus
        self.total_score = 0
        self.consecutive_matches = 0
        self.combo_level = 0
        self.multiplier = 1.0

    def reset(self) -> None:
        self.total_score = 0
        self._reset_combo()
        self._notify(score_changed=True)

    def restore(self, total_score: int) -> None:
        """Put a saved score back; the combo chain is not part of a save."""
        self.total_score = max(0, total_score)
        self._reset_combo()
        self._notify(score_changed=True)

    def record_match(self) -> int:
        cfg = self.config
        points = cfg.base_points
        if cfg.combo_enabled:
            self.consecutive_matches += 1
            self._update_combo()
            points = round_half_away(cfg.base_points * self.multiplier)
        self.total_score += points
        self._notify(score_changed=True)
        log.debug(
            "match scored: base=%d multiplier=%.1f earned=%d total=%d",
            cfg.base_points,
            self.multiplier,
            points,
            self.total_score,
        )
        return points

    def record_mismatch(self) -> None:
        if self.config.combo_enabled:
            self._reset_combo()
        self._notify(score_changed=False)

    def _update_combo(self) -> None:
        cfg = self.config
        if self.consecutive_matches >= cfg.combo_threshold:
            self.combo_level = self.consecutive_matches - cfg.combo_threshold + 1
            self.multiplier = min(float(cfg.max_multiplier), 1.0 + self.combo_level * (cfg.multiplier_step - 1.0))
        else:
            self.combo_level = 0
            self.multiplier = 1.0

    def _reset_combo(self) -> None:
        self.consecutive_matches = 0
        self.combo_level = 0
        self.multiplier = 1.0

    def _notify(self, *, score_changed: bool) -> None:
        if self._bus is None:
            return
        if score_changed:
            self._bus.publish(SCORE_CHANGED, score=self.total_score)
        self._bus.publish(COMBO_CHANGED, combo=self.combo_level)
        self._bus.publish(MULTIPLIER_CHANGED, multiplier=self.multiplier)

    # UI helpers

    def combo_label(self) -> str:
        if not self.config.combo_enabled or self.combo_level <= 0:
            return ""
        return f"Combo x{self.combo_level}"

    def multiplier_label(self) -> str:
        if not self.config.combo_enabled or self.multiplier <= 1.0:
            return ""
        return f"{self.multiplier:.1f}x"
