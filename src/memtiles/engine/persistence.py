from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .grid import Grid, grid_from_pair_ids, is_valid_grid_size
from .processor import FlipQueueProcessor
from .types import CARD_STATES, CardState

log = logging.getLogger(__name__)


class LoadFailed(RuntimeError):
    def __init__(self, reasons: list[str]) -> None:
        super().__init__("Saved game rejected: " + "; ".join(reasons))
        self.reasons = reasons


@dataclass(frozen=True)
class CardRecord:
    index: int
    pair_id: int
    state: CardState


@dataclass(frozen=True)
class SaveSnapshot:
    score: int
    turns: int
    matched_pairs: int
    grid_rows: int
    grid_columns: int
    card_states: tuple[CardRecord, ...] = ()
    timestamp: str = field(default_factory=lambda: datetime.now(tz=timezone.utc).isoformat())

    @property
    def total_pairs(self) -> int:
        return self.grid_rows * self.grid_columns // 2


class PersistenceManager:
    def __init__(self, max_flipped_cards: int = 2) -> None:
        self.max_flipped_cards = max_flipped_cards

    def capture(self, processor: FlipQueueProcessor) -> SaveSnapshot | None:
        """Snapshot the running game, or None when there is nothing to save."""
        grid = processor.grid
        if grid is None:
            return None
        records = tuple(
            # an in-flight flip is stored as the state it is heading to
            CardRecord(index=c.index, pair_id=c.pair_id, state=c.settled_state)
            for c in grid.cards
        )
        return SaveSnapshot(
            score=processor.score,
            turns=processor.turns,
            matched_pairs=processor.matched_pairs,
            grid_rows=grid.rows,
            grid_columns=grid.columns,
            card_states=records,
        )

    def validate(self, snapshot: SaveSnapshot | None) -> bool:
        return not self.problems(snapshot)

    def problems(self, snapshot: SaveSnapshot | None) -> list[str]:
        if snapshot is None:
            return ["no saved game"]
        s = snapshot
        out: list[str] = []
        if s.score < 0 or s.turns < 0 or s.matched_pairs < 0:
            out.append("negative counter")
        if not is_valid_grid_size(s.grid_rows, s.grid_columns):
            out.append(f"invalid grid size {s.grid_rows}x{s.grid_columns}")
            return out
        total_pairs = s.total_pairs
        if s.score > total_pairs:
            out.append(f"score {s.score} exceeds {total_pairs} pairs")
        if s.matched_pairs > total_pairs:
            out.append(f"matched pairs {s.matched_pairs} exceeds {total_pairs}")
        out.extend(self._card_problems(s))
        return out

    def _card_problems(self, s: SaveSnapshot) -> list[str]:
        n = s.grid_rows * s.grid_columns
        records = s.card_states
        if len(records) != n:
            return [f"expected {n} card records, got {len(records)}"]
        if sorted(r.index for r in records) != list(range(n)):
            return ["card indices must cover every grid slot exactly once"]
        out: list[str] = []
        if any(r.state not in CARD_STATES for r in records):
            out.append("unknown card state")
        if any(count != 2 for count in Counter(r.pair_id for r in records).values()):
            out.append("every pair id must appear exactly twice")
        matched = [r for r in records if r.state == "matched"]
        if len(matched) != 2 * s.matched_pairs:
            out.append("matched cards disagree with matched pair count")
        if any(count != 2 for count in Counter(r.pair_id for r in matched).values()):
            out.append("matched cards must come in whole pairs")
        revealed = sum(1 for r in records if r.state in ("face_up", "flipping"))
        if revealed > self.max_flipped_cards:
            out.append(f"{revealed} face-up cards exceeds limit of {self.max_flipped_cards}")
        return out

    def build_grid(self, snapshot: SaveSnapshot) -> Grid:
        ordered = sorted(snapshot.card_states, key=lambda r: r.index)
        grid = grid_from_pair_ids(snapshot.grid_rows, snapshot.grid_columns, [r.pair_id for r in ordered])
        for record, card in zip(ordered, grid.cards):
            state = record.state
            if state == "flipping":
                # direction is not stored; a revealed card settles face up
                state = "face_up"
            if state == "face_up":
                card.set_face_up_immediate()
            elif state == "matched":
                card.set_face_up_immediate()
                card.set_matched()
            else:
                card.set_face_down_immediate()
        return grid

    def load(self, snapshot: SaveSnapshot | None, processor: FlipQueueProcessor) -> None:
        """Replay ``snapshot`` into ``processor``.

        Raises LoadFailed, leaving the processor untouched, when the snapshot
        does not validate.
        """
        reasons = self.problems(snapshot)
        if reasons:
            log.warning("load rejected: %s", "; ".join(reasons))
            raise LoadFailed(reasons)
        assert snapshot is not None
        grid = self.build_grid(snapshot)
        processor.install_restored(
            grid,
            score=snapshot.score,
            turns=snapshot.turns,
            matched_pairs=snapshot.matched_pairs,
        )
        log.info(
            "game loaded: %s grid, score %d, turns %d, pairs %d/%d",
            grid.size_label,
            snapshot.score,
            snapshot.turns,
            snapshot.matched_pairs,
            grid.total_pairs,
        )
