from __future__ import annotations

import logging
import random
from typing import Protocol

from .events import GAME_WON, Event, EventBus
from .grid import Grid
from .persistence import LoadFailed, PersistenceManager, SaveSnapshot
from .processor import FlipQueueProcessor
from .scheduler import ManualScheduler, Scheduler
from .scoring import ScoringEngine
from .types import GameConfig, ScoringConfig

log = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Where saved games live. ``read`` raises RuntimeError/ValueError for unreadable data."""

    def write(self, snapshot: SaveSnapshot) -> None: ...

    def read(self) -> SaveSnapshot | None: ...

    def exists(self) -> bool: ...

    def clear(self) -> None: ...


class GameSession:
    """Owns one instance of every core component and exposes the public game API."""

    def __init__(
        self,
        config: GameConfig | None = None,
        scoring_config: ScoringConfig | None = None,
        *,
        store: SnapshotStore | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        with_scoring: bool = True,
    ) -> None:
        self.config = config or GameConfig()
        self.bus = EventBus()
        self.scheduler: Scheduler = scheduler or ManualScheduler()
        self.scoring = ScoringEngine(scoring_config, self.bus) if with_scoring else None
        self.store = store
        self.processor = FlipQueueProcessor(
            self.config,
            self.bus,
            self.scheduler,
            scoring=self.scoring,
            rng=rng,
            checkpoint=self._checkpoint,
        )
        self.persistence = PersistenceManager(self.config.max_flipped_cards)
        self.bus.subscribe(self._on_game_won, types=[GAME_WON])

    # -------- Views --------
    @property
    def grid(self) -> Grid | None:
        return self.processor.grid

    @property
    def score(self) -> int:
        return self.processor.score

    @property
    def turns(self) -> int:
        return self.processor.turns

    @property
    def matched_pairs(self) -> int:
        return self.processor.matched_pairs

    def get_total_pairs(self) -> int:
        return self.processor.total_pairs

    def has_active_game(self) -> bool:
        return self.processor.active

    # -------- Game control --------
    def start_new_game(self, rows: int | None = None, columns: int | None = None) -> Grid:
        r = self.config.rows if rows is None else rows
        c = self.config.columns if columns is None else columns
        return self.processor.start_new_game(r, c)

    def restart_game(self) -> Grid:
        return self.processor.restart_game()

    def handle_card_click(self, index: int) -> bool:
        return self.processor.enqueue_click(index)

    def abandon_game(self) -> None:
        """Leave the current game (e.g. back to the menu), saving it first when auto-save is on."""
        if self.processor.active and self.config.auto_save:
            self.save_game()
        self.processor.end_game()

    def advance(self, dt: float) -> None:
        if isinstance(self.scheduler, ManualScheduler):
            self.scheduler.advance(dt)

    # -------- Persistence --------
    def save_game(self) -> SaveSnapshot | None:
        """Capture and store the running game.

        Returns None, leaving any existing save in place, when there is no
        active game or the board would not pass load validation.
        """
        if not self.processor.active:
            return None
        snapshot = self.persistence.capture(self.processor)
        if snapshot is None:
            return None
        problems = self.persistence.problems(snapshot)
        if problems:
            # keep the last loadable save rather than overwrite it
            log.warning("game not saved: %s", "; ".join(problems))
            return None
        if self.store is not None:
            self.store.write(snapshot)
            log.info("game saved: score %d, turns %d", snapshot.score, snapshot.turns)
        return snapshot

    def load_game(self, snapshot: SaveSnapshot | None = None) -> bool:
        if snapshot is None and self.store is not None:
            try:
                snapshot = self.store.read()
            except (RuntimeError, ValueError) as e:
                log.warning("could not read saved game: %s", e)
                return False
        try:
            self.persistence.load(snapshot, self.processor)
        except LoadFailed:
            return False
        return True

    def has_saved_game(self) -> bool:
        return self.store is not None and self.store.exists()

    def clear_saved_game(self) -> None:
        if self.store is not None:
            self.store.clear()

    def _checkpoint(self) -> None:
        if self.config.auto_save and self.store is not None:
            self.save_game()

    def _on_game_won(self, _event: Event) -> None:
        # a finished game has nothing to resume
        self.clear_saved_game()
