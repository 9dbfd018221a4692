from __future__ import annotations

import logging
import random
from collections import deque
from collections.abc import Callable

from .card import Card
from .events import (
    CARD_FLIPPED,
    CARD_FLIPPED_BACK,
    CARD_MATCHED,
    CARD_SET,
    GAME_STARTED,
    GAME_WON,
    MATCH_FOUND,
    MISMATCH_FOUND,
    PAIRS_CHANGED,
    SCORE_CHANGED,
    TURNS_CHANGED,
    EventBus,
)
from .grid import Grid, generate_grid
from .scheduler import Scheduler, TimerHandle
from .scoring import ScoringEngine
from .types import GameConfig, ProcessorPhase

log = logging.getLogger(__name__)


class FlipQueueProcessor:
    """Click intake, evaluation timing and turn/match bookkeeping for one grid.

    All mutation happens synchronously inside the public calls; the only
    deferred work is the mismatch reversal, held as a single TimerHandle.
    """

    def __init__(
        self,
        config: GameConfig,
        bus: EventBus,
        scheduler: Scheduler,
        scoring: ScoringEngine | None = None,
        rng: random.Random | None = None,
        checkpoint: Callable[[], None] | None = None,
    ) -> None:
        self.config = config
        self.bus = bus
        self.scheduler = scheduler
        self.scoring = scoring
        self.rng = rng or random.Random()
        self.checkpoint = checkpoint

        self.grid: Grid | None = None
        self.phase: ProcessorPhase = "idle"
        self.turns = 0
        self.matched_pairs = 0
        self.active = False

        self._queue: deque[int] = deque()
        self._flipped: list[Card] = []
        self._reversal: TimerHandle | None = None
        self._fallback_score = 0

    # -------- Read-only views --------
    @property
    def score(self) -> int:
        if self.scoring is not None:
            return self.scoring.total_score
        return self._fallback_score

    @property
    def total_pairs(self) -> int:
        return self.grid.total_pairs if self.grid is not None else 0

    @property
    def queued(self) -> tuple[int, ...]:
        return tuple(self._queue)

    @property
    def flipped_cards(self) -> tuple[Card, ...]:
        return tuple(self._flipped)

    @property
    def reversal_pending(self) -> bool:
        return self._reversal is not None and self._reversal.pending

    # -------- Game lifecycle --------
    def start_new_game(self, rows: int, columns: int) -> Grid:
        # Raises InvalidGridSize before any current state is touched.
        grid = generate_grid(rows, columns, self.rng)
        self._teardown()
        self.turns = 0
        self.matched_pairs = 0
        self._reset_score()
        self.grid = grid
        self.active = True
        log.info("new game: %s grid, %d pairs", grid.size_label, grid.total_pairs)
        self._announce_start()
        return grid

    def restart_game(self) -> Grid:
        if self.grid is not None:
            return self.start_new_game(self.grid.rows, self.grid.columns)
        return self.start_new_game(self.config.rows, self.config.columns)

    def end_game(self) -> None:
        """Drop the current game; any pending reversal is cancelled first."""
        self._teardown()
        self.grid = None
        self.active = False

    def install_restored(self, grid: Grid, *, score: int, turns: int, matched_pairs: int) -> None:
        """Adopt a grid whose cards were already put into their saved states."""
        self._teardown()
        self.grid = grid
        self.turns = turns
        self.matched_pairs = matched_pairs
        if self.scoring is not None:
            self.scoring.restore(score)
        else:
            self._fallback_score = score
            self.bus.publish(SCORE_CHANGED, score=score)
        self.active = True
        self._flipped = [c for c in grid.cards if c.state == "face_up"]
        for card in grid.cards:
            self.bus.publish(CARD_SET, index=card.index, state=card.state)
        self._announce_start()
        if len(self._flipped) >= self.config.max_flipped_cards:
            # Saved mid-reversal: the pair was already judged, just settle it.
            self.phase = "settling"
            self._schedule_reversal()

    # -------- Click intake --------
    def enqueue_click(self, index: int) -> bool:
        """Accept a click on ``index``. Returns False when it was ignored."""
        if not self.active or self.grid is None:
            return False
        card = self.grid.card(index)
        if card is None or not self._can_flip(card) or index in self._queue:
            return False

        if self.config.intake_mode == "exclusive":
            if self.phase != "idle":
                return False
            self._flip_up(card)
            if len(self._flipped) >= self.config.max_flipped_cards:
                self._evaluate()
            return True

        self._queue.append(index)
        self._drain()
        return True

    def _can_flip(self, card: Card) -> bool:
        return card.accepts_click and card not in self._flipped

    def _drain(self) -> None:
        while (
            self.active
            and self.phase == "idle"
            and self._queue
            and len(self._flipped) < self.config.max_flipped_cards
        ):
            assert self.grid is not None
            card = self.grid.card(self._queue.popleft())
            if card is None or not self._can_flip(card):
                continue
            self._flip_up(card)
            if len(self._flipped) >= self.config.max_flipped_cards:
                self._evaluate()

    def _flip_up(self, card: Card) -> None:
        card.begin_flip_up()
        self._flipped.append(card)
        self.bus.publish(CARD_FLIPPED, index=card.index)
        card.finish_flip()
        log.debug("card %d flipped (pair %d), %d face up", card.index, card.pair_id, len(self._flipped))

    # -------- Evaluation --------
    def _evaluate(self) -> None:
        self.phase = "evaluating"
        self.turns += 1
        self.bus.publish(TURNS_CHANGED, turns=self.turns)

        # Only the first two cards of the cycle are compared.
        first, second = self._flipped[0], self._flipped[1]
        if first.pair_id == second.pair_id:
            self._on_match(first, second)
        else:
            self._on_mismatch()

    def _on_match(self, first: Card, second: Card) -> None:
        assert self.grid is not None
        extras = self._flipped[2:]
        for card in (first, second):
            card.set_matched()
        for card in extras:
            self._flip_back(card)
        self.matched_pairs += 1
        self._flipped.clear()

        if self.scoring is not None:
            self.scoring.record_match()
        else:
            self._fallback_score += 1
            self.bus.publish(SCORE_CHANGED, score=self._fallback_score)

        for card in (first, second):
            self.bus.publish(CARD_MATCHED, index=card.index)
        self.bus.publish(MATCH_FOUND, pair_ids=[first.pair_id, second.pair_id], indices=[first.index, second.index])
        self.bus.publish(PAIRS_CHANGED, matched=self.matched_pairs, total=self.grid.total_pairs)
        self.phase = "idle"
        log.debug("match: pair %d (%d/%d)", first.pair_id, self.matched_pairs, self.grid.total_pairs)

        if self.matched_pairs >= self.grid.total_pairs:
            self.active = False
            self._queue.clear()
            log.info("game won in %d turns, score %d", self.turns, self.score)
            self.bus.publish(GAME_WON)
        elif self.checkpoint is not None:
            self.checkpoint()

    def _on_mismatch(self) -> None:
        if self.scoring is not None:
            self.scoring.record_mismatch()
        self.bus.publish(MISMATCH_FOUND)
        self.phase = "settling"
        self._schedule_reversal()
        log.debug("mismatch: reversal in %.2fs", self.config.mismatch_delay)

    def _schedule_reversal(self) -> None:
        if self._reversal is not None:
            self._reversal.cancel()
        self._reversal = self.scheduler.schedule(self.config.mismatch_delay, self._settle)

    def _settle(self) -> None:
        self._reversal = None
        cards, self._flipped = self._flipped, []
        for card in cards:
            # skip anything that moved on while we waited
            if card.state == "face_up":
                self._flip_back(card)
        self.phase = "idle"
        self._drain()

    def _flip_back(self, card: Card) -> None:
        if card.begin_flip_back():
            self.bus.publish(CARD_FLIPPED_BACK, index=card.index)
            card.finish_flip()

    # -------- Internals --------
    def _teardown(self) -> None:
        if self._reversal is not None:
            self._reversal.cancel()
            self._reversal = None
        self._queue.clear()
        self._flipped.clear()
        self.phase = "idle"

    def _reset_score(self) -> None:
        if self.scoring is not None:
            self.scoring.reset()
        else:
            self._fallback_score = 0
            self.bus.publish(SCORE_CHANGED, score=0)

    def _announce_start(self) -> None:
        assert self.grid is not None
        self.bus.publish(TURNS_CHANGED, turns=self.turns)
        self.bus.publish(PAIRS_CHANGED, matched=self.matched_pairs, total=self.grid.total_pairs)
        self.bus.publish(GAME_STARTED, rows=self.grid.rows, columns=self.grid.columns)
