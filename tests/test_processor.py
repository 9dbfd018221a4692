from __future__ import annotations

import random
from typing import Sequence

from memtiles.engine.events import (
    CARD_FLIPPED,
    CARD_FLIPPED_BACK,
    GAME_STARTED,
    GAME_WON,
    MATCH_FOUND,
    MISMATCH_FOUND,
    PAIRS_CHANGED,
    SCORE_CHANGED,
    TURNS_CHANGED,
    Event,
    EventBus,
    EventRecorder,
)
from memtiles.engine.processor import FlipQueueProcessor
from memtiles.engine.scheduler import ManualScheduler
from memtiles.engine.scoring import ScoringEngine
from memtiles.engine.types import GameConfig, IntakeMode

# index 0 and 1 share pair 5
MATCH_FIRST = [5, 5, 2, 7, 0, 0, 1, 1, 2, 3, 3, 4, 4, 6, 6, 7]
# index 0 is pair 2, index 2 is pair 7
MISMATCH_FIRST = [2, 5, 7, 0, 0, 1, 1, 2, 3, 3, 4, 4, 5, 6, 6, 7]

DELAY = 1.0


class _Rig:
    def __init__(
        self,
        mode: IntakeMode = "continuous",
        *,
        with_scoring: bool = True,
        max_flipped: int = 2,
    ) -> None:
        self.bus = EventBus()
        self.rec = EventRecorder()
        self.bus.subscribe(self.rec)
        self.scheduler = ManualScheduler()
        self.checkpoints: list[int] = []
        config = GameConfig(mismatch_delay=DELAY, intake_mode=mode, max_flipped_cards=max_flipped)
        scoring = ScoringEngine(bus=self.bus) if with_scoring else None
        self.proc = FlipQueueProcessor(
            config,
            self.bus,
            self.scheduler,
            scoring=scoring,
            rng=random.Random(42),
            checkpoint=lambda: self.checkpoints.append(self.proc.matched_pairs),
        )

    def start(self, rows: int, columns: int, pair_ids: Sequence[int]) -> None:
        self.proc.start_new_game(rows, columns)
        assert self.proc.grid is not None
        for card, pid in zip(self.proc.grid.cards, pair_ids):
            card.pair_id = pid
        self.rec.clear()

    def state(self, index: int) -> str:
        assert self.proc.grid is not None
        return self.proc.grid.cards[index].state

    def payloads(self, event_type: str, key: str) -> list[object]:
        return [e[key] for e in self.rec.of_type(event_type)]


def test_matching_pair_scores_and_counts_one_turn() -> None:
    rig = _Rig()
    rig.start(4, 4, MATCH_FIRST)

    assert rig.proc.enqueue_click(0)
    assert rig.proc.turns == 0
    assert rig.proc.enqueue_click(1)

    assert rig.rec.of_type(MATCH_FOUND)[0]["pair_ids"] == [5, 5]
    assert rig.proc.matched_pairs == 1
    assert rig.payloads(SCORE_CHANGED, "score") == [1]
    assert rig.payloads(TURNS_CHANGED, "turns") == [1]
    assert rig.rec.of_type(PAIRS_CHANGED)[-1] == {"type": PAIRS_CHANGED, "matched": 1, "total": 8}
    assert rig.state(0) == "matched" and rig.state(1) == "matched"
    assert rig.proc.phase == "idle"
    assert rig.proc.flipped_cards == ()
    assert rig.checkpoints == [1]


def test_mismatch_flips_back_after_delay_without_scoring() -> None:
    rig = _Rig()
    rig.start(4, 4, MISMATCH_FIRST)

    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)

    assert rig.rec.of_type(MISMATCH_FOUND)
    assert rig.payloads(TURNS_CHANGED, "turns") == [1]
    assert rig.proc.phase == "settling"
    assert rig.state(0) == "face_up" and rig.state(2) == "face_up"

    rig.scheduler.advance(DELAY / 2)
    assert rig.state(0) == "face_up"

    rig.scheduler.advance(DELAY / 2)
    assert rig.state(0) == "face_down" and rig.state(2) == "face_down"
    assert rig.payloads(CARD_FLIPPED_BACK, "index") == [0, 2]
    assert rig.proc.phase == "idle"
    assert rig.rec.of_type(SCORE_CHANGED) == []
    assert rig.proc.score == 0
    assert rig.proc.matched_pairs == 0
    assert rig.checkpoints == []


def test_turns_count_cycles_not_cards() -> None:
    rig = _Rig()
    rig.start(4, 4, MATCH_FIRST)
    for index in (0, 1, 4, 5, 6, 7):
        rig.proc.enqueue_click(index)
    assert rig.proc.turns == 3
    assert rig.proc.matched_pairs == 3
    assert len(rig.rec.of_type(CARD_FLIPPED)) == 6


def test_card_flipped_fires_while_card_is_flipping() -> None:
    rig = _Rig()
    rig.start(4, 4, MATCH_FIRST)
    seen: list[str] = []

    def on_flip(event: Event) -> None:
        seen.append(rig.state(int(event["index"])))  # type: ignore[call-overload]

    rig.bus.subscribe(on_flip, types=[CARD_FLIPPED])
    rig.proc.enqueue_click(3)
    assert seen == ["flipping"]
    assert rig.state(3) == "face_up"


def test_continuous_mode_queues_clicks_during_settling() -> None:
    rig = _Rig("continuous")
    rig.start(4, 4, MISMATCH_FIRST)
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)

    assert rig.proc.enqueue_click(3)
    assert rig.proc.enqueue_click(4)
    assert rig.proc.queued == (3, 4)
    assert rig.state(3) == "face_down"

    rig.scheduler.advance(DELAY)

    # 3 (pair 0) and 4 (pair 0) drained right after the reversal and matched
    assert rig.proc.queued == ()
    assert rig.state(3) == "matched" and rig.state(4) == "matched"
    assert rig.proc.turns == 2
    assert rig.proc.matched_pairs == 1


def test_continuous_mode_rejects_duplicate_and_active_clicks() -> None:
    rig = _Rig("continuous")
    rig.start(4, 4, MISMATCH_FIRST)
    rig.proc.enqueue_click(0)
    assert not rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)

    assert rig.proc.enqueue_click(5)
    assert not rig.proc.enqueue_click(5)
    assert not rig.proc.enqueue_click(2)
    assert not rig.proc.enqueue_click(99)
    assert not rig.proc.enqueue_click(-1)
    assert rig.proc.queued == (5,)


def test_exclusive_mode_drops_clicks_until_idle() -> None:
    rig = _Rig("exclusive")
    rig.start(4, 4, MISMATCH_FIRST)
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)

    assert not rig.proc.enqueue_click(3)
    assert rig.proc.queued == ()
    assert rig.state(3) == "face_down"

    rig.scheduler.advance(DELAY)
    assert rig.state(3) == "face_down"  # nothing was remembered
    assert rig.proc.enqueue_click(3)
    assert rig.state(3) == "face_up"


def test_matched_cards_ignore_clicks() -> None:
    rig = _Rig()
    rig.start(4, 4, MATCH_FIRST)
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(1)
    rig.rec.clear()
    assert not rig.proc.enqueue_click(0)
    assert rig.rec.events == []


def test_restart_during_settling_cancels_reversal() -> None:
    rig = _Rig()
    rig.start(4, 4, MISMATCH_FIRST)
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)
    assert rig.proc.reversal_pending

    rig.proc.restart_game()
    assert not rig.proc.reversal_pending
    assert rig.scheduler.pending_count() == 0
    assert rig.proc.turns == 0
    assert rig.proc.phase == "idle"
    assert rig.rec.of_type(GAME_STARTED)

    rig.rec.clear()
    rig.scheduler.advance(DELAY * 2)
    assert rig.rec.of_type(CARD_FLIPPED_BACK) == []
    assert rig.proc.grid is not None
    assert all(c.state == "face_down" for c in rig.proc.grid.cards)


def test_end_game_cancels_reversal() -> None:
    rig = _Rig()
    rig.start(4, 4, MISMATCH_FIRST)
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(2)
    rig.proc.end_game()
    assert not rig.proc.active
    assert rig.proc.grid is None
    assert rig.scheduler.advance(DELAY) == 0


def test_clearing_the_board_wins_and_stops_input() -> None:
    rig = _Rig()
    rig.start(2, 2, [0, 0, 1, 1])
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(1)
    assert rig.checkpoints == [1]
    assert rig.rec.of_type(GAME_WON) == []

    rig.proc.enqueue_click(2)
    rig.proc.enqueue_click(3)
    assert rig.rec.of_type(GAME_WON) == [{"type": GAME_WON}]
    assert not rig.proc.active
    assert rig.checkpoints == [1]  # the winning match is not checkpointed
    assert rig.proc.grid is not None and rig.proc.grid.is_complete()
    assert not rig.proc.enqueue_click(0)


def test_missing_scoring_engine_falls_back_to_one_point() -> None:
    rig = _Rig(with_scoring=False)
    rig.start(4, 4, MATCH_FIRST)
    for index in (0, 1, 4, 5, 6, 7, 9, 10):
        rig.proc.enqueue_click(index)
    assert rig.proc.matched_pairs == 4
    assert rig.proc.score == 4
    assert rig.payloads(SCORE_CHANGED, "score") == [1, 2, 3, 4]


def test_new_game_announces_counters() -> None:
    rig = _Rig()
    rig.proc.start_new_game(3, 4)
    types = rig.rec.types()
    assert types.index(SCORE_CHANGED) < types.index(GAME_STARTED)
    assert rig.rec.of_type(PAIRS_CHANGED)[-1] == {"type": PAIRS_CHANGED, "matched": 0, "total": 6}
    assert rig.proc.active


def test_only_cards_in_play_are_revealed() -> None:
    rig = _Rig()
    rig.start(4, 4, MISMATCH_FIRST)
    assert rig.proc.grid is not None
    rig.proc.enqueue_click(6)
    revealed = [c.index for c in rig.proc.grid.cards if c.is_revealed]
    assert revealed == [c.index for c in rig.proc.flipped_cards] == [6]


def test_three_card_capacity_matches_on_first_two() -> None:
    rig = _Rig(max_flipped=3)
    rig.start(2, 3, [0, 0, 1, 1, 2, 2])
    rig.proc.enqueue_click(0)
    rig.proc.enqueue_click(1)
    assert rig.proc.turns == 0  # set not full yet
    rig.proc.enqueue_click(2)

    assert rig.proc.turns == 1
    assert rig.proc.matched_pairs == 1
    assert rig.state(0) == "matched" and rig.state(1) == "matched"
    assert rig.state(2) == "face_down"


def test_three_card_capacity_mismatch_reverts_all() -> None:
    rig = _Rig(max_flipped=3)
    rig.start(2, 3, [0, 0, 1, 1, 2, 2])
    for index in (0, 2, 1):
        rig.proc.enqueue_click(index)
    assert rig.rec.of_type(MISMATCH_FOUND)
    rig.scheduler.advance(DELAY)
    assert [rig.state(i) for i in (0, 1, 2)] == ["face_down"] * 3
