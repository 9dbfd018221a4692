from __future__ import annotations

import pytest

from memtiles.engine.flow import TRANSITIONS, AppFlow


def test_play_through_to_game_over_and_back() -> None:
    flow = AppFlow()
    assert flow.state == "main_menu"

    tr = flow.dispatch("play")
    assert tr is not None and tr.effects == ("start_new_game",)
    assert flow.state == "gameplay"

    tr = flow.dispatch("game_won")
    assert tr is not None and tr.effects == ()  # the session drops its own save on a win
    assert flow.state == "game_over"

    tr = flow.dispatch("quit_to_menu")
    assert tr is not None and tr.effects == ()
    assert flow.state == "main_menu"
    assert [h[1] for h in flow.history] == ["play", "game_won", "quit_to_menu"]


def test_continue_loads_and_quitting_abandons() -> None:
    flow = AppFlow()
    tr = flow.dispatch("continue")
    assert tr is not None and tr.effects == ("load_game",)
    tr = flow.dispatch("quit_to_menu")
    assert tr is not None and tr.effects == ("abandon_game",)
    assert flow.state == "main_menu"


def test_restart_from_gameplay_and_game_over() -> None:
    flow = AppFlow("gameplay")
    tr = flow.dispatch("restart")
    assert tr is not None and tr.effects == ("restart_game",)
    assert flow.state == "gameplay"

    flow = AppFlow("game_over")
    tr = flow.dispatch("restart")
    assert tr is not None and tr.effects == ("restart_game",)
    assert flow.state == "gameplay"


def test_settings_round_trip() -> None:
    flow = AppFlow()
    assert flow.dispatch("open_settings") is not None
    assert flow.state == "settings"
    assert not flow.can("play")
    assert flow.dispatch("close_settings") is not None
    assert flow.state == "main_menu"


@pytest.mark.parametrize(
    "state,event",
    [
        ("main_menu", "game_won"),
        ("main_menu", "restart"),
        ("settings", "play"),
        ("gameplay", "continue"),
        ("gameplay", "play"),
        ("game_over", "game_won"),
    ],
)
def test_unknown_pairs_are_ignored(state: str, event: str) -> None:
    flow = AppFlow(state)  # type: ignore[arg-type]
    assert not flow.can(event)  # type: ignore[arg-type]
    assert flow.dispatch(event) is None  # type: ignore[arg-type]
    assert flow.state == state
    assert flow.history == []


def test_every_transition_targets_a_known_state() -> None:
    states = {s for s, _ in TRANSITIONS}
    assert {tr.next_state for tr in TRANSITIONS.values()} <= states
