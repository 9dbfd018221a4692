from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AppState = Literal["main_menu", "settings", "gameplay", "game_over"]
AppEvent = Literal["play", "continue", "open_settings", "close_settings", "game_won", "restart", "quit_to_menu"]
Effect = Literal["start_new_game", "load_game", "restart_game", "abandon_game"]


@dataclass(frozen=True)
class Transition:
    next_state: AppState
    effects: tuple[Effect, ...] = ()


TRANSITIONS: dict[tuple[AppState, AppEvent], Transition] = {
    ("main_menu", "play"): Transition("gameplay", ("start_new_game",)),
    ("main_menu", "continue"): Transition("gameplay", ("load_game",)),
    ("main_menu", "open_settings"): Transition("settings"),
    ("settings", "close_settings"): Transition("main_menu"),
    ("gameplay", "game_won"): Transition("game_over"),
    ("gameplay", "restart"): Transition("gameplay", ("restart_game",)),
    ("gameplay", "quit_to_menu"): Transition("main_menu", ("abandon_game",)),
    ("game_over", "restart"): Transition("gameplay", ("restart_game",)),
    ("game_over", "play"): Transition("gameplay", ("start_new_game",)),
    ("game_over", "quit_to_menu"): Transition("main_menu"),
}


class AppFlow:
    """Top-level application state, driven purely by the transition table."""

    def __init__(self, state: AppState = "main_menu") -> None:
        self.state: AppState = state
        self.history: list[tuple[AppState, AppEvent, AppState]] = []

    def can(self, event: AppEvent) -> bool:
        return (self.state, event) in TRANSITIONS

    def dispatch(self, event: AppEvent) -> Transition | None:
        tr = TRANSITIONS.get((self.state, event))
        if tr is None:
            return None
        self.history.append((self.state, event, tr.next_state))
        self.state = tr.next_state
        return tr
