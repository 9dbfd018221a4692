from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from dataclasses import dataclass

Event = dict[str, object]
Listener = Callable[[Event], None]

CARD_FLIPPED = "CARD_FLIPPED"
CARD_FLIPPED_BACK = "CARD_FLIPPED_BACK"
CARD_MATCHED = "CARD_MATCHED"
CARD_SET = "CARD_SET"
MATCH_FOUND = "MATCH_FOUND"
MISMATCH_FOUND = "MISMATCH_FOUND"
SCORE_CHANGED = "SCORE_CHANGED"
COMBO_CHANGED = "COMBO_CHANGED"
MULTIPLIER_CHANGED = "MULTIPLIER_CHANGED"
TURNS_CHANGED = "TURNS_CHANGED"
PAIRS_CHANGED = "PAIRS_CHANGED"
GAME_STARTED = "GAME_STARTED"
GAME_WON = "GAME_WON"


@dataclass
class _Subscription:
    callback: Listener
    types: frozenset[str] | None


class EventBus:
    """Synchronous publish/subscribe for core notifications.

    Publishers call ``publish`` only after the state change it reports has
    been committed, so listeners may read the engine freely.
    """

    def __init__(self) -> None:
        self._subs: dict[int, _Subscription] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, callback: Listener, types: Iterable[str] | None = None) -> int:
        token = next(self._tokens)
        self._subs[token] = _Subscription(callback, frozenset(types) if types is not None else None)
        return token

    def unsubscribe(self, token: int) -> bool:
        return self._subs.pop(token, None) is not None

    def publish(self, event_type: str, **payload: object) -> Event:
        event: Event = {"type": event_type, **payload}
        # copy: listeners may unsubscribe while being notified
        for sub in list(self._subs.values()):
            if sub.types is None or event_type in sub.types:
                sub.callback(event)
        return event


class EventRecorder:
    """Listener that keeps every event it sees, for UI polling and tests."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[Event]:
        return [e for e in self.events if e["type"] == event_type]

    def types(self) -> list[str]:
        return [str(e["type"]) for e in self.events]

    def drain(self) -> list[Event]:
        out, self.events = self.events, []
        return out

    def clear(self) -> None:
        self.events.clear()
