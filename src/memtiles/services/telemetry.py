from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from memtiles.engine.events import GAME_STARTED, GAME_WON, MATCH_FOUND, MISMATCH_FOUND, Event, EventBus

DEFAULT_EVENTS = (GAME_STARTED, MATCH_FOUND, MISMATCH_FOUND, GAME_WON)


@dataclass
class TelemetryService:
    path: Path
    _tokens: list[tuple[EventBus, int]] = field(default_factory=list, repr=False)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def attach(self, bus: EventBus, types: Iterable[str] = DEFAULT_EVENTS) -> int:
        token = bus.subscribe(self._on_event, types=types)
        self._tokens.append((bus, token))
        return token

    def detach(self) -> None:
        for bus, token in self._tokens:
            bus.unsubscribe(token)
        self._tokens.clear()

    def _on_event(self, event: Event) -> None:
        payload = {k: v for k, v in event.items() if k != "type"}
        self.log(str(event["type"]), payload)
