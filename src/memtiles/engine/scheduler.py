from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self._callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        if not self.fired:
            self.cancelled = True

    def _fire(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self._callback()


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualScheduler:
    """One-shot timers on a clock that only moves when ``advance`` is called.

    The pygame loop advances it by the frame ``dt``; tests advance it by hand.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
        return handle

    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._heap if h.pending)

    def advance(self, dt: float) -> int:
        """Move the clock forward, firing due timers in order. Returns how many fired."""
        target = self.now + max(0.0, dt)
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, handle = heapq.heappop(self._heap)
            if not handle.pending:
                continue
            self.now = max(self.now, due)
            handle._fire()
            fired += 1
        self.now = target
        return fired
