"""Delay primitives used by steps and sessions.

Everything runs on a single logical thread. A scheduler only promises to call
the callback later on that same thread; it never preempts running code.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class Handle(Protocol):
    def cancel(self) -> None:  # pragma: no cover - interface
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle:  # pragma: no cover - interface
        ...


class _ManualHandle:
    def __init__(self, due: float) -> None:
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock advanced explicitly by the owner.

    Callbacks fire in due order when :meth:`advance` moves the clock past
    their deadline. Ties fire in scheduling order.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = itertools.count()
        self._heap: List[Tuple[float, int, _ManualHandle, Callable[[], None]]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._heap if not handle.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(delay, 0.0))
        heapq.heappush(self._heap, (handle.due, next(self._counter), handle, callback))
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward and return the number of callbacks fired."""

        target = self._now + max(seconds, 0.0)
        fired = 0
        # Callbacks may schedule new work; keep draining until nothing is due.
        while self._heap and self._heap[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = due
            callback()
            fired += 1
        self._now = target
        return fired


class LoopScheduler:
    """Schedules callbacks on an ``asyncio`` event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback)


class Timer:
    """One-shot timer bound to a scheduler."""

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self.delay = delay
        self._callback = callback
        self._handle: Optional[Handle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


__all__ = ["Handle", "Scheduler", "ManualScheduler", "LoopScheduler", "Timer"]
