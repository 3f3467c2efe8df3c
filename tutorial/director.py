"""Director arbitrating which tutorial session may run.

Only one session presents at a time. Sessions asking for a turn while
another one is executing wait in strict arrival order; nothing is ever
re-ordered by priority.
"""

from __future__ import annotations

import logging
import weakref
from collections import deque
from functools import lru_cache
from typing import TYPE_CHECKING, Deque, List, Optional, Union

from analytics import TutorialAnalytics
from config import tutorial_settings

from .step import StepKind, TutorialStep
from .timers import ManualScheduler, Scheduler

if TYPE_CHECKING:  # pragma: no cover
    from .session import TutorialSession

logger = logging.getLogger(__name__)


class Director:
    """Registry of live sessions plus the FIFO admission queue."""

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        *,
        analytics: Optional[TutorialAnalytics] = None,
        drain_queue_on_reset: Optional[bool] = None,
    ) -> None:
        if drain_queue_on_reset is None:
            settings = tutorial_settings().get("director", {})
            drain_queue_on_reset = settings.get("drainQueueOnReset", True)
        self.scheduler: Scheduler = scheduler or ManualScheduler()
        self.analytics = analytics or TutorialAnalytics()
        self.drain_queue_on_reset = bool(drain_queue_on_reset)
        self._sessions: List["TutorialSession"] = []
        self._queue: Deque["TutorialSession"] = deque()
        # finished sessions stay discoverable by name without being kept alive
        self._retired: List["weakref.ref[TutorialSession]"] = []

    @property
    def sessions(self) -> List["TutorialSession"]:
        return list(self._sessions)

    @property
    def pending(self) -> List["TutorialSession"]:
        return list(self._queue)

    @property
    def busy(self) -> bool:
        return any(session.is_executing for session in self._sessions)

    def register(self, session: "TutorialSession") -> None:
        if session not in self._sessions:
            self._sessions.append(session)
            logger.debug("Registered %r", session)

    def deregister(self, session: "TutorialSession", promote_next: bool = True) -> None:
        if session in self._sessions:
            self._sessions.remove(session)
            logger.debug("Deregistered %r", session)
            if session.is_finished:
                self._retired = [ref for ref in self._retired if ref() is not None]
                self._retired.append(weakref.ref(session))
        if session in self._queue:
            self._queue.remove(session)
        if promote_next:
            self.run_next()

    def enqueue(self, session: "TutorialSession", run_if_idle: bool = True) -> None:
        if session not in self._queue:
            self._queue.append(session)
            logger.debug("Queued %r (%d waiting)", session, len(self._queue))
        if run_if_idle and not self.busy:
            self.run_next()

    def run_next(self) -> None:
        if self.busy:
            return
        while self._queue:
            session = self._queue.popleft()
            if session.is_executing or session.is_finished:
                logger.debug("Discarding stale queue entry %r", session)
                continue
            session.run()
            return

    def reset(self) -> None:
        """Forget every registered session, and the queue unless configured otherwise."""

        self._sessions.clear()
        self._retired.clear()
        if self.drain_queue_on_reset:
            self._queue.clear()

    def find_by_name(self, name: str, include_finished: bool = False) -> Optional["TutorialSession"]:
        """Return the first registered session whose name contains ``name``.

        With ``include_finished`` the sessions that already completed and left
        the registry are searched afterwards, oldest first.
        """
        for session in self._sessions:
            if name in session.name:
                return session
        if include_finished:
            for ref in self._retired:
                session = ref()
                if session is not None and name in session.name:
                    return session
        return None

    def has_by_name(self, name: str) -> bool:
        return self.find_by_name(name) is not None

    def find_executing_step_of_kind(self, kind: Union[StepKind, str]) -> Optional[TutorialStep]:
        kind = StepKind(kind)
        if not self.busy:
            return None
        for session in self._sessions:
            if session.is_executing:
                step = session.current_step
                if step is not None and step.kind is kind:
                    return step
        return None

    def is_executing_step_of_kind(self, kind: Union[StepKind, str]) -> bool:
        return self.find_executing_step_of_kind(kind) is not None


@lru_cache(maxsize=1)
def get_director() -> Director:
    """Return the lazily created process-wide director.

    Tests and embedders should prefer passing their own :class:`Director`;
    ``get_director.cache_clear()`` drops the shared instance.
    """
    return Director()


__all__ = ["Director", "get_director"]
