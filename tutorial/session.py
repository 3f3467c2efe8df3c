"""Tutorial session: an ordered list of steps driven one at a time."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from analytics import TutorialAnalytics

from .presentation import Presentation
from .step import TutorialStep
from .timers import Scheduler, Timer

if TYPE_CHECKING:  # pragma: no cover
    from .director import Director

logger = logging.getLogger(__name__)

StepListener = Callable[[Optional[TutorialStep]], None]
CompletionListener = Callable[[], None]


class SessionState(str, Enum):
    READY = "ready"
    RUNNING = "running"
    DONE = "done"


_ORDER = {SessionState.READY: 0, SessionState.RUNNING: 1, SessionState.DONE: 2}


class TutorialSession:
    """Drives a fixed sequence of steps and reports progress to its owner.

    Sessions register with a :class:`~tutorial.director.Director` the first
    time they are activated, queued or run. The director decides when a
    queued session gets its turn; ``run()`` can still be called directly to
    force the current step.
    """

    def __init__(
        self,
        steps: Sequence[TutorialStep],
        *,
        name: str = "",
        auto_advance: bool = False,
        start_delay: float = 0.0,
        run_on_start: bool = False,
        director: Optional["Director"] = None,
        presentation: Optional[Presentation] = None,
        analytics: Optional[TutorialAnalytics] = None,
    ) -> None:
        if start_delay < 0:
            raise ValueError(f"Session start delay must be >= 0, got {start_delay}")
        if director is None:
            from .director import get_director

            director = get_director()
        self.name = name
        self.auto_advance = bool(auto_advance)
        self.start_delay = float(start_delay)
        self.run_on_start = bool(run_on_start)
        self.director = director
        self.presentation = presentation
        self._analytics = analytics
        self._steps: List[TutorialStep] = list(steps)
        for step in self._steps:
            step.bind(self)
        self._current = 0
        self._state: Optional[SessionState] = None
        self._start_timer: Optional[Timer] = None
        self._step_listeners: List[StepListener] = []
        self._completion_listeners: List[CompletionListener] = []

    def __repr__(self) -> str:
        state = self._state.value if self._state else "new"
        return f"TutorialSession(name={self.name!r}, step={self._current}/{len(self._steps)}, state={state})"

    # ------------------------------------------------------------------
    # shared context
    # ------------------------------------------------------------------
    @property
    def scheduler(self) -> Scheduler:
        return self.director.scheduler

    @property
    def analytics(self) -> TutorialAnalytics:
        return self._analytics or self.director.analytics

    # ------------------------------------------------------------------
    # listeners
    # ------------------------------------------------------------------
    def add_step_listener(self, listener: StepListener) -> None:
        self._step_listeners.append(listener)

    def remove_step_listener(self, listener: StepListener) -> None:
        if listener in self._step_listeners:
            self._step_listeners.remove(listener)

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._completion_listeners.append(listener)

    def remove_completion_listener(self, listener: CompletionListener) -> None:
        if listener in self._completion_listeners:
            self._completion_listeners.remove(listener)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def init(self) -> None:
        if self._state is not None:
            return
        self._state = SessionState.READY
        self.director.register(self)

    def activate(self) -> None:
        """Start-up hook for owners; admits the session when ``run_on_start`` is set."""

        self.init()
        if not self.run_on_start:
            return
        if self.start_delay > 0:
            self._start_timer = Timer(self.scheduler, self.start_delay, self._on_start_delay)
            self._start_timer.start()
        else:
            self.queue()

    def _on_start_delay(self) -> None:
        self._start_timer = None
        self.queue()

    def destroy(self) -> None:
        if self._start_timer is not None:
            self._start_timer.cancel()
            self._start_timer = None
        self.director.deregister(self)

    def queue(self) -> None:
        self.init()
        self.analytics.track_session_queued(self.name)
        self.director.enqueue(self)

    def run(self) -> None:
        self.init()
        if self._state is SessionState.DONE:
            logger.debug("Ignoring run() on finished %r", self)
            return

        if self._state is SessionState.READY:
            self._transition(SessionState.RUNNING)
            self.analytics.track_session_started(self.name)
            pending = self._steps[self._current:]
            # arm every remaining step before any of them seizes resources
            for step in pending:
                step.init()
            for step in pending:
                step.pre_execute()

        step = self.current_step
        if step is not None and step.can_execute:
            step.execute()

    def terminate(self, invoke_last_step: bool = False) -> None:
        self.init()
        if self._state is SessionState.DONE:
            logger.debug("Ignoring terminate() on finished %r", self)
            return
        if self._steps:
            self._current = len(self._steps) - 1
            if invoke_last_step:
                self._steps[self._current].invoke_events()
            if self._state is not SessionState.READY:
                for step in self._steps:
                    step.restore()
        self._transition(SessionState.DONE)
        self.analytics.track_session_terminated(self.name, self._current)
        self.director.deregister(self)

    # ------------------------------------------------------------------
    # progression
    # ------------------------------------------------------------------
    def on_step_complete(self, step: Optional[TutorialStep]) -> None:
        if self._state is SessionState.DONE:
            logger.debug("Ignoring completion of %r on finished %r", step, self)
            return
        if step is not None and step is not self.current_step:
            logger.debug("Ignoring stale completion of %r on %r", step, self)
            return
        if self._current >= len(self._steps):
            return

        index = self._current
        self._current += 1
        if step is None:
            self.analytics.track_step_skipped(self.name, index)
        else:
            self.analytics.track_step_completed(self.name, index, step.kind.value)

        for listener in list(self._step_listeners):
            listener(step)

        if self._current >= len(self._steps):
            self._transition(SessionState.DONE)
            self.analytics.track_session_completed(self.name, len(self._steps))
            for listener in list(self._completion_listeners):
                listener()
            self.director.deregister(self)
        elif self.auto_advance:
            self.run()

    def skip(self) -> None:
        step = self.current_step
        if step is not None:
            step.halt()
        self.on_step_complete(None)

    def skip_to(self, index: int) -> None:
        clamped = min(max(int(index), 0), len(self._steps))
        if clamped != index:
            logger.warning("skip_to(%s) clamped to %s on %r", index, clamped, self)
        self._current = clamped

    def skip_to_end(self) -> None:
        self._current = max(len(self._steps) - 1, 0)

    def _transition(self, state: SessionState) -> None:
        current = self._state or SessionState.READY
        if _ORDER[state] < _ORDER[current]:
            raise RuntimeError(f"Illegal session transition {current.value} -> {state.value}")
        if state is not self._state:
            logger.debug("%r: %s -> %s", self, current.value, state.value)
        self._state = state

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    @property
    def state(self) -> Optional[SessionState]:
        return self._state

    @property
    def steps(self) -> List[TutorialStep]:
        return list(self._steps)

    @property
    def current_step_index(self) -> int:
        return self._current

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def current_step(self) -> Optional[TutorialStep]:
        if 0 <= self._current < len(self._steps):
            return self._steps[self._current]
        return None

    @property
    def is_last_step(self) -> bool:
        if not self._steps:
            return True
        return self._current == len(self._steps) - 1

    @property
    def is_executing(self) -> bool:
        step = self.current_step
        if step is None:
            return False
        return step.is_executing and not step.is_complete

    @property
    def is_finished(self) -> bool:
        return self._state is SessionState.DONE


__all__ = ["SessionState", "TutorialSession"]
