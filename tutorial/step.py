"""Base tutorial step and its lifecycle."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .presentation import Presentation
from .timers import Timer

if TYPE_CHECKING:  # pragma: no cover
    from .session import TutorialSession

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    GENERIC = "generic"
    MESSAGE = "message"
    BUTTON = "button"
    SESSION = "session"
    ACTION = "action"


class StepState(str, Enum):
    NOT_STARTED = "not_started"
    EXECUTING = "executing"
    COMPLETE = "complete"


class TutorialStep:
    """Single unit of tutorial work.

    The generic step shows its message (if any) and completes as soon as its
    work phase runs. Variants override :meth:`render` to wait on an external
    signal instead.
    """

    kind = StepKind.GENERIC

    def __init__(self, *, message: Optional[str] = None, delay: float = 0.0, step_id: str = "") -> None:
        if delay < 0:
            raise ValueError(f"Step delay must be >= 0, got {delay}")
        self.id = step_id
        self.message = message
        self.delay = float(delay)
        self.is_complete = False
        self.is_executing = False
        self.session: Optional["TutorialSession"] = None
        self._timer: Optional[Timer] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, state={self.state.value})"

    @property
    def state(self) -> StepState:
        if self.is_complete:
            return StepState.COMPLETE
        if self.is_executing:
            return StepState.EXECUTING
        return StepState.NOT_STARTED

    @property
    def can_execute(self) -> bool:
        return not self.is_complete and not self.is_executing

    @property
    def presentation(self) -> Optional[Presentation]:
        if self.session is None:
            return None
        return self.session.presentation

    def bind(self, session: "TutorialSession") -> None:
        if self.session is not None and self.session is not session:
            raise ValueError(f"{self!r} already belongs to session {self.session.name!r}")
        self.session = session

    def init(self) -> None:
        self._cancel_timer()
        self.is_executing = False
        self.is_complete = False

    def pre_execute(self) -> None:
        """Hook for seizing external resources before any step executes."""

    def execute(self) -> None:
        if self.is_executing or self.is_complete:
            logger.debug("Ignoring execute() on %r", self)
            return
        self.is_executing = True
        if self.delay > 0 and self.session is not None:
            self._timer = Timer(self.session.scheduler, self.delay, self._delayed_execution)
            self._timer.start()
        else:
            self.render()

    def _delayed_execution(self) -> None:
        self._timer = None
        if self.is_complete or not self.is_executing:
            return
        self.render()

    def render(self) -> None:
        """Work phase: present the message, then finish."""

        self.show_message()
        self.complete()

    def show_message(self) -> None:
        pack = self.presentation
        if pack is None:
            return
        if self.message:
            pack.toggle_swipe(False)
            pack.toggle_message(True)
            pack.set_message(self.message)
            pack.play_shroud_in()
        else:
            self.hide_message()

    def hide_message(self) -> None:
        pack = self.presentation
        if pack is None:
            return
        pack.play_shroud_out()
        pack.toggle_message(False)
        pack.toggle_swipe(False)

    def complete(self) -> None:
        if self.is_complete:
            logger.debug("Ignoring duplicate completion of %r", self)
            return
        was_executing = self.is_executing
        self.is_complete = True
        self.is_executing = False
        self._cancel_timer()
        # a halted step no longer owns the overlay
        if was_executing:
            self.hide_message()
        if self.session is not None:
            self.session.on_step_complete(self)

    def halt(self) -> None:
        """Abandon an in-flight execution without completing.

        Releases whatever the step seized through :meth:`restore` and clears
        its message if it was the one on screen.
        """
        was_executing = self.is_executing
        self.restore()
        self.is_executing = False
        if was_executing:
            self.hide_message()

    def restore(self) -> None:
        self._cancel_timer()

    def invoke_events(self) -> None:
        pass

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["StepKind", "StepState", "TutorialStep"]
