"""Step variants that wait on external signals or fire side effects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from .presentation import Callback, Control
from .step import StepKind, TutorialStep

if TYPE_CHECKING:  # pragma: no cover
    from .session import TutorialSession

logger = logging.getLogger(__name__)


class MessageStep(TutorialStep):
    """Shows a message and waits for the acknowledgment control."""

    kind = StepKind.MESSAGE

    def render(self) -> None:
        self.show_message()
        pack = self.presentation
        if not self.message or pack is None:
            self.complete()
            return
        pack.add_handler(self._on_acknowledged)
        pack.toggle_button(True)

    def _on_acknowledged(self) -> None:
        self._release()
        self.complete()

    def _release(self) -> None:
        pack = self.presentation
        if pack is not None:
            pack.remove_handler(self._on_acknowledged)
            pack.toggle_button(False)

    def restore(self) -> None:
        super().restore()
        self._release()


class ButtonStep(TutorialStep):
    """Waits for a click on a named control.

    While executing, the control's own handlers are parked and the control is
    attached to the overlay. Completion gives the handlers back, detaches the
    control and fires the parked handlers so the application still reacts to
    the click.
    """

    kind = StepKind.BUTTON

    def __init__(
        self,
        control: str,
        *,
        target: Optional[str] = None,
        message: Optional[str] = None,
        delay: float = 0.0,
        step_id: str = "",
    ) -> None:
        super().__init__(message=message, delay=delay, step_id=step_id)
        self.control_name = control
        self.target_name = target
        self._control: Optional[Control] = None
        self._target: Optional[Control] = None
        self._parked: Optional[List[Callback]] = None

    def init(self) -> None:
        self.restore()
        super().init()
        self._parked = None

    def render(self) -> None:
        self.show_message()
        pack = self.presentation
        control = pack.find_control(self.control_name) if pack is not None else None
        if control is None:
            logger.warning("Control %r not found, skipping button step", self.control_name)
            self.complete()
            return

        target = control
        if self.target_name:
            target = pack.find_control(self.target_name) or control

        self._control = control
        self._target = target
        self._parked = list(control.handlers)
        control.handlers = [self._on_click]
        pack.toggle_button(False)
        pack.attach(target)

    def _on_click(self) -> None:
        self.complete()

    def complete(self) -> None:
        if self.is_complete:
            return
        self.restore()
        self.invoke_events()
        super().complete()

    def restore(self) -> None:
        super().restore()
        if self._control is None:
            return
        self._control.handlers = list(self._parked or [])
        pack = self.presentation
        if pack is not None and self._target is not None:
            pack.detach(self._target)
        self._control = None
        self._target = None

    def invoke_events(self) -> None:
        if self._parked is not None:
            handlers = list(self._parked)
        else:
            pack = self.presentation
            control = pack.find_control(self.control_name) if pack is not None else None
            handlers = list(control.handlers) if control is not None else []
        for handler in handlers:
            handler()


class SessionWaitStep(TutorialStep):
    """Completes once another named session has finished."""

    kind = StepKind.SESSION

    def __init__(
        self,
        session_name: str,
        *,
        run_session: bool = False,
        message: Optional[str] = None,
        delay: float = 0.0,
        step_id: str = "",
    ) -> None:
        super().__init__(message=message, delay=delay, step_id=step_id)
        self.session_name = session_name
        self.run_session = bool(run_session)
        self._watched: Optional["TutorialSession"] = None

    @property
    def watched(self) -> Optional["TutorialSession"]:
        return self._watched

    def render(self) -> None:
        self.show_message()
        target = None
        if self.session is not None:
            target = self.session.director.find_by_name(self.session_name, include_finished=True)
        if target is None:
            logger.warning("Session %r not found, not waiting on it", self.session_name)
            self.complete()
            return
        if target.is_finished:
            self.complete()
            return

        self._watched = target
        target.add_completion_listener(self._on_session_complete)
        if self.run_session:
            target.run()

    def _on_session_complete(self) -> None:
        self.complete()

    def complete(self) -> None:
        if self.is_complete:
            return
        self._unsubscribe()
        super().complete()

    def restore(self) -> None:
        super().restore()
        self._unsubscribe()

    def _unsubscribe(self) -> None:
        if self._watched is not None:
            self._watched.remove_completion_listener(self._on_session_complete)
            self._watched = None


class ActionStep(TutorialStep):
    """Fires one registered action when the step completes."""

    kind = StepKind.ACTION

    def __init__(
        self,
        action: Optional[Callable[..., Any]] = None,
        *,
        args: Sequence[Any] = (),
        kwargs: Optional[Dict[str, Any]] = None,
        action_name: str = "",
        message: Optional[str] = None,
        delay: float = 0.0,
        step_id: str = "",
    ) -> None:
        super().__init__(message=message, delay=delay, step_id=step_id)
        self.action = action
        self.action_name = action_name or getattr(action, "__name__", "")
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})
        self._firing = False

    def complete(self) -> None:
        if self.is_complete or self._firing:
            return
        if self.action is not None:
            self._firing = True
            try:
                self.action(*self.args, **self.kwargs)
            except Exception:
                logger.exception("Tutorial action %r failed", self.action_name)
            finally:
                self._firing = False
        super().complete()


__all__ = ["MessageStep", "ButtonStep", "SessionWaitStep", "ActionStep"]
