"""Scene controller that owns tutorial sessions and their overlay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from analytics import TutorialAnalytics
from tutorial.actions import ActionRegistry
from tutorial.director import Director
from tutorial.loader import ScriptLoader, SessionBuilder
from tutorial.presentation import Control, Overlay
from tutorial.session import TutorialSession
from tutorial.timers import Scheduler


@dataclass
class SceneState:
    """Serializable snapshot consumed by the UI layer."""

    active: Optional[str]
    step: Optional[int]
    total_steps: int
    message: Optional[str]
    message_visible: bool
    button_visible: bool
    queued: List[str]
    busy: bool


class TutorialScene:
    """High-level façade that wires sessions, the director and the overlay."""

    def __init__(
        self,
        director: Optional[Director] = None,
        *,
        overlay: Optional[Overlay] = None,
        actions: Optional[ActionRegistry] = None,
        script_loader: Optional[ScriptLoader] = None,
        scheduler: Optional[Scheduler] = None,
        analytics: Optional[TutorialAnalytics] = None,
    ) -> None:
        self.director = director or Director(scheduler, analytics=analytics)
        self.overlay = overlay or Overlay()
        self.actions = actions or ActionRegistry()
        self.analytics: TutorialAnalytics = self.director.analytics
        self._builder = SessionBuilder(
            self.director,
            actions=self.actions,
            presentation=self.overlay,
            script_loader=script_loader,
        )
        self._sessions: Dict[str, TutorialSession] = {}

    def register_control(self, name: str, handler: Optional[Callable[[], None]] = None) -> Control:
        handlers = [handler] if handler is not None else []
        return self.overlay.register_control(Control(name, handlers))

    def load(self, script_id: str) -> TutorialSession:
        session = self._sessions.get(script_id)
        if session is None:
            session = self._builder.load(script_id)
            self._sessions[script_id] = session
            session.activate()
        return session

    def start(self, script_id: str) -> SceneState:
        self.load(script_id).queue()
        return self.state()

    def session(self, script_id: str) -> Optional[TutorialSession]:
        return self._sessions.get(script_id)

    def acknowledge(self) -> SceneState:
        self.overlay.acknowledge()
        return self.state()

    def click(self, control_name: str) -> SceneState:
        control = self.overlay.find_control(control_name)
        if control is not None:
            control.click()
        return self.state()

    def active_session(self) -> Optional[TutorialSession]:
        for session in self.director.sessions:
            if session.is_executing:
                return session
        return None

    def state(self) -> SceneState:
        session = self.active_session()
        step = session.current_step if session else None
        return SceneState(
            active=session.name if session else None,
            step=session.current_step_index if session else None,
            total_steps=session.total_steps if session else 0,
            message=step.message if step else None,
            message_visible=self.overlay.message_visible,
            button_visible=self.overlay.button_visible,
            queued=[queued.name for queued in self.director.pending],
            busy=self.director.busy,
        )

    def teardown(self) -> None:
        # drop the queue first so terminating one session cannot promote another
        self.director.reset()
        for session in list(self._sessions.values()):
            if not session.is_finished:
                session.terminate()
        self._sessions.clear()


__all__ = ["TutorialScene", "SceneState"]
