"""Tutorial package: steps, sessions and the director that schedules them."""

from .actions import ActionRegistry
from .director import Director, get_director
from .errors import ScriptError, TutorialError, UnknownActionError
from .loader import FileSystemScriptLoader, SessionBuilder, parse_session
from .presentation import Control, Overlay, Presentation
from .session import SessionState, TutorialSession
from .step import StepKind, StepState, TutorialStep
from .steps import ActionStep, ButtonStep, MessageStep, SessionWaitStep
from .timers import LoopScheduler, ManualScheduler, Timer

__all__ = [
    "ActionRegistry",
    "ActionStep",
    "ButtonStep",
    "Control",
    "Director",
    "FileSystemScriptLoader",
    "LoopScheduler",
    "ManualScheduler",
    "MessageStep",
    "Overlay",
    "Presentation",
    "ScriptError",
    "SessionBuilder",
    "SessionState",
    "SessionWaitStep",
    "StepKind",
    "StepState",
    "Timer",
    "TutorialError",
    "TutorialSession",
    "TutorialStep",
    "UnknownActionError",
    "get_director",
    "parse_session",
]
