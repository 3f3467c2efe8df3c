"""Loading and validating tutorial session scripts."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from analytics import TutorialAnalytics
from config import tutorial_settings

from .actions import ActionRegistry
from .director import Director
from .errors import ScriptError
from .presentation import Presentation
from .session import TutorialSession
from .step import StepKind, TutorialStep
from .steps import ActionStep, ButtonStep, MessageStep, SessionWaitStep


def default_scripts_path() -> Path:
    return Path(__file__).with_name(tutorial_settings().get("scriptsPath", "scripts"))


@dataclass(frozen=True)
class StepDefinition:
    """Static description of a single step."""

    kind: StepKind
    id: str = ""
    message: Optional[str] = None
    delay: float = 0.0
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionDefinition:
    """Parsed representation of a session script."""

    id: str
    name: str
    steps: List[StepDefinition]
    auto_advance: bool = False
    start_delay: float = 0.0
    run_on_start: bool = False


class ScriptLoader:
    """Abstract loader for session scripts."""

    def load(self, script_id: str) -> Dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError


class FileSystemScriptLoader(ScriptLoader):
    """Loads session definitions from ``tutorial/scripts``."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        self._base_path = base_path or default_scripts_path()

    def load(self, script_id: str) -> Dict[str, Any]:
        path = self._base_path / f"{script_id}.json"
        if not path.exists():
            raise FileNotFoundError(f"Tutorial script '{script_id}' not found at {path}")
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)


_REQUIRED_KEYS = {
    StepKind.BUTTON: "control",
    StepKind.SESSION: "session",
    StepKind.ACTION: "action",
}


def _parse_delay(value: Any, where: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ScriptError(f"{where}: delay must be numeric")
    if value < 0:
        raise ScriptError(f"{where}: delay must be >= 0")
    return float(value)


def _parse_bool(value: Any, where: str, key: str) -> bool:
    if not isinstance(value, bool):
        raise ScriptError(f"{where}: {key} must be true or false")
    return value


def parse_step(raw: Dict[str, Any], index: int = 0) -> StepDefinition:
    where = f"step {index}"
    if not isinstance(raw, dict):
        raise ScriptError(f"{where}: expected an object")
    try:
        kind = StepKind(raw.get("kind", StepKind.GENERIC.value))
    except ValueError:
        raise ScriptError(f"{where}: unknown step kind {raw.get('kind')!r}") from None

    required = _REQUIRED_KEYS.get(kind)
    if required and not raw.get(required):
        raise ScriptError(f"{where}: '{kind.value}' steps need a '{required}' entry")
    if kind is StepKind.ACTION:
        if not isinstance(raw.get("args", []), list):
            raise ScriptError(f"{where}: args must be a list")
        if not isinstance(raw.get("kwargs", {}), dict):
            raise ScriptError(f"{where}: kwargs must be an object")
    if kind is StepKind.SESSION:
        _parse_bool(raw.get("runSession", False), where, "runSession")

    params = {key: value for key, value in raw.items() if key not in ("kind", "id", "message", "delay")}
    return StepDefinition(
        kind=kind,
        id=str(raw.get("id", "")),
        message=raw.get("message") or None,
        delay=_parse_delay(raw.get("delay", 0), where),
        params=params,
    )


def parse_session(raw: Dict[str, Any]) -> SessionDefinition:
    """Validate a raw script; malformed input raises :class:`ScriptError`."""

    if not isinstance(raw, dict):
        raise ScriptError("Session script must be an object")
    steps_raw = raw.get("steps", [])
    if not isinstance(steps_raw, list):
        raise ScriptError("'steps' must be a list")

    defaults = tutorial_settings()
    script_id = str(raw.get("id", ""))
    return SessionDefinition(
        id=script_id,
        name=str(raw.get("name", script_id)),
        steps=[parse_step(entry, index) for index, entry in enumerate(steps_raw)],
        auto_advance=_parse_bool(raw.get("autoAdvance", bool(defaults.get("autoAdvance", False))), "session", "autoAdvance"),
        start_delay=_parse_delay(raw.get("startDelay", defaults.get("startDelay", 0)), "session"),
        run_on_start=_parse_bool(raw.get("runOnStart", False), "session", "runOnStart"),
    )


class SessionBuilder:
    """Turns session definitions into wired :class:`TutorialSession` objects."""

    def __init__(
        self,
        director: Director,
        *,
        actions: Optional[ActionRegistry] = None,
        presentation: Optional[Presentation] = None,
        analytics: Optional[TutorialAnalytics] = None,
        script_loader: Optional[ScriptLoader] = None,
    ) -> None:
        self.director = director
        self.actions = actions or ActionRegistry()
        self.presentation = presentation
        self.analytics = analytics
        self._loader = script_loader or FileSystemScriptLoader()

    def load(self, script_id: str) -> TutorialSession:
        return self.build(parse_session(self._loader.load(script_id)))

    def build(self, definition: SessionDefinition) -> TutorialSession:
        # resolve everything before the session exists so nothing half-built registers
        steps = [self.build_step(step) for step in definition.steps]
        return TutorialSession(
            steps,
            name=definition.name,
            auto_advance=definition.auto_advance,
            start_delay=definition.start_delay,
            run_on_start=definition.run_on_start,
            director=self.director,
            presentation=self.presentation,
            analytics=self.analytics,
        )

    def build_step(self, definition: StepDefinition) -> TutorialStep:
        common = {"message": definition.message, "delay": definition.delay, "step_id": definition.id}
        params = definition.params
        if definition.kind is StepKind.MESSAGE:
            return MessageStep(**common)
        if definition.kind is StepKind.BUTTON:
            return ButtonStep(params["control"], target=params.get("target"), **common)
        if definition.kind is StepKind.SESSION:
            return SessionWaitStep(params["session"], run_session=bool(params.get("runSession", False)), **common)
        if definition.kind is StepKind.ACTION:
            name = params["action"]
            return ActionStep(
                self.actions.resolve(name),
                args=params.get("args", []),
                kwargs=params.get("kwargs", {}),
                action_name=name,
                **common,
            )
        return TutorialStep(**common)


__all__ = [
    "StepDefinition",
    "SessionDefinition",
    "ScriptLoader",
    "FileSystemScriptLoader",
    "SessionBuilder",
    "parse_session",
    "parse_step",
    "default_scripts_path",
]
