"""Exceptions raised while configuring tutorial sessions."""

from __future__ import annotations


class TutorialError(Exception):
    """Base class for tutorial configuration failures."""


class ScriptError(TutorialError, ValueError):
    """Raised when a session script is malformed."""


class UnknownActionError(ScriptError):
    """Raised when a script references an action that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tutorial action '{name}'")
        self.name = name


__all__ = ["TutorialError", "ScriptError", "UnknownActionError"]
