"""Registry of named actions that side-effect steps may fire."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from .errors import UnknownActionError

Action = Callable[..., Any]


class ActionRegistry:
    """Static mapping from action identifiers to callables.

    Names are resolved when a script is loaded, so a typo fails while the
    session is being built rather than halfway through a tutorial.
    """

    def __init__(self, actions: Optional[Dict[str, Action]] = None) -> None:
        self._actions: Dict[str, Action] = {}
        for name, action in (actions or {}).items():
            self.register(name, action)

    def register(self, name: str, action: Optional[Action] = None):
        """Register ``action`` under ``name``; usable as a decorator."""

        if not name:
            raise ValueError("Action name must be a non-empty string")

        def decorator(func: Action) -> Action:
            if not callable(func):
                raise TypeError(f"Action '{name}' must be callable")
            self._actions[name] = func
            return func

        if action is None:
            return decorator
        return decorator(action)

    def unregister(self, name: str) -> None:
        self._actions.pop(name, None)

    def resolve(self, name: str) -> Action:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name) from None

    def names(self) -> List[str]:
        return sorted(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions


__all__ = ["Action", "ActionRegistry"]
