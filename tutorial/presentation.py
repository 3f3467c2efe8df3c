"""Presentation collaborator contract and a headless overlay implementation."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

Callback = Callable[[], None]


class Control:
    """Named interactive element with replaceable click handlers."""

    def __init__(self, name: str, handlers: Optional[List[Callback]] = None, parent: object = None) -> None:
        self.name = name
        self.handlers: List[Callback] = list(handlers or [])
        self.parent = parent

    def click(self) -> None:
        for handler in list(self.handlers):
            handler()

    def __repr__(self) -> str:
        return f"Control({self.name!r})"


class Presentation:
    """Fire-and-forget surface used by steps. Every call is a no-op here."""

    def toggle_message(self, visible: bool) -> None:
        pass

    def set_message(self, text: str) -> None:
        pass

    def toggle_button(self, visible: bool) -> None:
        pass

    def toggle_swipe(self, visible: bool) -> None:
        pass

    def play_shroud_in(self) -> None:
        pass

    def play_shroud_out(self) -> None:
        pass

    def add_handler(self, callback: Callback) -> None:
        pass

    def remove_handler(self, callback: Callback) -> None:
        pass

    def acknowledge(self) -> None:
        pass

    def find_control(self, name: str) -> Optional[Control]:
        return None

    def attach(self, control: Control) -> None:
        pass

    def detach(self, control: Control) -> None:
        pass


class Overlay(Presentation):
    """Headless overlay that records what would be visible on screen."""

    def __init__(self) -> None:
        self.message_visible = False
        self.message_text = ""
        self.button_visible = False
        self.swipe_visible = False
        self.shroud_visible = False
        self._handlers: List[Callback] = []
        self._controls: Dict[str, Control] = {}
        self._previous_parents: Dict[str, object] = {}

    def toggle_message(self, visible: bool) -> None:
        self.message_visible = bool(visible)

    def set_message(self, text: str) -> None:
        self.message_text = text

    def toggle_button(self, visible: bool) -> None:
        self.button_visible = bool(visible)

    def toggle_swipe(self, visible: bool) -> None:
        self.swipe_visible = bool(visible)

    def play_shroud_in(self) -> None:
        self.shroud_visible = True

    def play_shroud_out(self) -> None:
        self.shroud_visible = False

    def add_handler(self, callback: Callback) -> None:
        self._handlers.append(callback)

    def remove_handler(self, callback: Callback) -> None:
        if callback in self._handlers:
            self._handlers.remove(callback)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def acknowledge(self) -> None:
        """Dispatch the acknowledgment control's click."""

        for handler in list(self._handlers):
            handler()

    def register_control(self, control: Control) -> Control:
        self._controls[control.name] = control
        return control

    def find_control(self, name: str) -> Optional[Control]:
        return self._controls.get(name)

    @property
    def attached(self) -> List[str]:
        return list(self._previous_parents)

    def attach(self, control: Control) -> None:
        if control.name in self._previous_parents:
            return
        self._previous_parents[control.name] = control.parent
        control.parent = self

    def detach(self, control: Control) -> None:
        if control.name not in self._previous_parents:
            return
        control.parent = self._previous_parents.pop(control.name)


__all__ = ["Callback", "Control", "Presentation", "Overlay"]
