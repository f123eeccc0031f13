"""Single radio button controller."""

from __future__ import annotations

from typing import Any

from formkit.domain.types import InputKind
from formkit.infrastructure.dom import Element, Event
from formkit.inputs.base import BaseInput


class RadioInput(BaseInput):
    """Wraps one radio ``input``.

    Emits ``check`` with the new checked state whenever the user changes it
    or :meth:`set_checked` actually flips it.
    """

    kind = InputKind.RADIO

    def __init__(self, element: Element, options: Any = None) -> None:
        super().__init__(element, options)
        self.element.add_event_listener("change", self._on_change_event)

    def get_checked(self) -> bool:
        return self.element.checked

    def set_checked(self, checked: bool) -> None:
        checked = bool(checked)
        if self.element.checked != checked:
            self.element.checked = checked
            self._on_change_event()

    def set_value(self, value: Any) -> Any:
        # The option value, not the checked state.
        self.element.value = value
        return self.element.value

    def _on_change_event(self, event: Event | None = None) -> None:
        self.emit("check", self.element.checked)
