"""Radio group controller — many radios, one logical value."""

from __future__ import annotations

from typing import Any

from formkit.domain.types import InputKind
from formkit.infrastructure.dom import Element
from formkit.inputs.base import BaseInput
from formkit.inputs.radio import RadioInput


class RadioGroupInput(BaseInput):
    """Owns the radios named by the group element's ``data-name``.

    The group emits ``check`` (and ``change``) carrying the option value each
    time one of its radios becomes checked.
    A radio already checked at construction is reported by :meth:`get_value`;
    construction itself emits nothing.
    """

    kind = InputKind.RADIO_GROUP

    def __init__(self, element: Element, options: Any = None) -> None:
        super().__init__(element, options)
        group_name = self.element.data("name") or ""
        self.radios: list[RadioInput] = [
            RadioInput(radio)
            for radio in self.element.query_all(
                lambda el: el.tag == "input" and el.type == "radio" and el.name == group_name
            )
        ]
        for radio in self.radios:
            radio.on("check", self._make_check_handler(radio))

    def _make_check_handler(self, radio: RadioInput):
        def _on_radio_check(checked: bool) -> None:
            if checked:
                self.emit("check", radio.get_value())
                self.emit("change", radio.get_value())

        return _on_radio_check

    def get_checked(self) -> RadioInput | None:
        """The checked radio, if any."""
        for radio in self.radios:
            if radio.get_checked():
                return radio
        return None

    def get_value(self) -> str | None:
        checked = self.get_checked()
        return None if checked is None else checked.get_value()

    def set_value(self, value: Any) -> bool:
        """Check the first radio whose value matches.

        Returns False, leaving the selection untouched, when none matches.
        """
        for radio in self.radios:
            if radio.get_value() == str(value):
                radio.set_checked(True)
                return True
        return False

    def get_name(self) -> str:
        return self.options.name or self.element.data("name") or ""

    def validate(self) -> bool:
        return not (self.element.required and self.get_value() is None)

    def get_disabled(self) -> bool:
        return self.element.disabled

    def set_disabled(self, disabled: bool) -> bool:
        self.element.disabled = disabled
        for radio in self.radios:
            radio.element.disabled = disabled
        self.set_state("disabled", disabled)
        return disabled
