"""Segmented digit-code input.

One logical value spread over K single-digit cells plus a hidden input that
carries the aggregate under the field name. The cells behave like a single
field: typing a digit advances, Backspace on an empty cell and the arrow keys
at the cell edges move between cells, focusing a cell selects its content so
typing overwrites, and pasting spreads the clipboard over all cells.
"""

from __future__ import annotations

import functools
import re
from typing import Any

from formkit.config.models import DigitCodeOptions
from formkit.domain.types import InputKind
from formkit.infrastructure.dom import Element, Event
from formkit.infrastructure.masking import InputMask, PatternMask
from formkit.inputs.base import ERROR_CLASS, BaseInput

CELL_CLASS = "js-digitCodeInput"

_SINGLE_DIGIT = re.compile(r"[0-9]")


class DigitCodeInput(BaseInput):
    """K-cell code input built inside *container*.

    Parameters:
        container: Element the generated markup is appended to.
        options: ``length`` (default 4) and ``name`` (default ``"code"``).
    """

    kind = InputKind.DIGIT_CODE
    options_model = DigitCodeOptions

    def __init__(self, container: Element, options: Any = None) -> None:
        options = self.coerce_options(options)
        self.hidden = Element("input", {"type": "hidden", "name": options.name})
        self.cells = [
            Element(
                "input",
                {
                    "class": CELL_CLASS,
                    "type": "tel",
                    "maxlength": 1,
                    "autocomplete": "off",
                },
            )
            for _ in range(options.length)
        ]
        element = Element(
            "div",
            {"class": "Input-digit-code"},
            self.hidden,
            Element(
                "div",
                {"class": "Input-digit-code__digits"},
                *(Element("div", {"class": "Input-digit-code__digit"}, cell) for cell in self.cells),
            ),
        )
        super().__init__(element, options)

        self.container = container
        self.container.append_child(self.element)
        self.cell_masks = [InputMask(cell, PatternMask("0")) for cell in self.cells]

        for index, cell in enumerate(self.cells):
            next_cell = self.cells[index + 1] if index + 1 < len(self.cells) else None
            prev_cell = self.cells[index - 1] if index > 0 else None

            cell.add_event_listener(
                "keydown", functools.partial(self._on_key_down, cell, next_cell, prev_cell)
            )
            cell.add_event_listener("input", functools.partial(self._on_input, next_cell))
            cell.add_event_listener("focus", functools.partial(self._on_focus, cell))
            cell.add_event_listener("paste", self._on_paste)

    @property
    def length(self) -> int:
        return self.options.length

    def focus(self) -> bool:
        """Focus the first empty cell, or the first cell when all are filled.

        Returns whether an empty cell was found.
        """
        for cell in self.cells:
            if not cell.value:
                cell.focus()
                return True
        self.cells[0].focus()
        return False

    # ------------------------------------------------------------------
    # Cell events
    # ------------------------------------------------------------------

    def _on_key_down(
        self,
        cell: Element,
        next_cell: Element | None,
        prev_cell: Element | None,
        event: Event,
    ) -> None:
        if event.key == "Backspace" and not cell.value and prev_cell is not None:
            prev_cell.focus()

        if event.key == "ArrowLeft" and not cell.selection_start and prev_cell is not None:
            prev_cell.focus()

        if (
            event.key == "ArrowRight"
            and cell.selection_start == len(cell.value)
            and next_cell is not None
        ):
            next_cell.focus()

    def _on_input(self, next_cell: Element | None, event: Event) -> None:
        if event.data and _SINGLE_DIGIT.fullmatch(event.data) and next_cell is not None:
            next_cell.focus()
        self._emit_on_change()

    def _on_focus(self, cell: Element, event: Event) -> None:
        cell.select()

    def _on_paste(self, event: Event) -> None:
        event.prevent_default()
        self.set_value(event.clipboard_text or "")

    # ------------------------------------------------------------------
    # Value
    # ------------------------------------------------------------------

    def get_value(self) -> str:
        return "".join(cell.value for cell in self.cells)

    def set_value(self, value: Any) -> str:
        """Spread *value* over the cells, one character each.

        Extra characters are dropped and missing ones leave cells empty.
        Cells are written directly, without the per-cell digit mask.
        """
        parts = list("" if value is None else str(value))[: self.length]
        for index, cell in enumerate(self.cells):
            cell.value = parts[index] if index < len(parts) else ""
        self._emit_on_change()
        return self.get_value()

    def _emit_on_change(self) -> None:
        self.hidden.value = self.get_value()
        self.emit("change", self.hidden.value)

    def get_name(self) -> str:
        return self.hidden.name

    def validate(self) -> bool:
        return len(self.get_value()) == self.length

    # ------------------------------------------------------------------
    # Error and disabled state
    # ------------------------------------------------------------------

    async def set_error(self, text: str) -> None:
        for cell in self.cells:
            cell.class_list.add(ERROR_CLASS)
        await super().set_error(text)

    async def reset_error(self) -> None:
        for cell in self.cells:
            cell.class_list.remove(ERROR_CLASS)
        await super().reset_error()

    def get_disabled(self) -> bool:
        return self.hidden.disabled

    def set_disabled(self, disabled: bool) -> bool:
        self.hidden.disabled = disabled
        for cell in self.cells:
            cell.disabled = disabled
        self.set_state("disabled", disabled)
        return disabled
