"""Phone input with per-country masks.

The mask is re-chosen on every keystroke from the digits typed so far:
a format matches when its prefix starts the number or the number is still
a prefix of it (``"37"`` keeps Belarus ``375`` in play). Without any match
the first configured format is used.
"""

from __future__ import annotations

import re
from typing import Any

from formkit.config.models import PhoneOptions
from formkit.domain.types import InputKind
from formkit.infrastructure.dom import Element
from formkit.infrastructure.masking import DynamicMask, InputMask, PatternMask
from formkit.inputs.base import BaseInput

_NON_DIGIT = re.compile(r"\D")


def dispatch_by_prefix(appended: str, dynamic: DynamicMask) -> PatternMask:
    """Pick the compiled mask for the number typed so far."""
    number = _NON_DIGIT.sub("", dynamic.value + appended)
    for mask in dynamic.compiled_masks:
        if number.startswith(mask.starts_with) or mask.starts_with.startswith(number):
            return mask
    return dynamic.compiled_masks[0]


class PhoneInput(BaseInput):
    """Masked phone number field."""

    kind = InputKind.PHONE
    options_model = PhoneOptions

    def __init__(self, element: Element, options: Any = None) -> None:
        super().__init__(element, options)
        masks = [
            PatternMask(
                spec.mask,
                starts_with=spec.starts_with,
                country=spec.country,
                default=spec.default,
            )
            for spec in self.options.masks
        ]
        self.mask = InputMask(self.element, DynamicMask(masks, dispatch_by_prefix))

    @property
    def country(self) -> str:
        """Country of the currently applied format."""
        return self.mask.mask.current.country

    def validate(self) -> bool:
        return self.mask.is_complete

    def get_value(self) -> str:
        return self.mask.value

    def set_value(self, value: Any) -> str:
        self.mask.unmasked_value = _NON_DIGIT.sub("", "" if value is None else str(value))
        self.emit("change", self.mask.value)
        return self.mask.unmasked_value
