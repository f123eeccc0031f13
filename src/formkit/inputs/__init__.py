"""Input controllers — one variant per kind of field.

All variants implement :class:`formkit.inputs.base.InputController`.
"""

from formkit.inputs.base import BaseInput, InputController
from formkit.inputs.digit_code import DigitCodeInput
from formkit.inputs.phone import PhoneInput
from formkit.inputs.radio import RadioInput
from formkit.inputs.radio_group import RadioGroupInput
from formkit.inputs.text import TextInput

__all__ = [
    "BaseInput",
    "DigitCodeInput",
    "InputController",
    "PhoneInput",
    "RadioGroupInput",
    "RadioInput",
    "TextInput",
]
