"""Plain text input — the default controller for untagged text fields."""

from __future__ import annotations

from formkit.domain.types import InputKind
from formkit.inputs.base import BaseInput


class TextInput(BaseInput):
    """Pass-through controller; all behaviour comes from :class:`BaseInput`."""

    kind = InputKind.TEXT
