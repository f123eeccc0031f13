"""Pydantic option models with code-baked defaults.

Controllers receive their options as plain mappings (from a module
registration) and validate them into one of these frozen models. Only
overrides need to be supplied.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Controller options ---


class InputOptions(BaseModel):
    """Options shared by every input controller."""

    model_config = {"frozen": True, "extra": "allow"}

    name: str | None = None


class DigitCodeOptions(InputOptions):
    """Segmented digit-code input."""

    length: int = Field(default=4, ge=1)
    name: str | None = "code"


class PhoneMaskOptions(BaseModel):
    """One country format for the phone input.

    ``mask`` syntax: ``0`` is a digit placeholder, ``{...}`` wraps fixed
    characters that belong to the unmasked value, anything else is a literal.
    """

    model_config = {"frozen": True}

    mask: str
    starts_with: str
    country: str
    default: bool = False


def _default_phone_masks() -> list[PhoneMaskOptions]:
    return [
        PhoneMaskOptions(
            mask="+{7} (000) 000-00-00",
            starts_with="7",
            country="Russia",
            default=True,
        ),
        PhoneMaskOptions(
            mask="+{375} (00) 000-00-00",
            starts_with="375",
            country="Belarus",
        ),
    ]


class PhoneOptions(InputOptions):
    """Phone input with dynamic country dispatch."""

    masks: list[PhoneMaskOptions] = Field(default_factory=_default_phone_masks, min_length=1)
