"""Input kinds and the submission lifecycle.

Submission phases form a small state machine:
``idle → validating → {idle | submitting} → idle``.
A rejected or cancelled attempt returns to idle without ever locking.
"""

from __future__ import annotations

from enum import StrEnum


class InputKind(StrEnum):
    """Tag carried by every input controller variant."""

    TEXT = "text"
    DIGIT_CODE = "digit-code"
    PHONE = "phone"
    RADIO = "radio"
    RADIO_GROUP = "radio-group"


class SubmitPhase(StrEnum):
    """Phase of a form's submission lifecycle."""

    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"


SUBMIT_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["validating"],
    "validating": ["idle", "submitting"],
    "submitting": ["idle"],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    return target in transitions.get(current, [])


def is_list_name(name: str | None) -> bool:
    """Whether a field name declares list semantics (``[]`` suffix)."""
    return bool(name) and name.endswith("[]")
