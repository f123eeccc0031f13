"""Exception hierarchy for form submission.

Validation failures are soft: rule predicates fold into a boolean and are
never raised. Everything that rejects a submission derives from
:class:`FormError` so callers can catch the family at once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formkit.domain.reply import SubmissionReply

ALREADY_SUBMITTING = "already submitting"
VALIDATION_FAILED = "validation failed"


class FormError(Exception):
    """Base class for submission rejections."""


class SubmissionGuardError(FormError):
    """Submission refused before any network attempt.

    ``reason`` is one of :data:`ALREADY_SUBMITTING` or
    :data:`VALIDATION_FAILED`. No form state changes besides the rejection.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ServerFieldError(FormError):
    """The server answered with a non-``ok`` status."""

    def __init__(self, reply: SubmissionReply) -> None:
        super().__init__(f"server rejected submission with status {reply.status!r}")
        self.reply = reply

    @property
    def fields(self) -> dict[str, str]:
        return dict(self.reply.fields)


class TransportError(FormError):
    """The request could not be completed or its reply could not be parsed."""
