"""SubmissionReply — the JSON contract of the submission endpoint.

The server answers ``{"status": "ok"}`` on success, or any other status with
an optional ``fields`` map of ``{name: message}`` describing field errors.
Unknown keys are preserved so hooks can read them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class SubmissionReply(BaseModel):
    """Parsed server reply.

    Attributes:
        status: ``"ok"`` on success, anything else on failure.
        fields: Field-level error messages keyed by field name. A missing or
            ``null`` value is read as no field errors.
    """

    model_config = {"frozen": True, "extra": "allow"}

    status: str
    fields: dict[str, str] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def _null_fields_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def ok(self) -> bool:
        return self.status == "ok"
