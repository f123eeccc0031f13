"""Network collaborator — one request per submission.

The default :class:`HttpxTransport` posts the form payload url-encoded with
an ``X-Requested-With`` header and parses the JSON reply into a
:class:`SubmissionReply`. Any failure surfaces as :class:`TransportError`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Protocol

import httpx
from pydantic import ValidationError

from formkit.config.settings import FormSettings
from formkit.domain.errors import TransportError
from formkit.domain.reply import SubmissionReply

logger = logging.getLogger(__name__)

FormPayload = Sequence[tuple[str, str]]


class Transport(Protocol):
    """Sends a form payload and returns the parsed reply."""

    async def send(self, method: str, url: str, data: FormPayload) -> SubmissionReply: ...


def encode_payload(data: FormPayload) -> dict[str, str | list[str]]:
    """Group repeated names into lists, preserving first-seen order."""
    encoded: dict[str, str | list[str]] = {}
    for name, value in data:
        if name not in encoded:
            encoded[name] = value
            continue
        existing = encoded[name]
        if isinstance(existing, list):
            existing.append(value)
        else:
            encoded[name] = [existing, value]
    return encoded


class HttpxTransport:
    """httpx-backed transport.

    Parameters:
        settings: Timeout and header configuration.
        client: Optional preconfigured ``httpx.AsyncClient`` (for tests or
            connection reuse). The transport never closes a client it was given.
    """

    def __init__(
        self,
        settings: FormSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or FormSettings()
        self._client = client

    async def send(self, method: str, url: str, data: FormPayload) -> SubmissionReply:
        headers = {"X-Requested-With": self._settings.requested_with}
        request_method = (method or self._settings.default_method).upper()
        logger.debug("Submitting form: %s %s (%d fields)", request_method, url, len(data))

        try:
            if self._client is not None:
                response = await self._client.request(
                    request_method, url, data=encode_payload(data), headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self._settings.request_timeout) as client:
                    response = await client.request(
                        request_method, url, data=encode_payload(data), headers=headers
                    )
            return SubmissionReply.model_validate(response.json())
        except httpx.HTTPError as exc:
            msg = f"Request to {url!r} failed: {exc}"
            raise TransportError(msg) from exc
        except (json.JSONDecodeError, ValidationError) as exc:
            msg = f"Malformed reply from {url!r}: {exc}"
            raise TransportError(msg) from exc
