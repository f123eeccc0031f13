"""Shared pytest fixtures and test helpers for formkit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from formkit.config.settings import FormSettings
from formkit.domain.reply import SubmissionReply
from formkit.infrastructure.dom import Document, Element


class FakeTransport:
    """Records every send and answers with a canned reply.

    Set ``gate`` to an :class:`asyncio.Event` to hold the reply until the
    test releases it; ``on_send`` runs inside the send, while the form is
    locked.
    """

    def __init__(
        self,
        reply: dict[str, Any] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.reply = reply if reply is not None else {"status": "ok"}
        self.error = error
        self.gate: asyncio.Event | None = None
        self.on_send: Callable[[], None] | None = None
        self.calls: list[tuple[str, str, list[tuple[str, str]]]] = []

    async def send(self, method: str, url: str, data: Any) -> SubmissionReply:
        self.calls.append((method, url, list(data)))
        if self.on_send is not None:
            self.on_send()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return SubmissionReply.model_validate(self.reply)


@pytest.fixture
def transport() -> FakeTransport:
    """Transport answering ``{"status": "ok"}``."""
    return FakeTransport()


@pytest.fixture
def settings() -> FormSettings:
    """Settings with code defaults, independent of the environment."""
    return FormSettings(load_plugins=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def build_form(*children: Element, action: str = "/signup", method: str = "post") -> Element:
    """A ``<form>`` holding *children*, attached to a fresh Document."""
    form = Element("form", {"action": action, "method": method}, *children)
    Document(form)
    return form


def signup_form() -> Element:
    """Required email, optional nickname, a textarea, and a submit button."""
    return build_form(
        Element("input", {"type": "email", "name": "email", "required": True}),
        Element("input", {"type": "text", "name": "nickname"}),
        Element("textarea", {"name": "about"}),
        Element("button", {"type": "submit"}),
    )


def find(form: Element, name: str) -> Element:
    """First element under *form* named *name*."""
    element = form.query(lambda el: el.name == name)
    assert element is not None, name
    return element


def submit_button(form: Element) -> Element:
    button = form.query(lambda el: el.type == "submit")
    assert button is not None
    return button
