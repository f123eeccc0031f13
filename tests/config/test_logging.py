"""Tests for structlog rendering of formkit loggers."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest

from formkit.config.logging import HANDLER_NAME, configure_logging
from formkit.config.settings import FormSettings
from formkit.form.engine import Form
from tests.conftest import FakeTransport, find, signup_form


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore formkit logger state after each test."""
    formkit_logger = logging.getLogger("formkit")
    original_handlers = formkit_logger.handlers[:]
    original_level = formkit_logger.level
    root = logging.getLogger()
    root_handlers = root.handlers[:]
    yield
    formkit_logger.handlers = original_handlers
    formkit_logger.setLevel(original_level)
    root.handlers = root_handlers


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(FormSettings(verbose=True), stream=io.StringIO())
        assert logging.getLogger("formkit").level == logging.DEBUG

    def test_default_is_warning(self) -> None:
        configure_logging(FormSettings(), stream=io.StringIO())
        assert logging.getLogger("formkit").level == logging.WARNING

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FORMKIT_VERBOSE", "true")
        configure_logging(stream=io.StringIO())
        assert logging.getLogger("formkit").level == logging.DEBUG

    def test_leaves_root_logger_alone(self) -> None:
        root_handlers = logging.getLogger().handlers[:]
        configure_logging(FormSettings(), stream=io.StringIO())
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_calls_replace_handler(self) -> None:
        first = configure_logging(FormSettings(), stream=io.StringIO())
        second = configure_logging(FormSettings(), stream=io.StringIO())
        names = [h.get_name() for h in logging.getLogger("formkit").handlers]
        assert names.count(HANDLER_NAME) == 1
        assert first not in logging.getLogger("formkit").handlers
        assert second in logging.getLogger("formkit").handlers

    def test_json_fields(self) -> None:
        stream = io.StringIO()
        configure_logging(FormSettings(verbose=True, log_json=True), stream=stream)

        logging.getLogger("formkit.form.engine").debug("Form locked (%d controls disabled)", 2)

        (parsed,) = _lines(stream)
        assert parsed["event"] == "Form locked (2 controls disabled)"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "formkit.form.engine"
        assert "timestamp" in parsed

    def test_json_renders_exceptions(self) -> None:
        stream = io.StringIO()
        configure_logging(FormSettings(log_json=True), stream=stream)

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("formkit.form.rules").warning("rule raised", exc_info=True)

        (parsed,) = _lines(stream)
        assert "RuntimeError: boom" in parsed["exception"]

    def test_console_output(self) -> None:
        stream = io.StringIO()
        configure_logging(FormSettings(), stream=stream)
        logging.getLogger("formkit.plugins.manager").warning("plugin skipped")
        assert "plugin skipped" in stream.getvalue()

    def test_httpx_debug_is_suppressed(self) -> None:
        configure_logging(FormSettings(verbose=True), stream=io.StringIO())
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING


class TestSubmissionContext:
    @pytest.mark.asyncio
    async def test_submission_records_carry_form_target(self) -> None:
        stream = io.StringIO()
        settings = FormSettings(verbose=True, log_json=True)
        configure_logging(settings, stream=stream)

        element = signup_form()
        find(element, "email").value = "a@b.c"
        form = Form(element, settings=settings, transport=FakeTransport())
        await form.submit()

        records = _lines(stream)
        locked = [r for r in records if r["event"].startswith("Form locked")]
        assert locked
        assert locked[0]["form_action"] == "/signup"
        assert locked[0]["form_method"] == "post"

    @pytest.mark.asyncio
    async def test_context_is_dropped_after_submit(self) -> None:
        stream = io.StringIO()
        settings = FormSettings(verbose=True, log_json=True)
        configure_logging(settings, stream=stream)

        element = signup_form()
        find(element, "email").value = "a@b.c"
        await Form(element, settings=settings, transport=FakeTransport()).submit()

        logging.getLogger("formkit").debug("after submit")
        assert "form_action" not in _lines(stream)[-1]
