"""Structured rendering for formkit's loggers.

Library modules log through ``logging.getLogger(__name__)`` and never
configure output themselves. An embedding application that wants those
records rendered calls :func:`configure_logging` once, usually with the same
:class:`FormSettings` it hands to its forms:

- ``FORMKIT_VERBOSE``: DEBUG instead of WARNING for ``formkit.*``;
- ``FORMKIT_LOG_JSON``: JSON lines instead of console output.

Only the ``formkit`` logger gets a handler; the root logger and the host's
own handlers are left alone. Records emitted while a form submits carry the
``form_action`` and ``form_method`` context bound by ``Form.submit``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

from formkit.config.settings import FormSettings

LOGGER_NAME = "formkit"
HANDLER_NAME = "formkit-structlog"


def build_formatter(*, log_json: bool, colors: bool = False) -> logging.Formatter:
    """ProcessorFormatter giving stdlib records structlog's fields."""
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        # Rule and plugin failures log with exc_info; JSON needs it as text.
        renderers: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=colors)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def configure_logging(
    settings: FormSettings | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Attach (or replace) the structlog handler on the ``formkit`` logger.

    Args:
        settings: Source of ``verbose`` and ``log_json``; read from the
            environment when omitted.
        stream: Output stream, stderr by default.

    Returns:
        The installed handler. Calling again swaps it, never stacks.
    """
    settings = settings or FormSettings()
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        build_formatter(
            log_json=settings.log_json,
            colors=not settings.log_json and stream.isatty(),
        )
    )

    formkit_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(formkit_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            formkit_logger.removeHandler(existing)
    formkit_logger.addHandler(handler)
    formkit_logger.setLevel(logging.DEBUG if settings.verbose else logging.WARNING)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return handler
