"""Structured logging configuration using structlog.

Library modules log through ``logging.getLogger(__name__)``. ``setup_logging``
routes those records through structlog's processor chain so they come out
in the same JSON or console format as native structlog loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from facetsync.config.settings import ObservabilitySettings


def setup_logging(
    settings: ObservabilitySettings | None = None,
    level: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure structured logging for facetsync.

    Args:
        settings: Observability settings. Uses defaults if None.
        level: Log level overriding the one in ``settings``.
        stream: Output stream. Defaults to stderr so stdout stays free for CLI output.
    """
    log_level = (level or getattr(settings, "log_level", "info")).upper()
    log_format = getattr(settings, "log_format", "json") if settings else "json"

    shared: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = structlog.dev.ConsoleRenderer() if log_format == "console" else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level, logging.INFO))
