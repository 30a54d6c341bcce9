"""Structlog setup for review runs, with the nested log schema and a stdlib bridge.

Provides:
- configure_logging(): one-shot structlog + stdlib setup, called by the host entry point
- get_logger(): structlog logger bound to a component name; never touches handlers
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from pr_review_engine.infrastructure.observability.logging.schema_processor import (
    review_schema_processor,
)

_CONFIGURED = False

_JSON_ENVIRONMENTS = frozenset({"ci", "qa", "staging", "prod", "production"})

# httpx logs every request at INFO; GitHub calls are already logged by the client.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: int | str | None = None) -> None:
    """Install the structlog pipeline once per process.

    *level* falls back to ``LOG_LEVEL`` and then INFO. The renderer follows
    ``LOG_FORMAT`` (json|console), else ``APP_ENV``.
    """
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return
    _CONFIGURED = True

    resolved_level = level or os.environ.get("LOG_LEVEL", "INFO").upper()
    renderer = _select_renderer(
        os.environ.get("LOG_FORMAT", "").lower(), os.environ.get("APP_ENV", "local").lower()
    )
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        review_schema_processor,
    ]
    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolved_level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Logger whose events land in the ``context.component`` block.

    Safe at import time: the process-wide pipeline is only installed by
    ``configure_logging()``.
    """
    return structlog.get_logger().bind(context_component=component)


def _select_renderer(log_format: str, app_env: str) -> Any:
    if log_format == "json" or (log_format != "console" and app_env in _JSON_ENVIRONMENTS):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
