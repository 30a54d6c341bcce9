"""Unit tests — logger factory and the one-shot logging setup."""

import logging

import pytest
import structlog

from pr_review_engine.infrastructure.observability import logger_factory_service
from pr_review_engine.infrastructure.observability.logger_factory_service import (
    configure_logging,
    get_logger,
)

# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def root_logger(monkeypatch: pytest.MonkeyPatch):
    """Root logger restored (handlers, levels, structlog defaults) after the test."""
    root = logging.getLogger()
    httpx_logger = logging.getLogger("httpx")
    saved = (list(root.handlers), root.level, httpx_logger.level)
    monkeypatch.setattr(logger_factory_service, "_CONFIGURED", False)
    yield root
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    httpx_logger.setLevel(saved[2])
    structlog.reset_defaults()


class TestGetLogger:
    def test_keeps_host_handlers(self, root_logger: logging.Logger) -> None:
        host_handler = logging.NullHandler()
        root_logger.addHandler(host_handler)

        get_logger("github")
        get_logger("resolution")

        assert host_handler in root_logger.handlers
        assert not logger_factory_service._CONFIGURED


class TestConfigureLogging:
    def test_installs_a_single_structlog_handler(self, root_logger: logging.Logger) -> None:
        root_logger.addHandler(logging.NullHandler())

        configure_logging("DEBUG")
        configure_logging("ERROR")

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root_logger.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
