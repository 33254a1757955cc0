"""Tests for logging setup."""

from __future__ import annotations

import logging

import structlog

from searchgate.config.settings import ObservabilitySettings
from searchgate.observability.logging import CLIENT_LOGGERS, setup_logging


class TestSetupLogging:
    def test_client_loggers_quieted(self) -> None:
        setup_logging(ObservabilitySettings(client_log_level="error"))
        for name in CLIENT_LOGGERS:
            assert logging.getLogger(name).level == logging.ERROR

    def test_service_bound_to_context(self) -> None:
        setup_logging(ObservabilitySettings(log_format="console"), service="SearchGate")
        assert structlog.contextvars.get_contextvars() == {"service": "SearchGate"}

    def test_defaults_without_settings(self) -> None:
        setup_logging()
        assert structlog.contextvars.get_contextvars() == {}
        assert logging.getLogger("elastic_transport").level == logging.WARNING
