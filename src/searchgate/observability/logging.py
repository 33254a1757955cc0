"""Structured logging configuration using structlog.

Gateway code logs events (``bulk_upsert_done``, ``cluster_call_failed``)
with keyword context; everything is rendered through the stdlib root
logger so uvicorn and client libraries share one output stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from searchgate.config.settings import ObservabilitySettings

# Client libraries that log every request at INFO
CLIENT_LOGGERS = ("elastic_transport", "elasticsearch", "urllib3", "aiohttp.access")


def _level(name: str, default: int = logging.INFO) -> int:
    return getattr(logging, name.upper(), default)


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(settings: ObservabilitySettings | None = None, *, service: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Observability settings. Uses defaults if None.
        service: Bound into every event as ``service`` when given.
    """
    log_level = settings.log_level if settings else "info"
    log_format = settings.log_format if settings else "json"
    client_level = settings.client_log_level if settings else "warning"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    if service:
        structlog.contextvars.bind_contextvars(service=service)

    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(_level(client_level, logging.WARNING))

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(log_level))
