"""Error responses — Map gateway errors to HTTP status codes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from searchgate.gateway.exceptions import (
    ConfigurationError,
    PartialBulkFailure,
    RequestFailure,
    SearchError,
    TransportFailure,
)

logger = logging.getLogger(__name__)


def status_for(exc: SearchError) -> int:
    """HTTP status code for a gateway error."""
    if isinstance(exc, TransportFailure):
        return 503
    if isinstance(exc, PartialBulkFailure):
        return 409
    if isinstance(exc, RequestFailure):
        if exc.status is not None and 400 <= exc.status < 500:
            return exc.status
        return 400
    if isinstance(exc, ConfigurationError):
        return 500
    return 502


def error_payload(exc: SearchError) -> dict[str, Any]:
    payload: dict[str, Any] = {"kind": exc.kind, "message": exc.message}
    if isinstance(exc, PartialBulkFailure):
        payload["items"] = [item.model_dump() for item in exc.items]
    return payload


async def _handle_search_error(request: Request, exc: SearchError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning("%s %s -> %d (%s)", request.method, request.url.path, status_code, exc.kind)
    return JSONResponse(status_code=status_code, content=error_payload(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Install the ``SearchError`` handler on ``app``."""
    app.add_exception_handler(SearchError, _handle_search_error)  # type: ignore[arg-type]
