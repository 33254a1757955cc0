"""Health check endpoint — Cluster connectivity."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from searchgate.api.deps import get_gateway
from searchgate.gateway import SearchGateway
from searchgate.models.result import ConnectionStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/health",
    response_model=ConnectionStatus,
    summary="Cluster Health Check",
    description=(
        "Ping the Elasticsearch cluster. Returns 200 when it answered and "
        "503 with the failure message otherwise."
    ),
    responses={503: {"model": ConnectionStatus, "description": "Cluster unreachable"}},
)
async def health_check(
    gateway: SearchGateway = Depends(get_gateway),
) -> ConnectionStatus | JSONResponse:
    """Report cluster connectivity."""
    status = await gateway.check_connection()
    if not status.connected:
        logger.warning("Health check failed: %s", status.message)
        return JSONResponse(status_code=503, content=status.model_dump())
    return status
