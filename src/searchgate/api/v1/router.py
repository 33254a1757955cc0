"""API v1 Router — Health, index and document endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from searchgate.api.v1.endpoints.documents import router as documents_router
from searchgate.api.v1.endpoints.health import router as health_router
from searchgate.api.v1.endpoints.indices import router as indices_router

router = APIRouter(tags=["v1"])
router.include_router(health_router)
router.include_router(indices_router)
router.include_router(documents_router)
