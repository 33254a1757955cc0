"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from searchgate import __version__
from searchgate.api.deps import set_gateway
from searchgate.api.errors import register_error_handlers
from searchgate.api.v1.router import router as v1_router
from searchgate.config.settings import Settings
from searchgate.gateway import SearchGateway
from searchgate.observability.logging import setup_logging

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "SEARCHGATE_CONFIG_FILE"
# JSON object of nested settings set by the CLI; wins over YAML and env
OVERRIDES_ENV = "SEARCHGATE_CLI_OVERRIDES"


def load_settings() -> Settings:
    """Build settings the way a server worker does.

    Reads the config file named by SEARCHGATE_CONFIG_FILE, else
    searchgate-config.yaml if present, then applies CLI overrides.
    """
    overrides = json.loads(os.environ.get(OVERRIDES_ENV) or "{}")
    yaml_path = Path(os.environ.get(CONFIG_FILE_ENV) or "searchgate-config.yaml")
    if yaml_path.exists():
        logger.info("Loading configuration from %s", yaml_path)
        return Settings.from_yaml(yaml_path, overrides)
    return Settings(**overrides)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    setup_logging(settings.observability, service=settings.app_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting SearchGate v%s", __version__)

        gateway = SearchGateway.from_settings(settings)
        await gateway.initialize()

        status = await gateway.check_connection()
        if status.connected:
            logger.info("Connected to cluster %s (v%s)", status.cluster_name, status.version)
        else:
            logger.warning("Cluster not reachable at startup: %s", status.message)

        set_gateway(gateway)
        app.state.settings = settings
        app.state.gateway = gateway

        yield

        logger.info("Shutting down SearchGate...")
        await gateway.shutdown()
        set_gateway(None)

    app = FastAPI(
        title="SearchGate",
        description="Service-layer gateway for index, document and query operations on an Elasticsearch cluster.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(v1_router, prefix="/v1")

    return app
