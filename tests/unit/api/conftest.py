"""Fixtures for the HTTP layer: an app wired to a mocked gateway."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from searchgate.api.app import create_app
from searchgate.api.deps import set_gateway
from searchgate.config.settings import Settings
from searchgate.gateway import SearchGateway


@pytest.fixture
def mock_gateway() -> MagicMock:
    gateway = MagicMock(spec=SearchGateway)
    for name in (
        "check_connection",
        "create_index",
        "insert_document",
        "bulk_upsert",
        "list_documents",
        "get_document",
    ):
        setattr(gateway, name, AsyncMock())
    return gateway


@pytest.fixture
def client(settings: Settings, mock_gateway: MagicMock) -> Iterator[TestClient]:
    """Create a test client for the API without running the lifespan."""
    app = create_app(settings)
    set_gateway(mock_gateway)
    yield TestClient(app)
    set_gateway(None)
