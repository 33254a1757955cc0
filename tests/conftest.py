"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from searchgate.config.settings import ClusterSettings, IndexDefaults, Settings
from searchgate.gateway import SearchGateway
from tests.fakes import FakeCluster


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults and no backoff."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        cluster={"hosts": ["http://localhost:9200"], "max_retries": 2, "retry_backoff": 0},
        observability={"log_format": "console"},
    )


@pytest.fixture
def cluster_settings(settings: Settings) -> ClusterSettings:
    return settings.cluster


@pytest.fixture
def mock_client() -> AsyncMock:
    """An ``AsyncElasticsearch`` double whose calls all return awaitables."""
    client = AsyncMock()
    client.ping.return_value = True
    client.info.return_value = {"cluster_name": "test-cluster", "version": {"number": "8.13.0"}}
    return client


@pytest.fixture
def gateway(cluster_settings: ClusterSettings, mock_client: AsyncMock) -> SearchGateway:
    return SearchGateway(cluster_settings, IndexDefaults(), client=mock_client)


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def fake_gateway(cluster_settings: ClusterSettings, fake_cluster: FakeCluster) -> SearchGateway:
    return SearchGateway(cluster_settings, IndexDefaults(), client=fake_cluster)  # type: ignore[arg-type]

