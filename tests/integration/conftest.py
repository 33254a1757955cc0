"""Integration test fixtures — A real Elasticsearch node.

Expects a single-node cluster on localhost:9200, for example:
    docker run -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false elasticsearch:8.13.0

Tests are skipped when the node does not answer.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator, Iterator

import httpx
import pytest

from searchgate.config.settings import ClusterSettings, IndexDefaults
from searchgate.gateway import SearchGateway

ES_HOST = "http://localhost:9200"
TEST_INDEX = "searchgate-it-articles"


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running."""
    if not _wait_for_service(ES_HOST):
        pytest.skip(f"Elasticsearch not available at {ES_HOST}")
    return ES_HOST


@pytest.fixture
def index_name(elasticsearch_ready: str) -> Iterator[str]:
    """A test index name, dropped before and after each test."""
    httpx.delete(f"{elasticsearch_ready}/{TEST_INDEX}", params={"ignore_unavailable": "true"}, timeout=30)
    yield TEST_INDEX
    httpx.delete(f"{elasticsearch_ready}/{TEST_INDEX}", params={"ignore_unavailable": "true"}, timeout=30)


@pytest.fixture
async def live_gateway(elasticsearch_ready: str) -> AsyncIterator[SearchGateway]:
    gateway = SearchGateway(
        ClusterSettings(hosts=[elasticsearch_ready], max_retries=1, retry_backoff=0.1),
        IndexDefaults(),
    )
    await gateway.initialize()
    yield gateway
    await gateway.shutdown()
