"""Tests for the outbound retry policy."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from elasticsearch import BadRequestError, ConnectionTimeout
from elasticsearch import ConnectionError as ClusterConnectionError

from searchgate.config.settings import ClusterSettings
from searchgate.gateway.retry import with_retry


@pytest.fixture
def cluster() -> ClusterSettings:
    return ClusterSettings(max_retries=2, retry_backoff=0)


class TestWithRetry:
    async def test_returns_first_success(self, cluster: ClusterSettings) -> None:
        call = AsyncMock(return_value={"ok": True})
        assert await with_retry(call, cluster) == {"ok": True}
        assert call.await_count == 1

    async def test_retries_connection_errors(self, cluster: ClusterSettings) -> None:
        call = AsyncMock(side_effect=[ClusterConnectionError("refused"), ConnectionTimeout("slow"), "done"])
        assert await with_retry(call, cluster, operation="search") == "done"
        assert call.await_count == 3

    async def test_gives_up_after_max_retries(self, cluster: ClusterSettings) -> None:
        call = AsyncMock(side_effect=ClusterConnectionError("refused"))
        with pytest.raises(ClusterConnectionError):
            await with_retry(call, cluster)
        assert call.await_count == 3

    async def test_zero_retries(self) -> None:
        call = AsyncMock(side_effect=ConnectionTimeout("slow"))
        with pytest.raises(ConnectionTimeout):
            await with_retry(call, ClusterSettings(max_retries=0))
        assert call.await_count == 1

    async def test_rejections_are_not_retried(self, cluster: ClusterSettings) -> None:
        error = BadRequestError(message="bad", meta=MagicMock(status=400), body={})
        call = AsyncMock(side_effect=error)
        with pytest.raises(BadRequestError):
            await with_retry(call, cluster)
        assert call.await_count == 1


class TestPlainCallables:
    """The gateway hands in ``lambda: client.method(...)``, not coroutine functions."""

    async def test_lambda_result_is_awaited(self, cluster: ClusterSettings) -> None:
        client = AsyncMock()
        client.search.return_value = {"hits": {"hits": []}}

        result = await with_retry(lambda: client.search(index="articles"), cluster)

        assert result == {"hits": {"hits": []}}
        client.search.assert_awaited_once_with(index="articles")

    async def test_lambda_retried_on_connection_errors(self, cluster: ClusterSettings) -> None:
        client = AsyncMock()
        client.ping.side_effect = [ClusterConnectionError("refused"), True]

        assert await with_retry(lambda: client.ping(), cluster, operation="ping") is True
        assert client.ping.await_count == 2

    async def test_lambda_gives_up(self, cluster: ClusterSettings) -> None:
        client = AsyncMock()
        client.bulk.side_effect = ConnectionTimeout("slow")

        with pytest.raises(ConnectionTimeout):
            await with_retry(lambda: client.bulk(operations=[]), cluster)
        assert client.bulk.await_count == 3
