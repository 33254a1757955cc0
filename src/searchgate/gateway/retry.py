"""Retry policy for outbound cluster calls."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
import tenacity
from elasticsearch import ConnectionError as ClusterConnectionError
from elasticsearch import ConnectionTimeout

from searchgate.config.settings import ClusterSettings

_T = TypeVar("_T")

logger = structlog.get_logger(__name__)

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (ClusterConnectionError, ConnectionTimeout)


def _log_retry(operation: str) -> Callable[[tenacity.RetryCallState], None]:
    def before_sleep(retry_state: tenacity.RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "cluster_call_retry",
            operation=operation,
            attempt=retry_state.attempt_number,
            error=str(exc),
        )

    return before_sleep


async def with_retry(
    call: Callable[[], Awaitable[_T]],
    settings: ClusterSettings,
    *,
    operation: str = "request",
) -> _T:
    """Run ``call`` with exponential backoff on connection errors and timeouts.

    ``call`` is any zero-argument callable returning an awaitable, such as
    ``lambda: client.search(...)``. Rejected requests (4xx/5xx answers) are
    not retried.
    """
    retryer = tenacity.AsyncRetrying(
        stop=tenacity.stop_after_attempt(settings.max_retries + 1),
        wait=tenacity.wait_random_exponential(
            multiplier=settings.retry_backoff,
            max=settings.retry_backoff_max,
        ),
        retry=tenacity.retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=_log_retry(operation),
        reraise=True,
    )

    async def attempt() -> _T:
        return await call()

    return await retryer(attempt)
