"""Gateway exceptions.

Every error carries a stable ``kind`` string so callers and the HTTP layer
can tell failures apart without matching on messages.
"""

from __future__ import annotations

from typing import Any

from searchgate.models.result import BulkItemError


class SearchError(Exception):
    """Base exception for gateway errors."""

    kind = "search"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class TransportFailure(SearchError):
    """Raised when the cluster cannot be reached or the client is not ready."""

    kind = "transport"


class RequestFailure(SearchError):
    """Raised when a request is malformed or rejected by the cluster."""

    kind = "request"


class PartialBulkFailure(RequestFailure):
    """Raised when the cluster rejected one or more items of a bulk request."""

    kind = "partial_bulk"

    def __init__(
        self,
        message: str,
        *,
        items: list[BulkItemError],
        raw_items: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.items = items
        self.raw_items = raw_items or []


class ConfigurationError(SearchError):
    """Raised when gateway configuration is invalid."""

    kind = "configuration"
