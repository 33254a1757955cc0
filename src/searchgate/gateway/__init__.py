"""Search gateway — Typed service layer over the Elasticsearch client."""

from searchgate.gateway.exceptions import (
    ConfigurationError,
    PartialBulkFailure,
    RequestFailure,
    SearchError,
    TransportFailure,
)
from searchgate.gateway.gateway import SearchGateway

__all__ = [
    "ConfigurationError",
    "PartialBulkFailure",
    "RequestFailure",
    "SearchError",
    "SearchGateway",
    "TransportFailure",
]
