"""API dependencies — The gateway shared by all endpoints."""

from __future__ import annotations

from searchgate.gateway import SearchGateway, TransportFailure

# Set during application lifespan
_gateway: SearchGateway | None = None


def set_gateway(gateway: SearchGateway | None) -> None:
    global _gateway
    _gateway = gateway


def get_gateway() -> SearchGateway:
    """Return the running gateway.

    Raises:
        TransportFailure: Outside the application lifespan, so requests are
            answered 503 like any other unreachable-cluster case.
    """
    if _gateway is None:
        raise TransportFailure("Search gateway not initialized.")
    return _gateway
