"""SearchGate — Service-layer gateway for an Elasticsearch cluster."""

__version__ = "0.1.0"
