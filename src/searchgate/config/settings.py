"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Command-line overrides (see ``searchgate.cli``)
  2. YAML config file (if specified)
  3. Environment variables (SEARCHGATE_ prefix)
  4. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _default_mappings() -> dict[str, Any]:
    return {
        "properties": {
            "title": {"type": "text"},
            "content": {"type": "text"},
        }
    }


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class ClusterSettings(BaseModel):
    """Connection settings for the Elasticsearch cluster."""

    hosts: list[str] = Field(default=["http://localhost:9200"], description="Cluster node URLs")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    api_key: str | None = Field(default=None, description="API key (takes precedence over basic auth)")
    verify_certs: bool = Field(
        default=True,
        description="Verify TLS certificates. Disabling this is an explicit opt-in.",
    )
    ca_certs: str | None = Field(default=None, description="Path to a CA bundle for TLS verification")
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt on transport errors")
    retry_backoff: float = Field(default=0.5, ge=0, description="Exponential backoff multiplier in seconds")
    retry_backoff_max: float = Field(default=8.0, ge=0, description="Upper bound for a single backoff wait")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class IndexDefaults(BaseModel):
    """Defaults applied when creating indices and writing documents."""

    number_of_shards: int = Field(default=1, ge=1, description="Primary shards for new indices")
    number_of_replicas: int = Field(default=0, ge=0, description="Replicas for new indices")
    mappings: dict[str, Any] = Field(default_factory=_default_mappings, description="Mapping for new indices")
    id_field: str = Field(default="id", description="Document field used to reconcile creates and updates")
    existence_batch_size: int = Field(
        default=1000,
        ge=1,
        description="Id lookups sent per multi-search request during bulk upsert",
    )
    refresh: bool | Literal["wait_for"] = Field(
        default="wait_for",
        description="Refresh policy for writes: true, false or 'wait_for'",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")
    client_log_level: str = Field(
        default="warning",
        description="Level for the Elasticsearch client and transport loggers",
    )


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SEARCHGATE_ prefix.
    Nested settings use double underscores: SEARCHGATE_CLUSTER__HOSTS=...

    Example:
        SEARCHGATE_CLUSTER__HOSTS='["https://es.internal:9200"]'
        SEARCHGATE_CLUSTER__USERNAME=elastic
        SEARCHGATE_CLUSTER__PASSWORD=changeme
        SEARCHGATE_INDEX__NUMBER_OF_REPLICAS=1
    """

    model_config = {
        "env_prefix": "SEARCHGATE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="SearchGate", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    cluster: ClusterSettings = Field(default_factory=ClusterSettings)
    index: IndexDefaults = Field(default_factory=IndexDefaults)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path, overrides: dict[str, Any] | None = None) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they take
        precedence over environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.
            overrides: Nested values merged over the YAML data, e.g.
                ``{"observability": {"log_level": "debug"}}``.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**_merge(data, overrides or {}))
