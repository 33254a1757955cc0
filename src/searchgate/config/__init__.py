"""Configuration models and loaders."""

from searchgate.config.settings import ClusterSettings, IndexDefaults, Settings

__all__ = ["ClusterSettings", "IndexDefaults", "Settings"]
