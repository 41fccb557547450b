"""Application configuration utilities."""

from .settings import DEFAULT_RANKING_LIMIT, Settings, configure_logging, get_settings
from .store import AppConfig, ConfigStore, ConfigStoreError, JsonConfigStore, load_config, save_config

__all__ = [
    "DEFAULT_RANKING_LIMIT",
    "Settings",
    "configure_logging",
    "get_settings",
    "AppConfig",
    "ConfigStore",
    "ConfigStoreError",
    "JsonConfigStore",
    "load_config",
    "save_config",
]
