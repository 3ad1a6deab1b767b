"""Configuration package for the score manager."""

from scoremanager.config.app_config import (
    AccessConfig,
    AppConfig,
    ConfigError,
    ExportConfig,
    StoreConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AccessConfig",
    "AppConfig",
    "ConfigError",
    "ExportConfig",
    "StoreConfig",
    "clear_config_cache",
    "load_app_config",
]
