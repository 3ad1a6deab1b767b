"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml, or from
the file named by the SCOREMANAGER_CONFIG environment variable, with built-in
defaults when no file exists.

Usage:
    from scoremanager.config.app_config import load_app_config

    config = load_app_config()
    allowed = config.access.allowed_emails
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")
CONFIG_ENV = "SCOREMANAGER_CONFIG"


class ConfigError(Exception):
    """Configuration file could not be read or has the wrong shape."""

    pass


@dataclass
class StoreConfig:
    """Location of the students document store."""

    path: str = "data/db/scores.db"

    @property
    def db_path(self) -> Path:
        return Path(self.path)


@dataclass
class AccessConfig:
    """Identities allowed to use the application."""

    allowed_emails: list[str] = field(default_factory=list)


@dataclass
class ExportConfig:
    """Export settings."""

    sheet_title: str = "Scores"
    pdf_title: str = "Score Report"
    pdf_font_path: str | None = None


@dataclass
class AppConfig:
    """Application-wide configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    access: AccessConfig = field(default_factory=AccessConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "store": {"path": "data/db/scores.db"},
        "access": {"allowed_emails": []},
        "export": {
            "sheet_title": "Scores",
            "pdf_title": "Score Report",
            "pdf_font_path": None,
        },
        "web": {"cors_origins": ["*"]},
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    store_data = data.get("store") or {}
    access_data = data.get("access") or {}
    export_data = data.get("export") or {}
    web_data = data.get("web") or {}

    # Entries are trimmed here; hand-edited lists pick up stray spaces
    allowed = [
        str(e).strip()
        for e in access_data.get("allowed_emails") or []
        if str(e).strip()
    ]

    return AppConfig(
        store=StoreConfig(path=str(store_data.get("path", "data/db/scores.db"))),
        access=AccessConfig(allowed_emails=allowed),
        export=ExportConfig(
            sheet_title=export_data.get("sheet_title", "Scores"),
            pdf_title=export_data.get("pdf_title", "Score Report"),
            pdf_font_path=export_data.get("pdf_font_path"),
        ),
        cors_origins=list(web_data.get("cors_origins", ["*"])),
    )


def get_config_path() -> Path:
    """Path of the config file, honouring SCOREMANAGER_CONFIG."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file exists but is not valid YAML.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    config_path = get_config_path()

    if config_path.exists():
        logger.debug("loading_app_config", source=str(config_path))
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    else:
        logger.info("using_default_config", missing=str(config_path))
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
