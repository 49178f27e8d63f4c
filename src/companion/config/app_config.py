"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from companion.config.app_config import load_app_config, get_provider_config

    config = load_app_config()
    provider = get_provider_config("gemini")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Overrides the data root used for state and config files
DATA_DIR_ENV = "COMPANION_DATA_DIR"

StorageBackend = Literal["json", "sqlite"]


@dataclass
class ProviderConfig:
    """Configuration for a single LLM provider."""

    base_url: str | None
    default_model: str
    api_key_env: str | None = None
    supports_json_object: bool = False

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None


@dataclass
class CompanionConfig:
    """Defaults for the learning flows."""

    default_provider: str = "gemini"
    temperature: float = 0.4
    max_retries: int = 1
    curriculum_file: str | None = None


@dataclass
class StorageConfig:
    """Where the progress record is persisted."""

    backend: StorageBackend = "json"
    progress_key: str = "schoolCompanionProgress"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    providers: dict[str, ProviderConfig] = field(default_factory=dict)
    companion: CompanionConfig = field(default_factory=CompanionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    paths: dict[str, str] = field(default_factory=dict)

    def data_dir(self) -> Path:
        """Data root, honoring the COMPANION_DATA_DIR override."""
        return Path(os.environ.get(DATA_DIR_ENV) or self.paths.get("data_dir", "data"))

    def state_dir(self) -> Path:
        return self.data_dir() / self.paths.get("state_dir", "state")

    def db_path(self) -> Path:
        return Path(self.paths.get("db_path", "db/companion.db"))

    def curriculum_path(self) -> Path | None:
        if not self.companion.curriculum_file:
            return None
        return self.data_dir() / self.companion.curriculum_file


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "providers": {
            "gemini": {
                "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
                "default_model": "gemini-2.0-flash",
                "api_key_env": "GEMINI_API_KEY",
                "supports_json_object": True,
            },
            "openai": {
                "base_url": "https://api.openai.com/v1",
                "default_model": "gpt-4o-mini",
                "api_key_env": "OPENAI_API_KEY",
                "supports_json_object": True,
            },
            "lmstudio": {
                "base_url": "http://localhost:1234/v1",
                "default_model": "llama-3.2-3b-instruct",
                "api_key_env": None,
                "supports_json_object": False,
            },
        },
        "companion": {
            "default_provider": "gemini",
            "temperature": 0.4,
            "max_retries": 1,
            "curriculum_file": "config/curriculum_v1.yaml",
        },
        "storage": {
            "backend": "json",
            "progress_key": "schoolCompanionProgress",
        },
        "paths": {
            "data_dir": "data",
            "state_dir": "state",
            "db_path": "db/companion.db",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    providers = {}
    for name, pconfig in (data.get("providers") or defaults["providers"]).items():
        providers[name] = ProviderConfig(
            base_url=pconfig.get("base_url"),
            default_model=pconfig.get("default_model", "default"),
            api_key_env=pconfig.get("api_key_env"),
            supports_json_object=pconfig.get("supports_json_object", False),
        )

    companion_data = data.get("companion", {})
    companion = CompanionConfig(
        default_provider=companion_data.get("default_provider", "gemini"),
        temperature=companion_data.get("temperature", 0.4),
        max_retries=companion_data.get("max_retries", 1),
        curriculum_file=companion_data.get("curriculum_file"),
    )

    storage_data = data.get("storage", {})
    backend = storage_data.get("backend", "json")
    if backend not in ("json", "sqlite"):
        logger.warning("unknown_storage_backend", backend=backend, using="json")
        backend = "json"
    storage = StorageConfig(
        backend=backend,
        progress_key=storage_data.get("progress_key", "schoolCompanionProgress"),
    )

    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(providers=providers, companion=companion, storage=storage, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def get_provider_config(provider: str) -> ProviderConfig | None:
    """Get configuration for a specific provider.

    Args:
        provider: Provider name (e.g., "gemini", "openai")

    Returns:
        ProviderConfig or None if provider not found.
    """
    config = load_app_config()
    return config.providers.get(provider)


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
