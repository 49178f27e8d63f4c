"""Configuration package for the companion."""

from companion.config.app_config import (
    AppConfig,
    CompanionConfig,
    ProviderConfig,
    StorageConfig,
    clear_config_cache,
    get_provider_config,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "CompanionConfig",
    "ProviderConfig",
    "StorageConfig",
    "clear_config_cache",
    "get_provider_config",
    "load_app_config",
]
