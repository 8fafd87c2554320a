"""Configuration package."""

from farmledger.config.settings import (
    DEFAULT_STORAGE_KEY,
    GeminiSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "GeminiSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
