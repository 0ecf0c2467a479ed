"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    ExchangeRateSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ExchangeRateSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
