"""Configuration package."""

from finanzmanager.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    WebhookSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StorageSettings",
    "WebhookSettings",
    "get_settings",
    "validate_all_settings",
]
