"""
Configuration Management for Finanz-Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Nothing in the app needs secrets, so every field has a working default
and the app starts with an empty environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local persisted-state configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default="data/local_storage.json",
        description="Path of the local JSON file holding the key-value slots"
    )
    store_key: str = Field(
        default="finanz_manager_store",
        min_length=1,
        description="Name of the slot the whole store is written to"
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject paths that point at an existing directory."""
        if Path(v).is_dir():
            raise ValueError(f"Storage path {v} is a directory, expected a file")
        return v


class WebhookSettings(BaseSettings):
    """Outgoing webhook configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=60.0,
        description="Timeout for a single webhook POST"
    )
    # Discord answers 403 to the default urllib agent
    user_agent: str = Field(
        default="Finanz-Manager (https://github.com/finanz-manager, 1.0)",
        description="User-Agent header sent with webhook requests"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Profile defaults
    default_profile_name: str = Field(
        default="Mein Unternehmen",
        min_length=1,
        description="Name of the profile created on first run"
    )
    default_tax_rate: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Tax rate (percent) for newly created profiles"
    )

    # Reporting
    recent_entries_limit: int = Field(
        default=15,
        ge=1,
        le=50,
        description="How many recent entries the webhook report lists"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def webhook(self) -> WebhookSettings:
        return WebhookSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for every section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "webhook", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
