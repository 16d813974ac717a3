"""
Configuration Management for Daily Spend

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults reproduce the behaviour users already know (a 100 daily budget,
60 days of history, a 7-day chart), so the tracker runs with no .env at all.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_spend.models.ledger import MAX_AMOUNT


class TrackerSettings(BaseSettings):
    """Budget and history rules."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_SPEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_budget: float = Field(
        default=100.0,
        gt=0,
        le=MAX_AMOUNT,
        description="Daily budget used when none has been stored yet"
    )
    history_limit: int = Field(
        default=60,
        ge=1,
        description="Maximum number of archived days kept in history"
    )
    history_view_limit: int = Field(
        default=7,
        ge=1,
        description="Number of recent days shown in the history chart"
    )
    default_note: str = Field(
        default="Expense",
        min_length=1,
        description="Note used for expenses entered without one"
    )
    timestamp_format: str = Field(
        default="%H:%M",
        description="strftime format of the expense display time"
    )


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_SPEND_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "file"] = Field(
        default="file",
        description="Which key-value backend holds the state blob"
    )
    state_key: str = Field(
        default="dailySpendState",
        min_length=1,
        description="Key under which the state blob is stored"
    )
    data_dir: str = Field(
        default="data",
        description="Directory of the file backend; one JSON file per key"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Reject an empty path; the directory is created on first write."""
        if not v.strip():
            raise ValueError("data_dir must not be empty")
        return v.strip()


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
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("tracker", "storage", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
