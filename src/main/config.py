"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared import (
    LIVE_POLL_INTERVAL_SECONDS,
    RETENTION_MS,
    EnumEnvironment,
    EnumLogLevel,
    EnumStorageBackend,
)


class AppInfoSettings(BaseSettings):
    """Service metadata settings."""

    title: str = Field(default="Hashwatch", description="Service title")
    description: str = Field(
        default="Reconciled hashrate history and live telemetry "
        "for a single AxeOS device",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")

    model_config = SettingsConfigDict(
        env_prefix="APP_", case_sensitive=False, extra="ignore"
    )


class DeviceSettings(BaseSettings):
    """Device HTTP API settings."""

    base_url: str = Field(
        default="http://localhost", description="Base URL of the AxeOS device"
    )
    info_path: str = Field(
        default="/api/system/info", description="Live system info endpoint"
    )
    history_path: str = Field(default="/api/history", description="History endpoint")
    history_range_path: Optional[str] = Field(
        default=None,
        description="Endpoint reporting the newest history timestamp "
        "(unset on firmwares without it)",
    )
    timeout: float = Field(default=10.0, gt=0, description="Request timeout, seconds")

    model_config = SettingsConfigDict(
        env_prefix="DEVICE_", case_sensitive=False, extra="ignore"
    )


class ReconciliationSettings(BaseSettings):
    """Backfill and live polling settings."""

    retention_ms: int = Field(
        default=RETENTION_MS, gt=0, description="Span of the buffered series, ms"
    )
    poll_interval_seconds: float = Field(
        default=LIVE_POLL_INTERVAL_SECONDS,
        gt=0,
        description="Live poll interval, seconds",
    )
    max_backfill_pages: int = Field(
        default=50, gt=0, description="Upper bound of history pages per backfill"
    )

    model_config = SettingsConfigDict(
        env_prefix="RECONCILIATION_", case_sensitive=False, extra="ignore"
    )


class StorageSettings(BaseSettings):
    """Persistence settings."""

    backend: EnumStorageBackend = Field(
        default=EnumStorageBackend.FILE, description="Key-value storage backend"
    )
    file_path: str = Field(
        default="data/hashwatch_state.json", description="JSON file for the file backend"
    )
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/hashwatch",
        description="MongoDB connection URI",
    )
    database_name: str = Field(default="hashwatch", description="MongoDB database")
    collection_name: str = Field(
        default="telemetry_state", description="MongoDB collection for the keys"
    )
    series_key: str = Field(default="seriesSnapshot")
    cursor_key: str = Field(default="cursorTimestamp")

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    app: AppInfoSettings = Field(default_factory=AppInfoSettings)
    device: DeviceSettings = Field(default_factory=DeviceSettings)
    reconciliation: ReconciliationSettings = Field(
        default_factory=ReconciliationSettings
    )
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()


settings = get_settings()
