"""
Shared module - Cross-cutting concerns / Shared Layer

Constants, enums, logging and clock helpers used by every layer.
Nothing in here may depend on Infrastructure or Frameworks.
"""

from .clock import Clock, current_time_ms
from .consts import (
    HASHRATE_SCALE,
    HISTORY_COMPRESSION_FACTOR,
    LIVE_POLL_INTERVAL_SECONDS,
    RETENTION_MS,
    EnumEnvironment,
    EnumLogLevel,
    EnumStorageBackend,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "Clock",
    "current_time_ms",
    "HASHRATE_SCALE",
    "HISTORY_COMPRESSION_FACTOR",
    "LIVE_POLL_INTERVAL_SECONDS",
    "RETENTION_MS",
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumStorageBackend",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
