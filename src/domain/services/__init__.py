"""Domain services package."""

from .retention_window import RetentionWindow
from .telemetry_projections import expected_hash_rate, pool_quick_link

__all__ = ["RetentionWindow", "expected_hash_rate", "pool_quick_link"]
