"""Application services package."""

from .persistent_cursor import PersistentCursor
from .series_store import SeriesStore
from .unit_normalizer import UnitNormalizer, detect_history_encoding

__all__ = [
    "PersistentCursor",
    "SeriesStore",
    "UnitNormalizer",
    "detect_history_encoding",
]
