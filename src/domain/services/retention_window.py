"""
Domain Service - Retention Window

Keeps the buffered series within a fixed span by dropping the oldest
samples.
"""

from bisect import bisect_left
from typing import Sequence

from src.domain.entities.telemetry import Sample, Series
from src.shared.consts import RETENTION_MS


class RetentionWindow:
    """Front-trimming policy for an ascending series."""

    def __init__(self, retention_ms: int = RETENTION_MS):
        if retention_ms <= 0:
            raise ValueError("retention_ms must be positive")
        self.retention_ms = retention_ms

    def cutoff(self, series: Sequence[Sample], now_ms: int) -> int:
        """Oldest timestamp allowed to stay in ``series`` at ``now_ms``."""
        reference = now_ms
        if series and series[-1].timestamp_ms > reference:
            # device clock ahead of the wall clock
            reference = series[-1].timestamp_ms
        return reference - self.retention_ms

    def trim(self, series: Sequence[Sample], now_ms: int) -> Series:
        """
        Drop samples older than the cutoff from the front of ``series``.

        ``series`` must be sorted by timestamp. The result is a new tuple;
        trimming an already trimmed series returns it unchanged.
        """
        if not series:
            return ()

        cutoff = self.cutoff(series, now_ms)
        timestamps = [sample.timestamp_ms for sample in series]
        first_kept = bisect_left(timestamps, cutoff)
        return tuple(series[first_kept:])
