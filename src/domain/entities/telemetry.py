"""
Telemetry domain entities.

Value objects describing one reconciled hashrate sample, the display
telemetry derived from a live poll, and the outcome of restoring the
persisted buffer at startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class Sample:
    """One normalized point: epoch milliseconds and three hashrates in H/s."""

    timestamp_ms: int
    hashrate_10m: float
    hashrate_1h: float
    hashrate_1d: float


Series = Tuple[Sample, ...]


@dataclass(frozen=True, slots=True)
class DisplayTelemetry:
    """Rounded, display-ready scalars from one live poll."""

    power: float = 0.0
    voltage: float = 0.0
    current: float = 0.0
    core_voltage: float = 0.0
    core_voltage_actual: float = 0.0
    temp: float = 0.0
    vr_temp: float = 0.0
    frequency: float = 0.0
    small_core_count: int = 0
    asic_count: int = 0
    stratum_url: str = ""
    stratum_user: str = ""


class HistoryEncoding(str, Enum):
    """Wire encodings produced by the device history endpoint."""

    # timestampBase + relative ms offsets, hashrates compressed by x100
    RELATIVE_COMPRESSED = "relative_compressed"
    # absolute microsecond timestamps, raw GH/s hashrates
    ABSOLUTE_MICROS = "absolute_micros"


class ColdStartReason(str, Enum):
    ABSENT = "absent"
    CORRUPT = "corrupt"


@dataclass(frozen=True, slots=True)
class Populated:
    """Persisted state was found and loaded (possibly trimmed to empty)."""

    series: Series
    cursor: Optional[int]


@dataclass(frozen=True, slots=True)
class ColdStart:
    """Nothing usable was persisted; the store starts empty."""

    reason: ColdStartReason


RestoreOutcome = Union[Populated, ColdStart]
