"""Domain entities for the reconciliation state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.domain.entities.telemetry import DisplayTelemetry, Sample, Series


class ReconciliationState(str, Enum):
    IDLE = "idle"
    BACKFILL_PENDING = "backfill_pending"
    BACKFILLING = "backfilling"
    LIVE_ONLY = "live_only"


@dataclass(frozen=True, slots=True)
class BackfillRange:
    """Half-open ``[start_ms, end_ms)`` range requested from history."""

    start_ms: int
    end_ms: int

    @property
    def is_empty(self) -> bool:
        return self.start_ms >= self.end_ms


@dataclass(frozen=True, slots=True)
class ReconciledUpdate:
    """Payload delivered to subscribers of the reconciled stream."""

    state: ReconciliationState
    latest: Optional[Sample]
    telemetry: Optional[DisplayTelemetry]
    appended: bool
    series: Series
