"""
Domain Entities Package

This package contains the core domain entities and errors.
"""

from .errors import (
    CorruptStateError,
    DeviceGatewayError,
    DomainError,
    InvalidPayloadError,
    PersistenceError,
    ReconciliationStateError,
)
from .reconciliation import BackfillRange, ReconciledUpdate, ReconciliationState
from .telemetry import (
    ColdStart,
    ColdStartReason,
    DisplayTelemetry,
    HistoryEncoding,
    Populated,
    RestoreOutcome,
    Sample,
    Series,
)

__all__ = [
    "Sample",
    "Series",
    "DisplayTelemetry",
    "HistoryEncoding",
    "ColdStart",
    "ColdStartReason",
    "Populated",
    "RestoreOutcome",
    "BackfillRange",
    "ReconciledUpdate",
    "ReconciliationState",
    "DomainError",
    "InvalidPayloadError",
    "DeviceGatewayError",
    "PersistenceError",
    "CorruptStateError",
    "ReconciliationStateError",
]
