"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used to validate device
payloads, encode the persisted series and shape API responses.
"""

from .dashboard_dto import DashboardDTO, SampleDTO, TelemetryDTO
from .device_dto import HistoryRangeDTO, RawHistoryPayloadDTO, RawLiveSampleDTO
from .health_dto import ReconciliationHealthDTO
from .series_dto import SeriesEnvelopeDTO

__all__ = [
    "DashboardDTO",
    "SampleDTO",
    "TelemetryDTO",
    "HistoryRangeDTO",
    "RawHistoryPayloadDTO",
    "RawLiveSampleDTO",
    "ReconciliationHealthDTO",
    "SeriesEnvelopeDTO",
]
