"""DTOs for the dashboard responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from src.application.dtos.series_dto import SeriesEnvelopeDTO
from src.domain.entities.reconciliation import ReconciliationState
from src.domain.entities.telemetry import DisplayTelemetry, Sample


class SampleDTO(BaseModel):
    """Serializable representation of one reconciled sample."""

    timestamp_ms: int = Field(description="Epoch milliseconds")
    hashrate_10m: float = Field(description="10 minute average, H/s")
    hashrate_1h: float = Field(description="1 hour average, H/s")
    hashrate_1d: float = Field(description="1 day average, H/s")

    @classmethod
    def from_domain(cls, sample: Sample) -> "SampleDTO":
        return cls(
            timestamp_ms=sample.timestamp_ms,
            hashrate_10m=sample.hashrate_10m,
            hashrate_1h=sample.hashrate_1h,
            hashrate_1d=sample.hashrate_1d,
        )


class TelemetryDTO(BaseModel):
    """Display-ready scalars of the latest live poll."""

    power: float = Field(description="Watts")
    voltage: float = Field(description="Volts")
    current: float = Field(description="Amperes")
    core_voltage: float = Field(description="Requested ASIC voltage, V")
    core_voltage_actual: float = Field(description="Measured ASIC voltage, V")
    temp: float = Field(description="ASIC temperature, C")
    vr_temp: float = Field(description="VR temperature, C")

    @classmethod
    def from_domain(cls, telemetry: DisplayTelemetry) -> "TelemetryDTO":
        return cls(
            power=telemetry.power,
            voltage=telemetry.voltage,
            current=telemetry.current,
            core_voltage=telemetry.core_voltage,
            core_voltage_actual=telemetry.core_voltage_actual,
            temp=telemetry.temp,
            vr_temp=telemetry.vr_temp,
        )


class DashboardDTO(BaseModel):
    """DTO representing the /dashboard response payload."""

    state: ReconciliationState = Field(description="Reconciliation state")
    latest: Optional[SampleDTO] = Field(default=None, description="Newest sample")
    telemetry: Optional[TelemetryDTO] = Field(
        default=None, description="Latest display telemetry"
    )
    expected_hash_rate: Optional[int] = Field(
        default=None, description="Nominal hash rate from ASIC settings, GH/s"
    )
    quick_link: Optional[str] = Field(
        default=None, description="Stats page of the configured pool"
    )
    cursor: Optional[int] = Field(
        default=None, description="Newest absorbed timestamp, epoch ms"
    )
    series: SeriesEnvelopeDTO = Field(
        default_factory=SeriesEnvelopeDTO, description="Buffered series"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "state": "live_only",
                "latest": {
                    "timestamp_ms": 1726000005000,
                    "hashrate_10m": 1.2041e12,
                    "hashrate_1h": 1.1988e12,
                    "hashrate_1d": 1.1872e12,
                },
                "telemetry": {
                    "power": 18.4,
                    "voltage": 5.0,
                    "current": 3.7,
                    "core_voltage": 1.2,
                    "core_voltage_actual": 1.19,
                    "temp": 58.3,
                    "vr_temp": 61.0,
                },
                "expected_hash_rate": 1071,
                "quick_link": "https://web.public-pool.io/#/app/bc1qexample",
                "cursor": 1726000005000,
                "series": {
                    "labels": [1726000005000],
                    "window10m": [1.2041e12],
                    "window1h": [1.1988e12],
                    "window1d": [1.1872e12],
                },
            }
        }
    }
