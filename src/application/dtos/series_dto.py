"""
Series DTOs - Application Layer

Persistence codec for the buffered series: parallel arrays mirroring the
samples, compact enough to be stored as a single JSON value.
"""

from typing import List

from pydantic import BaseModel, Field, model_validator

from src.domain.entities.telemetry import Sample, Series


class SeriesEnvelopeDTO(BaseModel):
    """JSON envelope stored under the series snapshot key."""

    labels: List[int] = Field(default_factory=list, description="Epoch ms")
    window10m: List[float] = Field(default_factory=list, description="H/s")
    window1h: List[float] = Field(default_factory=list, description="H/s")
    window1d: List[float] = Field(default_factory=list, description="H/s")

    @model_validator(mode="after")
    def check_consistency(self) -> "SeriesEnvelopeDTO":
        size = len(self.labels)
        if any(
            len(window) != size
            for window in (self.window10m, self.window1h, self.window1d)
        ):
            raise ValueError("series arrays must have the same length")
        if any(later <= earlier for earlier, later in zip(self.labels, self.labels[1:])):
            raise ValueError("series labels must be strictly increasing")
        return self

    @classmethod
    def from_series(cls, series: Series) -> "SeriesEnvelopeDTO":
        return cls(
            labels=[sample.timestamp_ms for sample in series],
            window10m=[sample.hashrate_10m for sample in series],
            window1h=[sample.hashrate_1h for sample in series],
            window1d=[sample.hashrate_1d for sample in series],
        )

    def to_series(self) -> Series:
        return tuple(
            Sample(
                timestamp_ms=label,
                hashrate_10m=h10m,
                hashrate_1h=h1h,
                hashrate_1d=h1d,
            )
            for label, h10m, h1h, h1d in zip(
                self.labels, self.window10m, self.window1h, self.window1d
            )
        )

    model_config = {
        "allow_inf_nan": False,
        "json_schema_extra": {
            "example": {
                "labels": [1726000000000, 1726000005000],
                "window10m": [1.2034e12, 1.2041e12],
                "window1h": [1.1987e12, 1.1988e12],
                "window1d": [1.1872e12, 1.1872e12],
            }
        }
    }
