"""
Device DTOs - Application Layer

Pydantic models validating the untrusted documents returned by the device
HTTP API before they are normalized into domain samples.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from src.domain.entities.telemetry import HistoryEncoding


class RawLiveSampleDTO(BaseModel):
    """Subset of ``/api/system/info`` consumed by the reconciliation core."""

    hash_rate_10m: float = Field(alias="hashRate_10m", description="GH/s")
    hash_rate_1h: float = Field(alias="hashRate_1h", description="GH/s")
    hash_rate_1d: float = Field(alias="hashRate_1d", description="GH/s")
    hash_rate_timestamp: int = Field(
        alias="hashRateTimestamp", description="Epoch milliseconds"
    )
    power: float = Field(default=0.0, description="Watts")
    voltage: float = Field(default=0.0, description="Input voltage, mV")
    current: float = Field(default=0.0, description="Input current, mA")
    core_voltage: float = Field(
        default=0.0, alias="coreVoltage", description="Requested ASIC voltage, mV"
    )
    core_voltage_actual: float = Field(
        default=0.0, alias="coreVoltageActual", description="Measured ASIC voltage, mV"
    )
    temp: float = Field(default=0.0, description="ASIC temperature, C")
    vr_temp: float = Field(default=0.0, alias="vrTemp", description="VR temperature, C")
    frequency: float = Field(default=0.0, description="ASIC frequency, MHz")
    small_core_count: int = Field(default=0, alias="smallCoreCount")
    asic_count: int = Field(default=0, alias="asicCount")
    stratum_url: str = Field(default="", alias="stratumURL")
    stratum_user: str = Field(default="", alias="stratumUser")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "allow_inf_nan": False,
        "json_schema_extra": {
            "example": {
                "hashRate_10m": 1203.4,
                "hashRate_1h": 1198.7,
                "hashRate_1d": 1187.2,
                "hashRateTimestamp": 1726000000000,
                "power": 18.43,
                "voltage": 5012.0,
                "current": 3675.0,
                "coreVoltage": 1200,
                "coreVoltageActual": 1194,
                "temp": 58.25,
                "vrTemp": 61.0,
                "frequency": 525,
                "smallCoreCount": 2040,
                "asicCount": 1,
                "stratumURL": "public-pool.io",
                "stratumUser": "bc1qexample.worker1",
            }
        },
    }


class RawHistoryPayloadDTO(BaseModel):
    """History batch made of parallel arrays."""

    timestamp_base: Optional[int] = Field(
        default=None,
        alias="timestampBase",
        description="Epoch ms added to every relative timestamp",
    )
    timestamps: List[int] = Field(description="Relative ms or absolute us")
    hashrate_10m: List[float]
    hashrate_1h: List[float]
    hashrate_1d: List[float]

    @model_validator(mode="after")
    def check_parallel_arrays(self) -> "RawHistoryPayloadDTO":
        lengths = {
            len(self.timestamps),
            len(self.hashrate_10m),
            len(self.hashrate_1h),
            len(self.hashrate_1d),
        }
        if len(lengths) > 1:
            raise ValueError("history arrays must have the same length")
        return self

    @property
    def encoding(self) -> HistoryEncoding:
        if self.timestamp_base is not None:
            return HistoryEncoding.RELATIVE_COMPRESSED
        return HistoryEncoding.ABSOLUTE_MICROS

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "allow_inf_nan": False,
        "json_schema_extra": {
            "example": {
                "timestampBase": 1726000000000,
                "timestamps": [0, 5000, 10000],
                "hashrate_10m": [120340, 120410, 120388],
                "hashrate_1h": [119870, 119880, 119901],
                "hashrate_1d": [118720, 118722, 118725],
            }
        },
    }


class HistoryRangeDTO(BaseModel):
    """Answer of the optional history range probe."""

    last_timestamp: int = Field(alias="lastTimestamp", description="Epoch ms")

    model_config = {"populate_by_name": True, "extra": "ignore"}
