"""
Application Service - Unit Normalizer

Turns raw device payloads into canonical samples (epoch milliseconds,
hashes per second) and rounded display telemetry. Pure: no I/O, no state.
"""

from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from src.application.dtos.device_dto import RawHistoryPayloadDTO, RawLiveSampleDTO
from src.domain.entities.errors import InvalidPayloadError
from src.domain.entities.telemetry import DisplayTelemetry, HistoryEncoding, Sample
from src.shared.consts import HASHRATE_SCALE, HISTORY_COMPRESSION_FACTOR

LivePayload = Union[Mapping[str, Any], RawLiveSampleDTO]
HistoryPayload = Union[Mapping[str, Any], RawHistoryPayloadDTO]


def detect_history_encoding(payload: HistoryPayload) -> HistoryEncoding:
    """Pick the history encoding from the presence of ``timestampBase``."""
    if isinstance(payload, RawHistoryPayloadDTO):
        return payload.encoding
    if payload.get("timestampBase") is not None:
        return HistoryEncoding.RELATIVE_COMPRESSED
    return HistoryEncoding.ABSOLUTE_MICROS


class UnitNormalizer:
    """Converts device payloads into the units used by the series store."""

    def parse_live(self, raw: LivePayload) -> RawLiveSampleDTO:
        if isinstance(raw, RawLiveSampleDTO):
            return raw
        try:
            return RawLiveSampleDTO.model_validate(raw)
        except ValidationError as e:
            raise InvalidPayloadError(
                "Malformed live sample", {"errors": e.errors(include_url=False)}
            ) from e

    def parse_history(self, raw: HistoryPayload) -> RawHistoryPayloadDTO:
        if isinstance(raw, RawHistoryPayloadDTO):
            return raw
        try:
            return RawHistoryPayloadDTO.model_validate(raw)
        except ValidationError as e:
            raise InvalidPayloadError(
                "Malformed history batch", {"errors": e.errors(include_url=False)}
            ) from e

    def normalize_live(self, raw: LivePayload) -> Sample:
        """GH/s to H/s; ``hashRateTimestamp`` is already epoch milliseconds."""
        live = self.parse_live(raw)
        return Sample(
            timestamp_ms=live.hash_rate_timestamp,
            hashrate_10m=live.hash_rate_10m * HASHRATE_SCALE,
            hashrate_1h=live.hash_rate_1h * HASHRATE_SCALE,
            hashrate_1d=live.hash_rate_1d * HASHRATE_SCALE,
        )

    def normalize_history_batch(self, raw: HistoryPayload) -> List[Sample]:
        """
        Convert a history batch into samples, in payload order.

        Relative encoding: ``timestampBase + timestamps[i]`` milliseconds and
        hashrates compressed by 100. Absolute encoding: microsecond
        timestamps and uncompressed hashrates.

        Raises:
            InvalidPayloadError: Missing fields or mismatched array lengths
        """
        batch = self.parse_history(raw)

        if batch.encoding is HistoryEncoding.RELATIVE_COMPRESSED:
            base = batch.timestamp_base or 0
            timestamps = [base + offset for offset in batch.timestamps]
            divisor = HISTORY_COMPRESSION_FACTOR
        else:
            timestamps = [micros // 1000 for micros in batch.timestamps]
            divisor = 1.0

        return [
            Sample(
                timestamp_ms=timestamp,
                hashrate_10m=h10m * HASHRATE_SCALE / divisor,
                hashrate_1h=h1h * HASHRATE_SCALE / divisor,
                hashrate_1d=h1d * HASHRATE_SCALE / divisor,
            )
            for timestamp, h10m, h1h, h1d in zip(
                timestamps, batch.hashrate_10m, batch.hashrate_1h, batch.hashrate_1d
            )
        ]

    def normalize_display(self, raw: LivePayload) -> DisplayTelemetry:
        """Millivolt and milliamp fields to V and A, rounded for display."""
        live = self.parse_live(raw)
        return DisplayTelemetry(
            power=round(live.power, 1),
            voltage=round(live.voltage / 1000, 1),
            current=round(live.current / 1000, 1),
            core_voltage=round(live.core_voltage / 1000, 2),
            core_voltage_actual=round(live.core_voltage_actual / 1000, 2),
            temp=round(live.temp, 1),
            vr_temp=round(live.vr_temp, 1),
            frequency=live.frequency,
            small_core_count=live.small_core_count,
            asic_count=live.asic_count,
            stratum_url=live.stratum_url,
            stratum_user=live.stratum_user,
        )
