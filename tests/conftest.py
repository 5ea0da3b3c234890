from __future__ import annotations

import asyncio
import json
import sys
from collections import deque
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Deque, Dict, Iterable, List, Optional, Sequence, Set, Union

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.application.services.persistent_cursor import PersistentCursor  # noqa: E402
from src.application.services.series_store import SeriesStore  # noqa: E402
from src.application.services.unit_normalizer import UnitNormalizer  # noqa: E402
from src.application.use_cases.reconciliation_controller import (  # noqa: E402
    ReconciliationController,
)
from src.domain.entities.errors import (  # noqa: E402
    DeviceGatewayError,
    PersistenceError,
)
from src.domain.entities.telemetry import Sample  # noqa: E402
from src.domain.gateways.device_gateway import IDeviceGateway  # noqa: E402
from src.domain.services.retention_window import RetentionWindow  # noqa: E402

T0 = 1_726_000_000_000
HOUR_MS = 3_600_000

Scripted = Union[Dict[str, Any], Exception]


def make_sample(timestamp_ms: int, value: float = 1.0) -> Sample:
    return Sample(
        timestamp_ms=timestamp_ms,
        hashrate_10m=value,
        hashrate_1h=value,
        hashrate_1d=value,
    )


def live_payload(timestamp_ms: int, hashrate: float = 1.0, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "hashRate_10m": hashrate,
        "hashRate_1h": hashrate,
        "hashRate_1d": hashrate,
        "hashRateTimestamp": timestamp_ms,
    }
    payload.update(extra)
    return payload


def relative_history(
    base: int, offsets: Sequence[int], hashrate: float = 100.0
) -> Dict[str, Any]:
    return {
        "timestampBase": base,
        "timestamps": list(offsets),
        "hashrate_10m": [hashrate] * len(offsets),
        "hashrate_1h": [hashrate] * len(offsets),
        "hashrate_1d": [hashrate] * len(offsets),
    }


def absolute_history(timestamps_ms: Sequence[int], hashrate: float = 1.0) -> Dict[str, Any]:
    return {
        "timestamps": [timestamp * 1000 for timestamp in timestamps_ms],
        "hashrate_10m": [hashrate] * len(timestamps_ms),
        "hashrate_1h": [hashrate] * len(timestamps_ms),
        "hashrate_1d": [hashrate] * len(timestamps_ms),
    }


EMPTY_HISTORY: Dict[str, Any] = relative_history(0, [])


def envelope_json(timestamps_ms: Sequence[int], hashrate: float = 1.0) -> str:
    return json.dumps(
        {
            "labels": list(timestamps_ms),
            "window10m": [hashrate] * len(timestamps_ms),
            "window1h": [hashrate] * len(timestamps_ms),
            "window1d": [hashrate] * len(timestamps_ms),
        }
    )


def timestamps_of(series: Iterable[Sample]) -> List[int]:
    return [sample.timestamp_ms for sample in series]


class ManualClock:
    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, delta_ms: int) -> None:
        self.now += delta_ms


class FakeKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})
        self.failing_keys: Set[str] = set()
        self.fail_reads = False
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceError("read failed", {"key": key})
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if key in self.failing_keys:
            raise PersistenceError("quota exceeded", {"key": key})
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class ScriptedDeviceGateway(IDeviceGateway):
    """Replays queued responses; exceptions in the queue are raised."""

    def __init__(self) -> None:
        self.live_responses: Deque[Scripted] = deque()
        self.history_responses: Deque[Scripted] = deque()
        self.default_live: Optional[Dict[str, Any]] = None
        self.range_end: Optional[int] = None
        self.range_error: Optional[Exception] = None
        self.live_gate: Optional[asyncio.Event] = None
        self.history_gate: Optional[asyncio.Event] = None
        self.live_calls = 0
        self.history_calls: List[int] = []

    async def get_live_sample(self) -> Dict[str, Any]:
        self.live_calls += 1
        if self.live_gate is not None:
            await self.live_gate.wait()
        if self.live_responses:
            return self._unwrap(self.live_responses.popleft())
        if self.default_live is not None:
            return self.default_live
        raise DeviceGatewayError("no live sample scripted")

    async def get_history_batch(self, start_timestamp: int) -> Dict[str, Any]:
        self.history_calls.append(start_timestamp)
        if self.history_gate is not None:
            await self.history_gate.wait()
        if self.history_responses:
            return self._unwrap(self.history_responses.popleft())
        return EMPTY_HISTORY

    async def get_history_range_end(self) -> Optional[int]:
        if self.range_error is not None:
            raise self.range_error
        return self.range_end

    @staticmethod
    def _unwrap(item: Scripted) -> Dict[str, Any]:
        if isinstance(item, Exception):
            raise item
        return item


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.created_indexes: List[tuple] = []

    def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if self._matches(document, query):
                return document
        return None

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        for index, existing in enumerate(self.documents):
            if self._matches(existing, query):
                self.documents[index] = document
                return SimpleNamespace(matched_count=1, acknowledged=True)
        if upsert:
            self.documents.append(document)
        return SimpleNamespace(matched_count=0, acknowledged=True)

    def delete_one(self, query: Dict[str, Any]) -> Any:
        for index, existing in enumerate(self.documents):
            if self._matches(existing, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())


class StubMongoClient:
    def __init__(self, uri: str) -> None:
        self.uri = uri
        self.databases: Dict[str, Dict[str, FakeCollection]] = {}
        self.closed = False

    def __getitem__(self, name: str) -> "StubMongoDb":
        return StubMongoDb(self.databases.setdefault(name, {}))

    def close(self) -> None:
        self.closed = True


class StubMongoDb:
    def __init__(self, collections: Dict[str, FakeCollection]) -> None:
        self.collections = collections

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def kv_store() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def gateway() -> ScriptedDeviceGateway:
    return ScriptedDeviceGateway()


@pytest.fixture()
def normalizer() -> UnitNormalizer:
    return UnitNormalizer()


@pytest.fixture()
def series_store(kv_store: FakeKeyValueStore, clock: ManualClock) -> SeriesStore:
    return SeriesStore(
        key_value_store=kv_store,
        cursor=PersistentCursor(kv_store),
        retention=RetentionWindow(),
        clock=clock,
    )


@pytest.fixture()
def controller(
    series_store: SeriesStore,
    gateway: ScriptedDeviceGateway,
    normalizer: UnitNormalizer,
    clock: ManualClock,
) -> ReconciliationController:
    return ReconciliationController(
        series_store=series_store,
        device_gateway=gateway,
        normalizer=normalizer,
        clock=clock,
        poll_interval_seconds=5.0,
    )
