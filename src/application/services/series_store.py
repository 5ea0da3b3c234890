"""
Application Service - Series Store

Owns the in-memory hashrate buffer together with its retention policy and
cursor. Every mutation goes through ``append``/``merge``/``trim`` and is
followed by trim + cursor update (synchronously) and then persistence.
"""

from typing import Iterable, List, Optional

from pydantic import ValidationError

from src.application.dtos.series_dto import SeriesEnvelopeDTO
from src.application.services.persistent_cursor import PersistentCursor
from src.domain.entities.errors import PersistenceError
from src.domain.entities.telemetry import (
    ColdStart,
    ColdStartReason,
    Populated,
    RestoreOutcome,
    Sample,
    Series,
)
from src.domain.ports.key_value_store import IKeyValueStore
from src.domain.services.retention_window import RetentionWindow
from src.shared import get_logger
from src.shared.clock import Clock, current_time_ms

logger = get_logger(__name__)

SERIES_KEY = "seriesSnapshot"


class SeriesStore:
    """Ordered, deduplicated, retention-bounded buffer of samples."""

    def __init__(
        self,
        key_value_store: IKeyValueStore,
        cursor: PersistentCursor,
        retention: RetentionWindow,
        clock: Clock = current_time_ms,
        series_key: str = SERIES_KEY,
    ):
        self._kv = key_value_store
        self._cursor_store = cursor
        self._retention = retention
        self._clock = clock
        self._series_key = series_key
        self._series: Series = ()
        self._cursor: Optional[int] = None

    @property
    def cursor(self) -> Optional[int]:
        """Newest absorbed timestamp still backed by retained data."""
        return self._cursor

    @property
    def latest(self) -> Optional[Sample]:
        return self._series[-1] if self._series else None

    def __len__(self) -> int:
        return len(self._series)

    def snapshot(self) -> Series:
        """Immutable view of the buffer, safe to hand to renderers."""
        return self._series

    async def append(self, sample: Sample) -> bool:
        """
        Append one live sample.

        Returns:
            False when the timestamp is not newer than the last entry
        """
        latest = self.latest
        if latest is not None and sample.timestamp_ms <= latest.timestamp_ms:
            logger.debug(
                "series_store.append.skipped",
                timestamp_ms=sample.timestamp_ms,
                last_timestamp_ms=latest.timestamp_ms,
            )
            return False

        self._commit(self._series + (sample,))
        await self._persist()
        return True

    async def merge(self, batch: Iterable[Sample]) -> int:
        """
        Absorb a backfill batch sorted ascending.

        Only samples newer than the running last timestamp are kept, so
        overlapping refetches are harmless.

        Returns:
            Number of samples absorbed before trimming
        """
        newest = self.latest.timestamp_ms if self._series else None
        absorbed: List[Sample] = []
        for sample in batch:
            if newest is None or sample.timestamp_ms > newest:
                absorbed.append(sample)
                newest = sample.timestamp_ms

        if not absorbed:
            await self.trim()
            return 0

        self._commit(self._series + tuple(absorbed))
        await self._persist()
        logger.debug(
            "series_store.merge.completed",
            absorbed=len(absorbed),
            size=len(self._series),
            cursor=self._cursor,
        )
        return len(absorbed)

    async def trim(self) -> int:
        """Apply retention against the wall clock; persists only on change."""
        before = len(self._series)
        self._commit(self._series)
        removed = before - len(self._series)
        if removed:
            logger.debug("series_store.trimmed", removed=removed)
            await self._persist()
        return removed

    async def restore(self) -> RestoreOutcome:
        """
        Load the persisted snapshot and cursor, then trim them.

        Any unreadable or inconsistent stored state yields an empty buffer
        with no cursor rather than partially loaded data.
        """
        try:
            raw_series = await self._kv.get(self._series_key)
            cursor = await self._cursor_store.load()
        except PersistenceError as e:
            return self._cold_start(ColdStartReason.CORRUPT, str(e))

        if raw_series is None and cursor is None:
            return self._cold_start(ColdStartReason.ABSENT)

        series: Series = ()
        if raw_series is not None:
            try:
                series = SeriesEnvelopeDTO.model_validate_json(raw_series).to_series()
            except ValidationError as e:
                return self._cold_start(
                    ColdStartReason.CORRUPT, e.errors(include_url=False)
                )

        self._series = ()
        self._cursor = cursor
        self._commit(series)
        if len(self._series) != len(series):
            await self._persist()

        logger.info(
            "series_store.restored",
            loaded=len(series),
            retained=len(self._series),
            cursor=self._cursor,
        )
        return Populated(series=self._series, cursor=self._cursor)

    async def reset(self) -> None:
        """Forget the buffer and the cursor, in memory and in storage."""
        self._series = ()
        self._cursor = None
        try:
            await self._kv.delete(self._series_key)
            await self._cursor_store.clear()
        except PersistenceError as e:
            logger.warning("series_store.reset.persist_failed", error=str(e))

    def _cold_start(self, reason: ColdStartReason, error: object = None) -> ColdStart:
        self._series = ()
        self._cursor = None
        if reason is ColdStartReason.CORRUPT:
            logger.warning("series_store.restore.corrupt", error=error)
        else:
            logger.info("series_store.restore.empty")
        return ColdStart(reason=reason)

    def _commit(self, series: Series) -> None:
        # no suspension point: readers never see a trimmed series with a
        # stale cursor
        self._series = self._retention.trim(series, self._clock())
        if not self._series:
            return

        newest = self._series[-1].timestamp_ms
        if self._cursor is None or newest >= self._cursor:
            self._cursor = newest
        else:
            logger.warning(
                "series_store.cursor.regression_ignored",
                cursor=self._cursor,
                newest_timestamp_ms=newest,
            )

    async def _persist(self) -> None:
        envelope = SeriesEnvelopeDTO.from_series(self._series).model_dump_json()
        cursor = self._cursor
        try:
            await self._kv.set(self._series_key, envelope)
        except PersistenceError as e:
            # cursor must never point past what storage holds
            logger.warning(
                "series_store.persist_failed", key=self._series_key, error=str(e)
            )
            return

        if cursor is None:
            return
        try:
            await self._cursor_store.store(cursor)
        except PersistenceError as e:
            logger.warning("series_store.cursor.persist_failed", error=str(e))
