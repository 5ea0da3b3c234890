"""
Reconciliation controller - Application Layer

Drives the series store through a one-off history backfill followed by a
steady live poll:

    IDLE -> BACKFILL_PENDING -> BACKFILLING -> LIVE_ONLY

Everything runs on the event loop. Backfill pages and live polls are
single-outstanding requests; a live sample polled before LIVE_ONLY is kept
in a one-slot deferral buffer and flushed when LIVE_ONLY is entered.
"""

import asyncio
import contextlib
from typing import Any, Callable, Coroutine, List, Optional, Set, Tuple

from src.application.services.series_store import SeriesStore
from src.application.services.unit_normalizer import UnitNormalizer
from src.domain.entities.errors import (
    DeviceGatewayError,
    InvalidPayloadError,
    ReconciliationStateError,
)
from src.domain.entities.reconciliation import (
    BackfillRange,
    ReconciledUpdate,
    ReconciliationState,
)
from src.domain.entities.telemetry import ColdStart, DisplayTelemetry, Sample
from src.domain.gateways.device_gateway import IDeviceGateway
from src.shared import get_logger
from src.shared.clock import Clock, current_time_ms
from src.shared.consts import LIVE_POLL_INTERVAL_SECONDS, RETENTION_MS

logger = get_logger(__name__)

Listener = Callable[[ReconciledUpdate], None]


class ReconciliationController:
    """State machine merging history backfill and live polling."""

    def __init__(
        self,
        series_store: SeriesStore,
        device_gateway: IDeviceGateway,
        normalizer: UnitNormalizer,
        clock: Clock = current_time_ms,
        poll_interval_seconds: float = LIVE_POLL_INTERVAL_SECONDS,
        max_backfill_pages: int = 50,
        retention_ms: int = RETENTION_MS,
    ):
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        if max_backfill_pages <= 0:
            raise ValueError("max_backfill_pages must be positive")

        self._store = series_store
        self._gateway = device_gateway
        self._normalizer = normalizer
        self._clock = clock
        self._poll_interval = poll_interval_seconds
        self._max_backfill_pages = max_backfill_pages
        self._retention_ms = retention_ms

        self._state = ReconciliationState.IDLE
        # bumped by stop()/reset(); late results from older epochs are ignored
        self._epoch = 0
        self._live_in_flight = False
        self._deferred: Optional[Tuple[Sample, DisplayTelemetry]] = None
        self._latest_telemetry: Optional[DisplayTelemetry] = None
        self._listeners: List[Listener] = []
        self._timer_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ReconciliationState:
        return self._state

    @property
    def series_store(self) -> SeriesStore:
        return self._store

    @property
    def latest_telemetry(self) -> Optional[DisplayTelemetry]:
        return self._latest_telemetry

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for reconciled updates; returns unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def compute_backfill_range(
        self, now_ms: int, range_end_ms: Optional[int] = None
    ) -> BackfillRange:
        """
        Resume right after the cursor, never earlier than the retention
        floor, up to now (or the newest point the device can serve).
        """
        floor = now_ms - self._retention_ms
        cursor = self._store.cursor
        start = floor if cursor is None else max(cursor + 1, floor)
        end = now_ms if range_end_ms is None else min(now_ms, range_end_ms + 1)
        return BackfillRange(start_ms=start, end_ms=end)

    async def start(self) -> None:
        """Launch backfill and the live-poll timer in the background."""
        if self._timer_task is not None:
            return
        if self._state is not ReconciliationState.IDLE:
            raise ReconciliationStateError(
                "Controller must be reset before it can start again",
                {"state": self._state.value},
            )

        logger.info(
            "reconciliation.starting", poll_interval_seconds=self._poll_interval
        )
        self._spawn(self._safe_initialize())
        self._timer_task = asyncio.create_task(self._run_timer())

    async def stop(self) -> None:
        """Stop the timer; in-flight requests resolve into the void."""
        self._epoch += 1
        timer, self._timer_task = self._timer_task, None
        if timer is not None:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        logger.info("reconciliation.stopped", state=self._state.value)

    async def reset(self) -> None:
        """Stop, wipe the buffer and cursor, and return to IDLE."""
        await self.stop()
        await self._store.reset()
        self._state = ReconciliationState.IDLE
        self._deferred = None
        self._latest_telemetry = None
        self._live_in_flight = False
        logger.info("reconciliation.reset")

    async def join(self) -> None:
        """Wait for background initialize/tick tasks spawned so far."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def initialize(self) -> None:
        """Restore the store, backfill the gap, then switch to LIVE_ONLY."""
        if self._state is not ReconciliationState.IDLE:
            raise ReconciliationStateError(
                "Initialize is only valid from IDLE", {"state": self._state.value}
            )
        epoch = self._epoch

        outcome = await self._store.restore()
        if isinstance(outcome, ColdStart):
            logger.info("reconciliation.cold_start", reason=outcome.reason.value)

        self._state = ReconciliationState.BACKFILL_PENDING
        now = self._clock()
        range_end = await self._probe_history_range_end()
        if epoch != self._epoch:
            return

        backfill_range = self.compute_backfill_range(now, range_end)
        if backfill_range.is_empty:
            logger.info(
                "reconciliation.backfill.skipped",
                start_ms=backfill_range.start_ms,
                end_ms=backfill_range.end_ms,
            )
            await self._store.trim()
        else:
            self._state = ReconciliationState.BACKFILLING
            await self._backfill(backfill_range, epoch)

        if epoch != self._epoch:
            return
        await self._enter_live_only()

    async def tick(self) -> None:
        """
        One timer tick: retention pass plus at most one live request.

        Listeners hear about a trim even when no live sample follows it.
        """
        epoch = self._epoch
        removed = 0
        if self._state is ReconciliationState.LIVE_ONLY:
            removed = await self._store.trim()

        if self._live_in_flight:
            logger.debug("reconciliation.live_poll.tick_dropped")
        elif await self._poll_live():
            return

        if removed and epoch == self._epoch:
            self._notify(appended=False)

    async def _backfill(self, backfill_range: BackfillRange, epoch: int) -> None:
        page_start = backfill_range.start_ms
        pages = 0
        absorbed_total = 0

        logger.info(
            "reconciliation.backfill.started",
            start_ms=backfill_range.start_ms,
            end_ms=backfill_range.end_ms,
        )

        while page_start < backfill_range.end_ms and pages < self._max_backfill_pages:
            try:
                raw = await self._gateway.get_history_batch(page_start)
            except DeviceGatewayError as e:
                logger.warning(
                    "reconciliation.backfill.request_failed",
                    start_timestamp=page_start,
                    error=e.message,
                )
                break

            if epoch != self._epoch:
                logger.debug("reconciliation.backfill.stale_page_ignored")
                return
            pages += 1

            try:
                samples = self._normalizer.normalize_history_batch(raw)
            except InvalidPayloadError as e:
                logger.warning(
                    "reconciliation.backfill.invalid_payload",
                    start_timestamp=page_start,
                    details=e.details,
                )
                break

            if not samples:
                break

            absorbed = await self._store.merge(samples)
            absorbed_total += absorbed
            newest = max(sample.timestamp_ms for sample in samples)
            logger.info(
                "reconciliation.backfill.page_merged",
                page=pages,
                received=len(samples),
                absorbed=absorbed,
                newest_timestamp_ms=newest,
            )
            if newest < page_start:
                break
            page_start = newest + 1

        logger.info(
            "reconciliation.backfill.completed",
            pages=pages,
            absorbed=absorbed_total,
            cursor=self._store.cursor,
        )
        self._notify(appended=absorbed_total > 0)

    async def _probe_history_range_end(self) -> Optional[int]:
        try:
            return await self._gateway.get_history_range_end()
        except DeviceGatewayError as e:
            logger.warning("reconciliation.range_probe.failed", error=e.message)
            return None

    async def _enter_live_only(self) -> None:
        self._state = ReconciliationState.LIVE_ONLY
        logger.info("reconciliation.live_only.entered", size=len(self._store))

        if self._deferred is not None:
            sample, telemetry = self._deferred
            self._deferred = None
            await self._absorb_live(sample, telemetry)

        if not self._live_in_flight:
            await self._poll_live()

    async def _poll_live(self) -> bool:
        """Returns True when the result was absorbed and listeners notified."""
        epoch = self._epoch
        self._live_in_flight = True
        try:
            raw = await self._gateway.get_live_sample()
        except DeviceGatewayError as e:
            logger.warning("reconciliation.live_poll.failed", error=e.message)
            return False
        finally:
            if epoch == self._epoch:
                self._live_in_flight = False

        if epoch != self._epoch:
            logger.debug("reconciliation.live_poll.stale_result_ignored")
            return False

        try:
            live = self._normalizer.parse_live(raw)
            sample = self._normalizer.normalize_live(live)
            telemetry = self._normalizer.normalize_display(live)
        except InvalidPayloadError as e:
            logger.warning("reconciliation.live_poll.invalid_payload", details=e.details)
            return False

        if self._state is not ReconciliationState.LIVE_ONLY:
            if self._deferred is not None:
                logger.debug(
                    "reconciliation.live_poll.deferred_replaced",
                    dropped_timestamp_ms=self._deferred[0].timestamp_ms,
                )
            self._deferred = (sample, telemetry)
            return False

        await self._absorb_live(sample, telemetry)
        return True

    async def _absorb_live(self, sample: Sample, telemetry: DisplayTelemetry) -> None:
        self._latest_telemetry = telemetry
        appended = await self._store.append(sample)
        self._notify(appended=appended)

    def _notify(self, appended: bool) -> None:
        update = ReconciledUpdate(
            state=self._state,
            latest=self._store.latest,
            telemetry=self._latest_telemetry,
            appended=appended,
            series=self._store.snapshot(),
        )
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception as exc:  # pragma: no cover
                logger.error("reconciliation.listener.failed", exc_info=exc)

    async def _safe_initialize(self) -> None:
        epoch = self._epoch
        try:
            await self.initialize()
        except Exception as exc:  # pragma: no cover
            logger.error("reconciliation.initialize.failed", exc_info=exc)
            if epoch == self._epoch and self._state is not ReconciliationState.LIVE_ONLY:
                await self._enter_live_only()

    async def _safe_tick(self) -> None:
        try:
            await self.tick()
        except Exception as exc:  # pragma: no cover
            logger.error("reconciliation.tick.failed", exc_info=exc)

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            self._spawn(self._safe_tick())

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
