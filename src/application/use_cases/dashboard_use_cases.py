"""
Dashboard Use Cases - Application Layer

Read-only projections of the reconciliation state for the presentation
layer, plus the explicit reset operation.
"""

from src.application.dtos.dashboard_dto import DashboardDTO, SampleDTO, TelemetryDTO
from src.application.dtos.series_dto import SeriesEnvelopeDTO
from src.application.use_cases.reconciliation_controller import (
    ReconciliationController,
)
from src.domain.services.telemetry_projections import (
    expected_hash_rate,
    pool_quick_link,
)
from src.shared import get_logger

logger = get_logger(__name__)


class GetDashboardUseCase:
    """Use case returning the latest sample, telemetry and series."""

    def __init__(self, controller: ReconciliationController) -> None:
        self._controller = controller

    async def execute(self) -> DashboardDTO:
        store = self._controller.series_store
        latest = store.latest
        telemetry = self._controller.latest_telemetry

        return DashboardDTO(
            state=self._controller.state,
            latest=SampleDTO.from_domain(latest) if latest else None,
            telemetry=TelemetryDTO.from_domain(telemetry) if telemetry else None,
            expected_hash_rate=expected_hash_rate(telemetry) if telemetry else None,
            quick_link=pool_quick_link(telemetry) if telemetry else None,
            cursor=store.cursor,
            series=SeriesEnvelopeDTO.from_series(store.snapshot()),
        )


class GetSeriesUseCase:
    """Use case returning the buffered series in its storage envelope."""

    def __init__(self, controller: ReconciliationController) -> None:
        self._controller = controller

    async def execute(self) -> SeriesEnvelopeDTO:
        return SeriesEnvelopeDTO.from_series(self._controller.series_store.snapshot())


class ResetReconciliationUseCase:
    """Use case wiping the buffer and restarting backfill from scratch."""

    def __init__(self, controller: ReconciliationController) -> None:
        self._controller = controller

    async def execute(self) -> None:
        was_running = self._controller.is_running
        await self._controller.reset()
        logger.info("dashboard.reset", restarted=was_running)
        if was_running:
            await self._controller.start()
