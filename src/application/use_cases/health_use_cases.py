"""Use case for the health endpoint."""

from src.application.dtos.health_dto import ReconciliationHealthDTO
from src.application.use_cases.reconciliation_controller import (
    ReconciliationController,
)
from src.domain.entities.reconciliation import ReconciliationState


class GetReconciliationHealthUseCase:
    """Use case responsible for returning reconciliation health."""

    def __init__(self, controller: ReconciliationController) -> None:
        self._controller = controller

    async def execute(self) -> ReconciliationHealthDTO:
        state = self._controller.state
        series = self._controller.series_store.snapshot()

        return ReconciliationHealthDTO(
            status="up" if state is ReconciliationState.LIVE_ONLY else "starting",
            state=state,
            cursor=self._controller.series_store.cursor,
            sample_count=len(series),
            oldest_timestamp_ms=series[0].timestamp_ms if series else None,
            newest_timestamp_ms=series[-1].timestamp_ms if series else None,
        )
