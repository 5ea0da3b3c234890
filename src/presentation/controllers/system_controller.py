"""System endpoint exposing reconciliation health."""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from src.application.dtos.health_dto import ReconciliationHealthDTO
from src.application.use_cases.health_use_cases import GetReconciliationHealthUseCase
from src.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health", response_model=ReconciliationHealthDTO)
@inject
async def health(
    get_health_use_case: GetReconciliationHealthUseCase = Depends(
        Provide["get_health_use_case"]
    ),
) -> ReconciliationHealthDTO:
    """Return the reconciliation state and buffer bounds."""
    try:
        health_status = await get_health_use_case.execute()
        logger.debug("health.check.success", state=health_status.state.value)
        return health_status
    except Exception as exc:  # pragma: no cover - defensive logging path
        logger.error("health.check.failure", error=str(exc), exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to retrieve reconciliation health",
        ) from exc
