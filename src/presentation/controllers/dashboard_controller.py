"""
Dashboard Router - Presentation Layer

This module defines the FastAPI router exposing the reconciled series,
the latest telemetry and the reset operation.
"""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from src.application.dtos.dashboard_dto import DashboardDTO
from src.application.dtos.series_dto import SeriesEnvelopeDTO
from src.application.use_cases.dashboard_use_cases import (
    GetDashboardUseCase,
    GetSeriesUseCase,
    ResetReconciliationUseCase,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardDTO)
@inject
async def get_dashboard(
    get_dashboard_use_case: GetDashboardUseCase = Depends(
        Provide["get_dashboard_use_case"]
    ),
) -> DashboardDTO:
    """
    Get the latest sample, display telemetry and derived figures.

    The full buffered series (at most one hour) is included so a chart
    can be drawn from a single call.
    """
    try:
        return await get_dashboard_use_case.execute()
    except Exception as e:
        logger.error("Failed to build dashboard", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.get("/series", response_model=SeriesEnvelopeDTO)
@inject
async def get_series(
    get_series_use_case: GetSeriesUseCase = Depends(Provide["get_series_use_case"]),
) -> SeriesEnvelopeDTO:
    """Get the buffered series as parallel arrays."""
    try:
        return await get_series_use_case.execute()
    except Exception as e:
        logger.error("Failed to read series", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.post("/reset", status_code=status.HTTP_202_ACCEPTED)
@inject
async def reset_dashboard(
    reset_use_case: ResetReconciliationUseCase = Depends(
        Provide["reset_reconciliation_use_case"]
    ),
) -> dict:
    """
    Wipe the buffer and cursor, then backfill the last hour again.
    """
    try:
        await reset_use_case.execute()
    except Exception as e:
        logger.error("Failed to reset dashboard", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    return {"status": "reset"}
