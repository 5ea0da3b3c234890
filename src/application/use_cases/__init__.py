"""
Use Cases Package - Application Layer

This package contains the reconciliation controller and the use cases
exposing its state to the presentation layer.
"""

from .dashboard_use_cases import (
    GetDashboardUseCase,
    GetSeriesUseCase,
    ResetReconciliationUseCase,
)
from .health_use_cases import GetReconciliationHealthUseCase
from .reconciliation_controller import ReconciliationController

__all__ = [
    "ReconciliationController",
    "GetDashboardUseCase",
    "GetSeriesUseCase",
    "ResetReconciliationUseCase",
    "GetReconciliationHealthUseCase",
]
