"""
Presentation Layer Package

FastAPI routers serving the reconciled series, the latest device
telemetry and the reconciliation health.
"""

from src.presentation import controllers

__all__ = ["controllers"]
