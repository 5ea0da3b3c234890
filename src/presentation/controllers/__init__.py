"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers map application use cases
to API DTOs and translate failures into HTTP errors.
"""

from .dashboard_controller import router as dashboard_router
from .system_controller import router as system_router

__all__ = ["dashboard_router", "system_router"]
