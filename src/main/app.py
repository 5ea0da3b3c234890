"""
Main Application - Main Layer

FastAPI entry point: ``uvicorn src.main.app:app``. The reconciliation
loop runs inside the application lifespan, so the dashboard endpoints
read a series that is kept up to date in the background.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.main.config import AppSettings, get_settings
from src.main.container import app_lifespan, init_container
from src.presentation.controllers import dashboard_router, system_router
from src.shared import configure_logging, get_logger, update_logging_from_settings

# LOG_* variables only until the settings are loaded
configure_logging()

settings = get_settings()
update_logging_from_settings(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the reconciliation loop for as long as the application serves."""
    app.state.started_at = datetime.now(timezone.utc)
    logger.info(
        "app.starting",
        device=app.state.settings.device.base_url,
        storage=app.state.settings.storage.backend.value,
    )

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("app.stopped")


def create_app(app_settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Build the FastAPI application around a fresh container.

    Args:
        app_settings: Settings to use; loaded from the environment if None
    """
    app_settings = app_settings or get_settings()
    init_container(app_settings)

    app = FastAPI(
        title=app_settings.app.title,
        description=app_settings.app.description,
        version=app_settings.app.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(dashboard_router)
    app.include_router(system_router)

    return app


app = create_app(settings)
