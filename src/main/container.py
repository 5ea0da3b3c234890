"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager
from typing import Any

from dependency_injector import containers, providers

from src.application.services.persistent_cursor import PersistentCursor
from src.application.services.series_store import SeriesStore
from src.application.services.unit_normalizer import UnitNormalizer
from src.application.use_cases.dashboard_use_cases import (
    GetDashboardUseCase,
    GetSeriesUseCase,
    ResetReconciliationUseCase,
)
from src.application.use_cases.health_use_cases import GetReconciliationHealthUseCase
from src.application.use_cases.reconciliation_controller import (
    ReconciliationController,
)
from src.domain.entities.errors import PersistenceError
from src.domain.services.retention_window import RetentionWindow
from src.infrastructure.database import MongoDatabase
from src.infrastructure.gateways.axeos_gateway import AxeOSGateway
from src.infrastructure.repositories.json_file_key_value_store import (
    JsonFileKeyValueStore,
)
from src.infrastructure.repositories.mongo_key_value_store import MongoKeyValueStore
from src.shared import current_time_ms, get_logger

from .config import AppSettings

logger = get_logger(__name__)


def _enum_value(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..presentation"])

    # Settings
    config = providers.Configuration()
    clock = providers.Object(current_time_ms)

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.storage.mongo_uri,
        db_name=config.storage.database_name,
    )

    key_value_store = providers.Selector(
        providers.Callable(_enum_value, config.storage.backend),
        file=providers.Singleton(
            JsonFileKeyValueStore,
            file_path=config.storage.file_path,
        ),
        mongo=providers.Singleton(
            MongoKeyValueStore,
            mongo_database=mongo_database,
            collection_name=config.storage.collection_name,
        ),
    )

    # Gateways
    device_gateway = providers.Singleton(
        AxeOSGateway,
        base_url=config.device.base_url,
        info_path=config.device.info_path,
        history_path=config.device.history_path,
        history_range_path=config.device.history_range_path,
        timeout=config.device.timeout,
    )

    # Application services
    unit_normalizer = providers.Singleton(UnitNormalizer)

    retention_window = providers.Singleton(
        RetentionWindow,
        retention_ms=config.reconciliation.retention_ms,
    )

    persistent_cursor = providers.Singleton(
        PersistentCursor,
        key_value_store=key_value_store,
        key=config.storage.cursor_key,
    )

    series_store = providers.Singleton(
        SeriesStore,
        key_value_store=key_value_store,
        cursor=persistent_cursor,
        retention=retention_window,
        clock=clock,
        series_key=config.storage.series_key,
    )

    reconciliation_controller = providers.Singleton(
        ReconciliationController,
        series_store=series_store,
        device_gateway=device_gateway,
        normalizer=unit_normalizer,
        clock=clock,
        poll_interval_seconds=config.reconciliation.poll_interval_seconds,
        max_backfill_pages=config.reconciliation.max_backfill_pages,
        retention_ms=config.reconciliation.retention_ms,
    )

    # Application (use cases)
    get_dashboard_use_case = providers.Factory(
        GetDashboardUseCase,
        controller=reconciliation_controller,
    )

    get_series_use_case = providers.Factory(
        GetSeriesUseCase,
        controller=reconciliation_controller,
    )

    reset_reconciliation_use_case = providers.Factory(
        ResetReconciliationUseCase,
        controller=reconciliation_controller,
    )

    get_health_use_case = providers.Factory(
        GetReconciliationHealthUseCase,
        controller=reconciliation_controller,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for storage and the reconciliation loop.

    Opens the key-value store, starts the controller (backfill, then live
    polling) and tears both down on exit. Storage that cannot be opened is
    logged; the in-memory buffer stays authoritative for the session.
    """
    container = get_container()

    key_value_store = container.key_value_store()
    controller = container.reconciliation_controller()

    try:
        await key_value_store.open()
    except PersistenceError as e:
        logger.warning("container.storage.open_failed", error=e.message)

    await controller.start()
    logger.info("container.resources.initialized")

    try:
        yield container

    finally:
        await controller.stop()
        logger.info("container.controller.stopped")
        await key_value_store.close()
        logger.info("container.resources.shutdown")
