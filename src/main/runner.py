"""
Headless Runner - Main Layer

Runs the reconciliation loop without the HTTP API and logs every
reconciled update. Useful to warm the persisted buffer or to watch a
device from a terminal.
"""

import asyncio

from src.domain.entities.reconciliation import ReconciledUpdate
from src.main.config import get_settings
from src.main.container import app_lifespan, init_container
from src.shared import configure_logging, get_logger, update_logging_from_settings

logger = get_logger(__name__)


def log_update(update: ReconciledUpdate) -> None:
    latest = update.latest
    logger.info(
        "runner.update",
        state=update.state.value,
        appended=update.appended,
        size=len(update.series),
        timestamp_ms=latest.timestamp_ms if latest else None,
        hashrate_10m=latest.hashrate_10m if latest else None,
    )


async def run() -> None:
    """Run until cancelled."""
    async with app_lifespan() as container:
        controller = container.reconciliation_controller()
        unsubscribe = controller.subscribe(log_update)
        try:
            await asyncio.Event().wait()
        finally:
            unsubscribe()


def main() -> None:
    configure_logging()
    settings = get_settings()
    update_logging_from_settings(settings)

    init_container(settings)
    logger.info(
        "runner.starting",
        device=settings.device.base_url,
        storage=settings.storage.backend.value,
    )
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("runner.interrupted")
