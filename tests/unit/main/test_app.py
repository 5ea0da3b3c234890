from __future__ import annotations

import pytest
from dependency_injector import providers

from src.main import app as module_app
from src.main.app import create_app
from src.main.config import AppInfoSettings, AppSettings
from src.main.container import get_container
from tests.conftest import FakeKeyValueStore, ScriptedDeviceGateway


@pytest.mark.asyncio
async def test_create_app_initializes_lifespan() -> None:
    app = create_app()
    assert app.title

    container = get_container()
    container.key_value_store.override(providers.Object(FakeKeyValueStore()))
    container.device_gateway.override(providers.Object(ScriptedDeviceGateway()))

    async with app.router.lifespan_context(app):
        assert app.state.started_at is not None
        assert app.state.container is container
        await container.reconciliation_controller().join()

    paths = {route.path for route in app.routes}
    assert {"/dashboard", "/dashboard/series", "/dashboard/reset", "/health"} <= paths

    # Ensure module-level app is instantiated
    assert isinstance(module_app.app, type(app))


def test_create_app_uses_given_settings() -> None:
    app = create_app(AppSettings(app=AppInfoSettings(title="Rig 2", version="9.9")))

    assert app.title == "Rig 2"
    assert app.version == "9.9"
    assert app.state.settings.app.title == "Rig 2"
