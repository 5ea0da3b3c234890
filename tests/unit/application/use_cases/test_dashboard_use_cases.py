from __future__ import annotations

import pytest

from src.application.use_cases.dashboard_use_cases import (
    GetDashboardUseCase,
    GetSeriesUseCase,
    ResetReconciliationUseCase,
)
from src.application.use_cases.reconciliation_controller import (
    ReconciliationController,
)
from src.domain.entities.reconciliation import ReconciliationState
from tests.conftest import (
    T0,
    ScriptedDeviceGateway,
    live_payload,
    relative_history,
)


@pytest.mark.asyncio
async def test_dashboard_before_first_poll(
    controller: ReconciliationController,
) -> None:
    dto = await GetDashboardUseCase(controller).execute()

    assert dto.state is ReconciliationState.IDLE
    assert dto.latest is None
    assert dto.telemetry is None
    assert dto.expected_hash_rate is None
    assert dto.quick_link is None
    assert dto.series.labels == []


@pytest.mark.asyncio
async def test_dashboard_projects_latest_telemetry(
    controller: ReconciliationController, gateway: ScriptedDeviceGateway
) -> None:
    gateway.history_responses.append(relative_history(T0 - 1000, [0]))
    gateway.default_live = live_payload(
        T0,
        hashrate=1.2,
        voltage=5012,
        frequency=525,
        smallCoreCount=2040,
        asicCount=1,
        stratumURL="public-pool.io",
        stratumUser="bc1qexample.worker1",
    )
    await controller.initialize()

    dto = await GetDashboardUseCase(controller).execute()

    assert dto.state is ReconciliationState.LIVE_ONLY
    assert dto.latest.timestamp_ms == T0
    assert dto.latest.hashrate_10m == 1.2e9
    assert dto.telemetry.voltage == 5.0
    assert dto.expected_hash_rate == 1071
    assert dto.quick_link == "https://web.public-pool.io/#/app/bc1qexample"
    assert dto.cursor == T0
    assert dto.series.labels == [T0 - 1000, T0]


@pytest.mark.asyncio
async def test_series_use_case_returns_envelope(
    controller: ReconciliationController, gateway: ScriptedDeviceGateway
) -> None:
    gateway.history_responses.append(relative_history(T0 - 1000, [0, 1000], 250.0))
    await controller.initialize()

    envelope = await GetSeriesUseCase(controller).execute()

    assert envelope.labels == [T0 - 1000, T0]
    assert envelope.window10m == [2.5e9, 2.5e9]


@pytest.mark.asyncio
async def test_reset_without_running_loop_stays_idle(
    controller: ReconciliationController, gateway: ScriptedDeviceGateway
) -> None:
    gateway.history_responses.append(relative_history(T0, [0]))
    await controller.initialize()

    await ResetReconciliationUseCase(controller).execute()

    assert controller.state is ReconciliationState.IDLE
    assert not controller.is_running
    assert controller.series_store.snapshot() == ()


@pytest.mark.asyncio
async def test_reset_restarts_running_loop(
    controller: ReconciliationController, gateway: ScriptedDeviceGateway
) -> None:
    await controller.start()
    await controller.join()

    await ResetReconciliationUseCase(controller).execute()
    await controller.join()

    assert controller.is_running
    assert controller.state is ReconciliationState.LIVE_ONLY
    assert len(gateway.history_calls) == 2

    await controller.stop()
