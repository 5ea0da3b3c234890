from __future__ import annotations

from typing import Any, Dict, List

import httpx
import pytest

from src.domain.entities.errors import DeviceGatewayError
from src.infrastructure.gateways.axeos_gateway import AxeOSGateway
from tests.conftest import T0, live_payload, relative_history


class _StubResponse:
    def __init__(self, status_code: int, json_data: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self._invalid_json = invalid_json
        self.text = "error"

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("GET", "http://axeos")
            response = httpx.Response(self.status_code, request=request, text=self.text)
            raise httpx.HTTPStatusError("error", request=request, response=response)


class _StubAsyncClient:
    def __init__(self, response: _StubResponse, calls: List[Dict[str, Any]]):
        self._response = response
        self._calls = calls

    async def __aenter__(self) -> "_StubAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, params: Dict[str, str] | None = None):
        self._calls.append({"url": url, "params": params})
        return self._response


class _FailingAsyncClient(_StubAsyncClient):
    async def get(self, url: str, params: Dict[str, str] | None = None):
        raise httpx.ConnectError("connection refused")


def _patch_client(monkeypatch, response: _StubResponse) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []
    monkeypatch.setattr(
        "httpx.AsyncClient",
        lambda timeout: _StubAsyncClient(response, calls),
    )
    return calls


@pytest.mark.asyncio
async def test_get_live_sample_returns_document(monkeypatch) -> None:
    payload = live_payload(T0)
    calls = _patch_client(monkeypatch, _StubResponse(200, payload))

    gateway = AxeOSGateway("http://192.168.1.50/")
    result = await gateway.get_live_sample()

    assert result == payload
    assert calls == [{"url": "http://192.168.1.50/api/system/info", "params": None}]


@pytest.mark.asyncio
async def test_get_history_batch_sends_start_timestamp(monkeypatch) -> None:
    payload = relative_history(T0, [0, 5000])
    calls = _patch_client(monkeypatch, _StubResponse(200, payload))

    gateway = AxeOSGateway("http://axeos", history_path="/api/v2/history")
    result = await gateway.get_history_batch(T0 - 1000)

    assert result == payload
    assert calls[0]["url"] == "http://axeos/api/v2/history"
    assert calls[0]["params"] == {"start_timestamp": str(T0 - 1000)}


@pytest.mark.asyncio
async def test_http_error_is_wrapped(monkeypatch) -> None:
    _patch_client(monkeypatch, _StubResponse(503))

    with pytest.raises(DeviceGatewayError) as exc_info:
        await AxeOSGateway("http://axeos").get_live_sample()

    assert exc_info.value.details["status_code"] == 503


@pytest.mark.asyncio
async def test_request_error_is_wrapped(monkeypatch) -> None:
    monkeypatch.setattr(
        "httpx.AsyncClient",
        lambda timeout: _FailingAsyncClient(_StubResponse(200), []),
    )

    with pytest.raises(DeviceGatewayError):
        await AxeOSGateway("http://axeos").get_history_batch(T0)


@pytest.mark.asyncio
async def test_invalid_json_is_wrapped(monkeypatch) -> None:
    _patch_client(monkeypatch, _StubResponse(200, invalid_json=True))

    with pytest.raises(DeviceGatewayError):
        await AxeOSGateway("http://axeos").get_live_sample()


@pytest.mark.asyncio
async def test_non_object_document_is_rejected(monkeypatch) -> None:
    _patch_client(monkeypatch, _StubResponse(200, [1, 2, 3]))

    with pytest.raises(DeviceGatewayError):
        await AxeOSGateway("http://axeos").get_live_sample()


@pytest.mark.asyncio
async def test_range_probe_disabled_without_path(monkeypatch) -> None:
    calls = _patch_client(monkeypatch, _StubResponse(200, {"lastTimestamp": T0}))

    assert await AxeOSGateway("http://axeos").get_history_range_end() is None
    assert calls == []


@pytest.mark.asyncio
async def test_range_probe_reads_last_timestamp(monkeypatch) -> None:
    _patch_client(monkeypatch, _StubResponse(200, {"lastTimestamp": T0}))

    gateway = AxeOSGateway("http://axeos", history_range_path="/api/history/range")

    assert await gateway.get_history_range_end() == T0


@pytest.mark.asyncio
async def test_malformed_range_probe_is_rejected(monkeypatch) -> None:
    _patch_client(monkeypatch, _StubResponse(200, {"first": 0}))

    gateway = AxeOSGateway("http://axeos", history_range_path="/api/history/range")

    with pytest.raises(DeviceGatewayError):
        await gateway.get_history_range_end()
