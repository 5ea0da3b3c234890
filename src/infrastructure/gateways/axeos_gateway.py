"""
Infrastructure Gateway - AxeOS Implementation

This module implements the device gateway against the AxeOS HTTP API,
reading the live system info document and the hashrate history.
"""

from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from src.application.dtos.device_dto import HistoryRangeDTO
from src.domain.entities.errors import DeviceGatewayError
from src.domain.gateways.device_gateway import IDeviceGateway

logger = structlog.get_logger(__name__)


class AxeOSGateway(IDeviceGateway):
    """Implementation of the device gateway using an HTTP client."""

    def __init__(
        self,
        base_url: str,
        info_path: str = "/api/system/info",
        history_path: str = "/api/history",
        history_range_path: Optional[str] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize AxeOS gateway.

        Args:
            base_url: Base URL of the device (e.g., "http://192.168.1.50")
            info_path: Path of the live system info endpoint
            history_path: Path of the history endpoint
            history_range_path: Path of the optional range probe; None
                disables it
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.info_path = info_path
        self.history_path = history_path
        self.history_range_path = history_range_path
        self.timeout = timeout

    async def get_live_sample(self) -> Dict[str, Any]:
        """Fetch the current system info document."""
        return await self._get_json(self.info_path)

    async def get_history_batch(self, start_timestamp: int) -> Dict[str, Any]:
        """Fetch history points at or after ``start_timestamp`` (epoch ms)."""
        logger.debug("axeos.history.requested", start_timestamp=start_timestamp)
        return await self._get_json(
            self.history_path, params={"start_timestamp": str(start_timestamp)}
        )

    async def get_history_range_end(self) -> Optional[int]:
        """Newest history timestamp, or None when the probe is not configured."""
        if not self.history_range_path:
            return None

        data = await self._get_json(self.history_range_path)
        try:
            return HistoryRangeDTO.model_validate(data).last_timestamp
        except ValidationError as e:
            raise DeviceGatewayError(
                "AxeOS history range response is malformed",
                {"response": data},
            ) from e

    async def _get_json(
        self, path: str, params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            logger.warning(
                "axeos.http_error",
                status_code=e.response.status_code,
                response_text=e.response.text,
                url=url,
            )
            raise DeviceGatewayError(
                f"AxeOS HTTP error {e.response.status_code}: {e.response.text}",
                {"url": url, "status_code": e.response.status_code},
            ) from e

        except httpx.RequestError as e:
            logger.warning("axeos.request_error", error=str(e), url=url)
            raise DeviceGatewayError(
                f"AxeOS request failed: {str(e)}", {"url": url}
            ) from e

        except ValueError as e:
            logger.warning("axeos.invalid_json", error=str(e), url=url)
            raise DeviceGatewayError(
                f"AxeOS returned invalid JSON: {str(e)}", {"url": url}
            ) from e

        if not isinstance(data, dict):
            raise DeviceGatewayError(
                "AxeOS returned a non-object JSON document",
                {"url": url, "type": type(data).__name__},
            )
        return data
