"""
Domain Gateway - Device

This module defines the gateway interface for reading live telemetry and
hashrate history from a mining device.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IDeviceGateway(ABC):
    """Interface for the device telemetry API."""

    @abstractmethod
    async def get_live_sample(self) -> Dict[str, Any]:
        """
        Fetch the current telemetry snapshot.

        Returns:
            Raw, unvalidated system info document

        Raises:
            DeviceGatewayError: When the request fails
        """
        pass

    @abstractmethod
    async def get_history_batch(self, start_timestamp: int) -> Dict[str, Any]:
        """
        Fetch every history point known at or after ``start_timestamp``.

        Args:
            start_timestamp: Inclusive lower bound, epoch milliseconds

        Returns:
            Raw, unvalidated history payload (parallel arrays, may be empty)

        Raises:
            DeviceGatewayError: When the request fails
        """
        pass

    @abstractmethod
    async def get_history_range_end(self) -> Optional[int]:
        """
        Fetch the newest timestamp the history endpoint can serve.

        Returns:
            Epoch milliseconds, or None when the device does not expose it

        Raises:
            DeviceGatewayError: When the request fails
        """
        pass
