"""Domain gateways package."""

from .device_gateway import IDeviceGateway

__all__ = ["IDeviceGateway"]
