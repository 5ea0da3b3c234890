"""
Gateways Package - Infrastructure Layer

This package contains concrete implementations of the gateway
interfaces defined in the domain layer.
"""

from .axeos_gateway import AxeOSGateway

__all__ = ["AxeOSGateway"]
