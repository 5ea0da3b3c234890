"""
Infrastructure Layer Package

This package contains implementations of interfaces defined in the
domain layer: the device HTTP gateway and the key-value stores.
"""

from src.infrastructure import database, gateways, repositories

__all__ = ["database", "gateways", "repositories"]
