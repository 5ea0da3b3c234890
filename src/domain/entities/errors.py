"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidPayloadError(DomainError):
    """Raised when a live or history payload is malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class DeviceGatewayError(DomainError):
    """Raised when the device HTTP API cannot be reached or answers badly."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class PersistenceError(DomainError):
    """Raised when the key-value storage cannot be read or written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class CorruptStateError(PersistenceError):
    """Raised when persisted data exists but cannot be decoded."""

    def __init__(self, key: str, details: Optional[Dict[str, Any]] = None):
        message = f"Persisted value for '{key}' is corrupt"
        super().__init__(message, details)


class ReconciliationStateError(DomainError):
    """Raised when the controller is driven from an unexpected state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
