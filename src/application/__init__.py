"""
Application Layer Package

This package contains the application-specific rules: payload
normalization, the series store and the reconciliation controller that
feeds it, plus the use cases consumed by the presentation layer.
"""

# Re-export submodules
from src.application import dtos, services, use_cases

__all__ = ["dtos", "services", "use_cases"]
