"""
Main module - Composition Root Layer

Wires settings, storage, the device gateway and the reconciliation
controller together. Two entry points share the same container:

- ``src.main.app``: FastAPI application (``uvicorn src.main.app:app``)
- ``python -m src.main``: headless runner logging every update
"""

from .config import AppSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppSettings",
    "get_settings",
    "AppContainer",
    "init_container",
    "get_container",
]
