"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the key-value storage
port defined in the domain layer.
"""

from .json_file_key_value_store import JsonFileKeyValueStore
from .mongo_key_value_store import MongoKeyValueStore

__all__ = ["JsonFileKeyValueStore", "MongoKeyValueStore"]
