"""
Database package - Infrastructure Layer

This package contains the MongoDB client backing the optional MongoDB
key-value store.
"""

from src.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase"]
