"""
MongoDB Database - Infrastructure Layer

This module provides a thin MongoDB client used by the key-value store.
It handles connection, collections and the few document operations the
persistence layer needs.
"""

from typing import Any, Dict, Optional

import pymongo.errors
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from src.shared import get_logger

logger = get_logger(__name__)


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document in a collection.

        Returns:
            The document if found, None otherwise
        """
        return self.db[collection_name].find_one(query)

    async def replace_one(
        self,
        collection_name: str,
        query: Dict[str, Any],
        document: Dict[str, Any],
        upsert: bool = False,
    ) -> Dict[str, Any]:
        """
        Replace (or, with ``upsert``, insert) a document in a collection.

        Raises:
            Exception: If no document matched without upsert, or the write
                was not acknowledged
        """
        result = self.db[collection_name].replace_one(query, document, upsert=upsert)
        if not upsert and result.matched_count == 0:
            raise Exception(f"Document not found in {collection_name}")
        if not result.acknowledged:
            raise Exception(f"Failed to replace document in {collection_name}")
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> int:
        """
        Delete a document from a collection.

        Returns:
            Number of deleted documents (0 or 1)
        """
        result = self.db[collection_name].delete_one(query)
        return result.deleted_count

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    async def create_unique_index(
        self, collection_name: str, field: str, index_name: str
    ) -> None:
        """
        Ensure a unique index on ``field``.

        A pre-existing, conflicting index is left in place.
        """
        try:
            self.db[collection_name].create_index(field, name=index_name, unique=True)
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.index.create_failed", index=index_name, error=str(e)
            )
