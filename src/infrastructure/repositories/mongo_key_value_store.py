"""
MongoDB key-value store - Infrastructure Layer

One document per key: ``{"key": <name>, "value": <string>}``.
"""

from typing import Optional

import pymongo.errors

from src.domain.entities.errors import CorruptStateError, PersistenceError
from src.infrastructure.database.mongo_database import MongoDatabase
from src.shared import get_logger

logger = get_logger(__name__)


class MongoKeyValueStore:
    """Key-value store persisting into a MongoDB collection."""

    def __init__(self, mongo_database: MongoDatabase, collection_name: str):
        self.mongo_database = mongo_database
        self.collection_name = collection_name

    async def open(self) -> None:
        try:
            await self.mongo_database.create_unique_index(
                self.collection_name, "key", "key_unique_idx"
            )
        except pymongo.errors.PyMongoError as e:
            raise PersistenceError(f"MongoDB unavailable: {e}") from e
        logger.info("mongo_store.opened", collection=self.collection_name)

    async def close(self) -> None:
        self.mongo_database.close()

    async def get(self, key: str) -> Optional[str]:
        try:
            document = await self.mongo_database.find_one(
                self.collection_name, {"key": key}
            )
        except pymongo.errors.PyMongoError as e:
            raise PersistenceError(f"MongoDB read failed: {e}", {"key": key}) from e
        if document is None:
            return None
        value = document.get("value")
        if not isinstance(value, str):
            raise CorruptStateError(key, {"type": type(value).__name__})
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self.mongo_database.replace_one(
                self.collection_name,
                {"key": key},
                {"key": key, "value": value},
                upsert=True,
            )
        except Exception as e:
            raise PersistenceError(f"MongoDB write failed: {e}", {"key": key}) from e

    async def delete(self, key: str) -> None:
        try:
            await self.mongo_database.delete_one(self.collection_name, {"key": key})
        except pymongo.errors.PyMongoError as e:
            raise PersistenceError(f"MongoDB delete failed: {e}", {"key": key}) from e
