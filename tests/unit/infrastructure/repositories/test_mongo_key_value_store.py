from __future__ import annotations

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from src.domain.entities.errors import CorruptStateError, PersistenceError
from src.infrastructure.database.mongo_database import MongoDatabase
from src.infrastructure.repositories.mongo_key_value_store import MongoKeyValueStore
from tests.conftest import StubMongoClient


@pytest.fixture()
def mongo_database(monkeypatch) -> MongoDatabase:
    monkeypatch.setattr(
        "src.infrastructure.database.mongo_database.MongoClient",
        StubMongoClient,
    )
    return MongoDatabase("mongodb://localhost:27017", "hashwatch")


@pytest.mark.asyncio
async def test_open_creates_unique_key_index(mongo_database: MongoDatabase) -> None:
    store = MongoKeyValueStore(mongo_database, "telemetry_state")

    await store.open()

    collection = mongo_database.get_collection("telemetry_state")
    assert collection.created_indexes == [
        ("key", "key_unique_idx", {"unique": True})
    ]


@pytest.mark.asyncio
async def test_set_upserts_one_document_per_key(mongo_database: MongoDatabase) -> None:
    store = MongoKeyValueStore(mongo_database, "telemetry_state")

    await store.set("cursorTimestamp", "1")
    await store.set("cursorTimestamp", "2")

    collection = mongo_database.get_collection("telemetry_state")
    assert collection.documents == [{"key": "cursorTimestamp", "value": "2"}]
    assert await store.get("cursorTimestamp") == "2"
    assert await store.get("seriesSnapshot") is None


@pytest.mark.asyncio
async def test_delete_removes_key(mongo_database: MongoDatabase) -> None:
    store = MongoKeyValueStore(mongo_database, "telemetry_state")
    await store.set("seriesSnapshot", "{}")

    await store.delete("seriesSnapshot")
    await store.delete("seriesSnapshot")

    assert await store.get("seriesSnapshot") is None


@pytest.mark.asyncio
async def test_non_string_value_is_corrupt(mongo_database: MongoDatabase) -> None:
    collection = mongo_database.get_collection("telemetry_state")
    collection.documents.append({"key": "cursorTimestamp", "value": 12})

    with pytest.raises(CorruptStateError):
        await MongoKeyValueStore(mongo_database, "telemetry_state").get(
            "cursorTimestamp"
        )


@pytest.mark.asyncio
async def test_driver_errors_become_persistence_errors(
    mongo_database: MongoDatabase, monkeypatch
) -> None:
    async def _unavailable(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(mongo_database, "find_one", _unavailable)
    monkeypatch.setattr(mongo_database, "replace_one", _unavailable)
    store = MongoKeyValueStore(mongo_database, "telemetry_state")

    with pytest.raises(PersistenceError):
        await store.get("cursorTimestamp")
    with pytest.raises(PersistenceError):
        await store.set("cursorTimestamp", "1")


@pytest.mark.asyncio
async def test_close_closes_client(mongo_database: MongoDatabase) -> None:
    await MongoKeyValueStore(mongo_database, "telemetry_state").close()

    assert mongo_database.client.closed is True
