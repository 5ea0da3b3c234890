"""Domain port for durable key-value storage."""

from __future__ import annotations

from typing import Optional, Protocol


class IKeyValueStore(Protocol):
    """String key-value storage that survives process restarts."""

    async def open(self) -> None:
        """Prepare the underlying storage (create files, indexes...)."""
        ...

    async def close(self) -> None:
        """Release the underlying storage."""
        ...

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent.

        Raises:
            PersistenceError: When the storage cannot be read.
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            PersistenceError: When the storage cannot be written.
        """
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``; removing an absent key is not an error."""
        ...
