"""Durable cursor marking the newest sample absorbed into the series."""

from typing import Optional

from src.domain.entities.errors import CorruptStateError
from src.domain.ports.key_value_store import IKeyValueStore

CURSOR_KEY = "cursorTimestamp"


class PersistentCursor:
    """
    Reads and writes the cursor timestamp through the key-value port.

    Monotonicity is the caller's job; ``store`` writes whatever it gets.
    """

    def __init__(self, key_value_store: IKeyValueStore, key: str = CURSOR_KEY):
        self._store = key_value_store
        self._key = key

    async def load(self) -> Optional[int]:
        """
        Returns:
            The stored timestamp, or None on first run

        Raises:
            CorruptStateError: The stored value is not an integer
            PersistenceError: The storage cannot be read
        """
        raw = await self._store.get(self._key)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except (AttributeError, ValueError) as e:
            raise CorruptStateError(self._key, {"value": raw}) from e

    async def store(self, timestamp_ms: int) -> None:
        await self._store.set(self._key, str(int(timestamp_ms)))

    async def clear(self) -> None:
        await self._store.delete(self._key)
