"""
JSON file key-value store - Infrastructure Layer

Keeps every key of the persistence port in one JSON object on disk.
Writes go to a temporary file that atomically replaces the previous one,
so a crash mid-write leaves the last complete state behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from src.domain.entities.errors import CorruptStateError, PersistenceError
from src.shared import get_logger

logger = get_logger(__name__)


class JsonFileKeyValueStore:
    """Key-value store backed by a single JSON document."""

    def __init__(self, file_path: str):
        self.path = Path(file_path)

    async def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot create storage directory: {e}", {"path": str(self.path)}
            ) from e
        logger.info("file_store.opened", path=str(self.path))

    async def close(self) -> None:
        pass

    async def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    async def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except CorruptStateError:
            logger.warning("file_store.overwriting_corrupt_file", path=str(self.path))
            data = {}
        data[key] = value
        self._write(data)

    async def delete(self, key: str) -> None:
        try:
            data = self._read()
        except CorruptStateError:
            self._write({})
            return
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> Dict[str, str]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise PersistenceError(
                f"Cannot read storage file: {e}", {"path": str(self.path)}
            ) from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise CorruptStateError(str(self.path), {"error": str(e)}) from e
        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            raise CorruptStateError(str(self.path), {"type": type(data).__name__})
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(
                f"Cannot write storage file: {e}", {"path": str(self.path)}
            ) from e
