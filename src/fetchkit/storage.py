"""
Key-value token storage backends.

Two scopes are supported:
- persistent ("localStorage"): a JSON object kept in a file on disk
- session ("session"): an in-memory dict that lives as long as the process

Both expose the same synchronous string API: get_item / set_item / remove_item.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from .core.config import StorageType
from .core.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StorageType",
    "default_storages",
]


@runtime_checkable
class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Session-scoped storage held in process memory."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileStorage:
    """
    Persistent storage backed by a JSON file.

    The file holds a single JSON object of string values. A missing file
    reads as empty; every write replaces the file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        content = self.path.read_text(encoding="utf-8").strip()
        if not content:
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file must contain a JSON object: {self.path}")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("storage_file_written", path=str(self.path), keys=len(data))

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def default_storages(path: str | Path) -> dict[StorageType, KeyValueStorage]:
    """Persistent file storage at ``path`` plus a fresh session store."""
    return {
        StorageType.LOCAL: FileStorage(path),
        StorageType.SESSION: MemoryStorage(),
    }
