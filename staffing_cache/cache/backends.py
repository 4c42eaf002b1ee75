"""Backing stores for the TTL cache.

A backend is a flat string-to-string map. It knows nothing about
envelopes, TTLs, or namespaces; TTLCacheStore layers those on top.

Implementations:
- InMemoryStorageBackend: process-local dict (default, used by tests)
- JsonFileStorageBackend: whole namespace persisted to one JSON file
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from staffing_cache.core.logging import get_logger


logger = get_logger(__name__)


@runtime_checkable
class StorageBackendProtocol(Protocol):
    """Protocol for key/value backing stores.

    Allows injection of a fake or persistent backend into TTLCacheStore.
    """

    def get(self, key: str) -> str | None:
        """Return the raw stored string, or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a raw string."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys as one write. Returns how many existed."""
        ...

    def keys(self) -> list[str]:
        """Return a snapshot of all stored keys."""
        ...

    def close(self) -> None:
        """Release any resources held by the backend."""
        ...


class InMemoryStorageBackend:
    """Dict-backed storage; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def delete_many(self, keys: Iterable[str]) -> int:
        return sum(1 for key in keys if self._data.pop(key, None) is not None)

    def keys(self) -> list[str]:
        return list(self._data)

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStorageBackend:
    """Storage persisted as a single JSON object on disk.

    The file is read once on construction and rewritten atomically
    (temp file + os.replace) after every mutation; delete_many() counts
    as one mutation. An unreadable file is logged and replaced by an
    empty store.

    Example:
        >>> backend = JsonFileStorageBackend("/var/cache/staffing.json")
        >>> backend.set("shifty_staff-list:mgr_1", '{"payload": []}')
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize and load existing contents.

        Args:
            path: Location of the JSON file; parent directories are created
        """
        self._path = Path(path)
        self._data: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        """Return the file backing this store."""
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Cache file unreadable, starting empty", path=str(self._path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            logger.warning("Cache file has unexpected shape, starting empty", path=str(self._path))
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._data, handle)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        self._flush()
        return True

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete every present key, then rewrite the file once."""
        removed = sum(1 for key in keys if self._data.pop(key, None) is not None)
        if removed:
            self._flush()
        return removed

    def keys(self) -> list[str]:
        return list(self._data)

    def close(self) -> None:
        self._flush()
