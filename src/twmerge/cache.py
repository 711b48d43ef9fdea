"""Result caches for :class:`twmerge.merger.Merger`."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

__all__ = ["Cache", "SimpleCache"]


@runtime_checkable
class Cache(Protocol):
    """Key-value store for merge results; must be safe for concurrent use.

    ``get`` returns the stored string, or ``None`` when ``key`` is missing.
    A miss is signalled by ``None`` alone; implementations must not return a
    ``(value, found)`` pair.
    """

    def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None``."""
        ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self) -> None: ...


class SimpleCache:
    """Unbounded dict guarded by a lock. Entries are only removed by clear()."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data
