"""In-process store with TTL expiry. Used by tests and single-process runs."""

from __future__ import annotations

import time
from typing import Callable

from cadence.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    name = "memory"

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.time
        self._data: dict[str, tuple[str, float | None]] = {}

    def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._data[key]
            return None
        return value

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Live keys, for debugging and tests."""
        return [k for k in list(self._data) if self.get(k) is not None]

    def ttl(self, key: str) -> float | None:
        entry = self._data.get(key)
        if entry is None or entry[1] is None:
            return None
        return entry[1] - self._clock()
