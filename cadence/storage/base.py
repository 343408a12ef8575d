"""
Key-Value Store Base Classes

Every record the engine keeps (blocks, energy logs, energy patterns) is a flat
JSON document under a per-user key. Backends only need get/set/delete; the
JSON and id-index helpers live here so all backends behave the same.

Design Principles:
- Absent keys are "default empty state", never an error
- Whole-record writes; no field-level updates, no concurrency tokens
- Backend failures surface as StorageUnavailableError and nothing else
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from cadence.logging_config import get_logger

logger = get_logger(__name__)


class StorageUnavailableError(RuntimeError):
    """The persistence backend could not be reached or refused the operation.

    Callers may retry or degrade (skip learning this turn, still answer the user).
    """

    def __init__(self, backend: str, operation: str, cause: Exception | None = None):
        self.backend = backend
        self.operation = operation
        self.cause = cause
        message = f"{backend} store unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class KeyValueStore(ABC):
    """Minimal persistence contract: string values with optional expiry."""

    name: str = "base"

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored string, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store ``value``; ``ttl_seconds`` None means no expiry."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def get_json(self, key: str) -> Any | None:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt record at {key}")
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        self.set(key, json.dumps(value, default=str), ttl_seconds)

    # ------------------------------------------------------------------
    # Id index helpers (JSON array of ids, insertion ordered)
    # ------------------------------------------------------------------

    def read_index(self, key: str) -> list[str]:
        ids = self.get_json(key)
        if not isinstance(ids, list):
            return []
        return [str(i) for i in ids]

    def add_to_index(self, key: str, item_id: str, ttl_seconds: int | None = None) -> None:
        ids = self.read_index(key)
        if item_id not in ids:
            ids.append(item_id)
        # Re-set even when present so the TTL is refreshed
        self.set_json(key, ids, ttl_seconds)

    def remove_from_index(self, key: str, item_id: str, ttl_seconds: int | None = None) -> bool:
        ids = self.read_index(key)
        if item_id not in ids:
            return False
        ids.remove(item_id)
        self.set_json(key, ids, ttl_seconds)
        return True
