"""
Persistence adapters

The engine only needs get/set(ttl)/delete on JSON strings. Three backends:
    memory: process-local dict (tests, one-off scripts)
    sqlite: data/scheduling.db, the default for a single host
    redis:  shared store for multi-process deployments

Usage:
    from cadence.storage import create_store
    store = create_store(config)
"""

from pathlib import Path

from cadence import PROJECT_ROOT
from cadence.config import SchedulingConfig
from cadence.storage.base import KeyValueStore, StorageUnavailableError
from cadence.storage.keys import KeySpace
from cadence.storage.memory import MemoryStore
from cadence.storage.sqlite import SQLiteStore


def create_store(config: SchedulingConfig) -> KeyValueStore:
    """Build the backend named by ``config.storage.backend``."""
    storage = config.storage

    if storage.backend == "memory":
        return MemoryStore()

    if storage.backend == "redis":
        from cadence.storage.redis_store import RedisStore

        return RedisStore.from_url(storage.redis_url)

    db_path = Path(storage.sqlite_path)
    if not db_path.is_absolute():
        db_path = PROJECT_ROOT / db_path
    return SQLiteStore(db_path)


__all__ = [
    "KeySpace",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "StorageUnavailableError",
    "create_store",
]
