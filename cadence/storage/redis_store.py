"""Redis-backed key-value store (SET ... EX for expiring records)."""

from __future__ import annotations

import redis
from redis import Redis

from cadence.logging_config import get_logger
from cadence.storage.base import KeyValueStore, StorageUnavailableError

logger = get_logger(__name__)


class RedisStore(KeyValueStore):
    name = "redis"

    def __init__(self, client: Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> RedisStore:
        return cls(Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> str | None:
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "get", e) from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            if ttl_seconds:
                self.client.set(key, value, ex=ttl_seconds)
            else:
                self.client.set(key, value)
        except redis.RedisError as e:
            logger.error(f"Redis SET failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "set", e) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis DEL failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "delete", e) from e
