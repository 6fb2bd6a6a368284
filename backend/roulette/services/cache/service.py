"""Cache service implementation.

This module provides an abstract key/value cache interface and two concrete
implementations: a process-local dict store and a Redis store. Both keep
values until they are explicitly deleted; restaurant results are invalidated
by location changes, not by age.

Values are JSON-serializable objects. ``set_many`` writes all given keys or
none of them, which the restaurant cache relies on to keep its restaurants and
location records consistent.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class CacheService(ABC):
    """Abstract base class for key/value cache services."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to look up.

        Returns:
            The cached value if found, None otherwise.
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value in cache.

        Args:
            key: The cache key to store under.
            value: The value to cache (must be JSON serializable).
        """
        pass

    @abstractmethod
    async def set_many(self, values: Mapping[str, Any]) -> None:
        """Store several values at once, all-or-nothing.

        Args:
            values: Mapping of cache key to value.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a specific key from the cache.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key was deleted, False if it didn't exist.
        """
        pass

    @abstractmethod
    async def delete_many(self, *keys: str) -> int:
        """Delete several keys.

        Returns:
            Number of keys that existed and were removed.
        """
        pass

    async def close(self) -> None:
        """Release any underlying connection."""


class InMemoryCacheService(CacheService):
    """Dict-backed cache living for the lifetime of the process.

    Values are stored serialized so callers never share mutable state with
    the store, matching what they would get back from Redis.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def set_many(self, values: Mapping[str, Any]) -> None:
        # Serialize everything first so a bad value leaves the store untouched
        serialized = {key: json.dumps(value) for key, value in values.items()}
        self._data.update(serialized)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def delete_many(self, *keys: str) -> int:
        return sum([await self.delete(key) for key in keys])


class RedisCacheService(CacheService):
    """Redis-based implementation of the cache service.

    Uses Redis for storing cached values with JSON serialization and
    MULTI/EXEC transactions for multi-key writes.

    Attributes:
        _client: The Redis async client instance.
        _key_prefix: Namespace prepended to every key.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "roulette:",
    ) -> None:
        """Initialize the Redis cache service.

        Args:
            redis_url: Redis connection URL. Defaults to localhost:6379.
            key_prefix: Prefix for all keys written by this service.
        """
        self._redis_url = redis_url
        self._key_prefix = key_prefix
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Establish connection to Redis.

        Should be called before using the cache service.
        """
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def close(self) -> None:
        """Close the Redis connection.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> redis.Redis:
        """Ensure Redis client is connected.

        Returns:
            The connected Redis client.
        """
        if self._client is None:
            await self.connect()
        return self._client  # type: ignore

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to look up.

        Returns:
            The deserialized cached value if found, None otherwise.
        """
        client = await self._ensure_connected()
        value = await client.get(self._key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            # Return raw value if not JSON
            return value

    async def set(self, key: str, value: Any) -> None:
        client = await self._ensure_connected()
        await client.set(self._key(key), json.dumps(value))

    async def set_many(self, values: Mapping[str, Any]) -> None:
        """Store several values inside one MULTI/EXEC transaction."""
        client = await self._ensure_connected()
        serialized = {self._key(key): json.dumps(value) for key, value in values.items()}
        async with client.pipeline(transaction=True) as pipe:
            pipe.mset(serialized)
            await pipe.execute()

    async def delete(self, key: str) -> bool:
        client = await self._ensure_connected()
        result = await client.delete(self._key(key))
        return result > 0

    async def delete_many(self, *keys: str) -> int:
        if not keys:
            return 0
        client = await self._ensure_connected()
        return await client.delete(*(self._key(key) for key in keys))


def create_cache_service(redis_url: str | None) -> CacheService:
    """Redis when a URL is configured, otherwise the in-memory store."""
    if redis_url:
        logger.info("[CACHE] Using Redis store")
        return RedisCacheService(redis_url=redis_url)
    logger.info("[CACHE] REDIS_URL not set, using in-memory store")
    return InMemoryCacheService()
