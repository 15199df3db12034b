"""Async Redis client wrapper implementing the key/value store interface."""

from __future__ import annotations

import redis.asyncio as aioredis


class AsyncRedisClient:
    """Async Redis client storing plain string values with optional TTL."""

    def __init__(self, redis_url: str, max_connections: int = 20) -> None:
        self._redis_url = redis_url
        self._max_connections = max_connections
        self._pool: aioredis.ConnectionPool | None = None
        self._redis: aioredis.Redis | None = None

    async def connect(self) -> None:
        """Open the connection pool. Called lazily by the first operation."""
        self._pool = aioredis.ConnectionPool.from_url(
            self._redis_url,
            max_connections=self._max_connections,
            decode_responses=True,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Release the client and disconnect the pool."""
        if self._redis:
            await self._redis.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._redis = None
        self._pool = None

    async def _client(self) -> aioredis.Redis:
        if self._redis is None:
            await self.connect()
        return self._redis

    async def contains(self, key: str) -> bool:
        """Check if a key exists."""
        redis = await self._client()
        return await redis.exists(key) > 0

    async def fetch(self, key: str) -> str | None:
        """Get a value from cache."""
        redis = await self._client()
        return await redis.get(key)

    async def save(self, key: str, data: str, ttl: int = 0) -> None:
        """Set a value in cache. A TTL of zero or less never expires."""
        redis = await self._client()
        await redis.set(key, data, ex=ttl if ttl > 0 else None)

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        redis = await self._client()
        return await redis.delete(key) > 0

    async def __aenter__(self) -> "AsyncRedisClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
