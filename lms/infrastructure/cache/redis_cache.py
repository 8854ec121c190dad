"""Redis-based cache service.

Async Redis cache holding JSON snapshots of read views (course documents,
user profiles, admin lists, analytics series). Key format lives in
lms.application.services.cache_keys. Every operation is best-effort: Redis being
down or erroring degrades to a cache miss and never fails the request.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from lms.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNLINK_CHUNK_SIZE = 500


class CacheService:
    """Async Redis cache service with optional TTL.

    Uses lms.core.config for connection settings. Call connect() at
    startup and disconnect() at shutdown. A connection or timeout error
    triggers one reconnect and a single retry of the operation.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Drop the current client and connect again. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _call(
        self,
        description: str,
        operation: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run operation against Redis; reconnect once on connection loss, swallow Redis errors."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await operation(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await operation(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s failed after reconnect", description)
                    return default
            logger.warning("Cache %s unavailable (Redis disconnected)", description)
            return default
        except redis.RedisError:
            logger.exception("Cache %s failed", description)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""

        async def _get(client: redis.Redis) -> Any | None:
            value = await client.get(key)
            if value is None:
                logger.debug("Cache MISS: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return json.loads(value)

        return await self._call(f"get {key}", _get, None)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value as JSON. Without ttl the entry lives until invalidated.

        Args:
            key: Cache key (use lms.application.services.cache_keys builders).
            value: JSON-serializable value.
            ttl: Optional time-to-live in seconds.

        Returns:
            True if stored, False otherwise.
        """
        serialized = json.dumps(value)

        async def _set(client: redis.Redis) -> bool:
            if ttl is None:
                await client.set(key, serialized)
            else:
                await client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %s)", key, ttl)
            return True

        return await self._call(f"set {key}", _set, False)

    async def delete(self, *keys: str) -> int:
        """Remove keys. Returns the number of keys that existed."""
        if not keys:
            return 0

        async def _delete(client: redis.Redis) -> int:
            removed = int(await client.delete(*keys))
            logger.debug("Cache DELETE: %s (%s removed)", ", ".join(keys), removed)
            return removed

        return await self._call(f"delete {keys!r}", _delete, 0)

    async def exists(self, key: str) -> bool:
        """Return True if key is present."""

        async def _exists(client: redis.Redis) -> bool:
            return bool(await client.exists(key))

        return await self._call(f"exists {key}", _exists, False)

    async def keys(self, pattern: str) -> list[str]:
        """Return keys matching pattern using SCAN (never the blocking KEYS command)."""

        async def _scan(client: redis.Redis) -> list[str]:
            return [key async for key in client.scan_iter(match=pattern)]

        return await self._call(f"scan {pattern}", _scan, [])

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Collects keys in chunks and UNLINKs each chunk in a pipeline to
        minimize round-trips and keep memory reclamation async on the server.

        Args:
            pattern: Redis SCAN match pattern (e.g. course:*).

        Returns:
            Number of keys deleted.
        """

        async def _unlink(client: redis.Redis, chunk: list[str]) -> int:
            async with client.pipeline(transaction=False) as pipe:
                pipe.unlink(*chunk)
                results = await pipe.execute()
            return sum(int(r or 0) for r in results)

        async def _delete_pattern(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= _UNLINK_CHUNK_SIZE:
                    deleted += await _unlink(client, chunk)
                    chunk = []
            if chunk:
                deleted += await _unlink(client, chunk)
            if deleted > 0:
                logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted

        return await self._call(f"delete_pattern {pattern}", _delete_pattern, 0)
