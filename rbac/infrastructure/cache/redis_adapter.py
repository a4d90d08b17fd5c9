"""Redis adapter implementing CacheProtocol.

Backs the optional hierarchy cache. Wraps an async Redis client and maps
Redis exceptions to CacheError.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with InfrastructureErrorCode
- Returns Result types for all operations
- Fail-open: callers treat any Failure as a cache miss
"""

import json
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from rbac.core.enums import ErrorCode
from rbac.core.result import Failure, Result, Success
from rbac.infrastructure.enums import InfrastructureErrorCode
from rbac.infrastructure.errors import CacheError


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Note: Does NOT inherit from CacheProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        self._redis = redis_client

    async def get_json(self, key: str) -> Result[Any | None, CacheError]:
        """Get a JSON value from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with the decoded value, None if not found, or CacheError.
        """
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message=f"Failed to get key '{key}' from cache",
                    details={"key": key, "error": str(e)},
                )
            )

        if raw is None:
            return Success(value=None)

        try:
            decoded = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            return Success(value=json.loads(decoded))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message=f"Failed to parse JSON for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )

    async def set_json(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Store a JSON-serializable value.

        Args:
            key: Cache key.
            value: Value to cache (JSON serialized).
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.VALIDATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to serialize value for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )

        try:
            if ttl is not None:
                await self._redis.setex(key, ttl, serialized)
            else:
                await self._redis.set(key, serialized)
            return Success(value=None)
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to set key '{key}' in cache",
                    details={"key": key, "ttl": ttl, "error": str(e)},
                )
            )

    async def delete_pattern(self, pattern: str) -> Result[int, CacheError]:
        """Delete every key matching a glob pattern.

        Uses SCAN rather than KEYS so large keyspaces do not block Redis.

        Args:
            pattern: Glob pattern (e.g., "rbac:children:*").

        Returns:
            Result with number of keys deleted, or CacheError.
        """
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern, count=100)]
            if not keys:
                return Success(value=0)
            deleted = await self._redis.delete(*keys)
            return Success(value=int(deleted))
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_DELETE_ERROR,
                    message=f"Failed to delete keys matching '{pattern}'",
                    details={"pattern": pattern, "error": str(e)},
                )
            )

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity."""
        try:
            return Success(value=bool(await self._redis.ping()))
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message="Redis ping failed",
                    details={"error": str(e)},
                )
            )
