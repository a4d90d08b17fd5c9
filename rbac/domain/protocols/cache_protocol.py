"""Cache protocol for the optional hierarchy cache.

Architecture:
- Protocol-based - uses structural typing
- All operations return Result types
- Fail-open strategy: cache failures must not break permission checks
"""

from typing import Any, Protocol

from rbac.core.errors import DomainError
from rbac.core.result import Result


class CacheProtocol(Protocol):
    """Cache protocol - what the hierarchy graph needs from a cache."""

    async def get_json(self, key: str) -> Result[Any | None, DomainError]:
        """Get a JSON value from cache.

        Args:
            key: Cache key.

        Returns:
            Result with the decoded value, None on miss, or CacheError.
        """
        ...

    async def set_json(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Store a JSON-serializable value.

        Args:
            key: Cache key.
            value: JSON-serializable value.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        ...

    async def delete_pattern(self, pattern: str) -> Result[int, DomainError]:
        """Delete every key matching a glob pattern.

        Args:
            pattern: Glob pattern (e.g., "rbac:children:*").

        Returns:
            Result with number of keys deleted, or CacheError.
        """
        ...
