"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console adapter)
- Cache (Redis, backs the optional hierarchy cache)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from rbac.core.config import get_settings

if TYPE_CHECKING:
    from rbac.domain.protocols.cache_protocol import CacheProtocol
    from rbac.domain.protocols.logger_protocol import LoggerProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from rbac.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        log_level=settings.log_level,
    )


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns RedisAdapter with connection pooling.

    Raises:
        ValueError: If RBAC_REDIS_URL is not configured.
    """
    from redis.asyncio import ConnectionPool, Redis

    from rbac.infrastructure.cache.redis_adapter import RedisAdapter

    settings = get_settings()
    if not settings.redis_url:
        raise ValueError("RBAC_REDIS_URL must be set to use the hierarchy cache")

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    redis_client = Redis(connection_pool=pool)
    return RedisAdapter(redis_client=redis_client)
