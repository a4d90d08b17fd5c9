"""Cache adapters implementing CacheProtocol."""

from rbac.infrastructure.cache.redis_adapter import RedisAdapter

__all__ = ["RedisAdapter"]
