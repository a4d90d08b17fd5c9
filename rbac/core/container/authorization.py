"""Authorization dependency factories.

The persistence adapter is chosen here, at construction, and the engine
only ever sees RbacAdapterProtocol.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from rbac.core.config import get_settings
from rbac.core.container.events import get_event_bus
from rbac.core.container.infrastructure import get_cache, get_logger

if TYPE_CHECKING:
    from rbac.application.services.rbac_manager import RbacManager
    from rbac.domain.protocols.rbac_adapter_protocol import RbacAdapterProtocol
    from rbac.domain.services.rule_registry import RuleRegistry


@lru_cache()
def get_rule_registry() -> "RuleRegistry":
    """Process-wide Rule Registry (rules are registered at startup)."""
    from rbac.domain.services.rule_registry import RuleRegistry

    return RuleRegistry()


@lru_cache()
def get_rbac_adapter() -> "RbacAdapterProtocol":
    """Persistence adapter singleton (in-memory reference backend)."""
    from rbac.infrastructure.persistence.in_memory_adapter import InMemoryRbacAdapter

    return InMemoryRbacAdapter()


@lru_cache()
def get_rbac_manager() -> "RbacManager":
    """Authorization engine singleton wired from settings.

    Usage:
        manager = get_rbac_manager()
        result = await manager.check_permission("alice", "updateProfile")
    """
    from rbac.application.services.rbac_manager import RbacManager

    settings = get_settings()
    cache = get_cache() if settings.hierarchy_cache_enabled else None

    return RbacManager(
        adapter=get_rbac_adapter(),
        rule_registry=get_rule_registry(),
        event_bus=get_event_bus(),
        logger=get_logger(),
        cache=cache,
        cache_ttl=settings.hierarchy_cache_ttl_seconds,
        rule_path_policy=settings.rule_path_policy,
        check_timeout_seconds=settings.check_timeout_seconds,
    )
