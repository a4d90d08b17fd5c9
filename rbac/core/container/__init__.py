"""Container module - Centralized dependency injection.

Re-exports every factory function:

    from rbac.core.container import get_logger, get_rbac_manager

Organized by concern:
- infrastructure: logging, cache
- events: event bus and subscriptions
- authorization: rule registry, persistence adapter, engine
"""

from rbac.core.container.authorization import (
    get_rbac_adapter,
    get_rbac_manager,
    get_rule_registry,
)
from rbac.core.container.events import get_event_bus
from rbac.core.container.infrastructure import get_cache, get_logger

__all__ = [
    "get_cache",
    "get_event_bus",
    "get_logger",
    "get_rbac_adapter",
    "get_rbac_manager",
    "get_rule_registry",
]
