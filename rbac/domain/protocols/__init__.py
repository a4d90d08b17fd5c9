"""Domain protocols (ports).

Infrastructure adapters implement these structurally (no inheritance).
"""

from rbac.domain.protocols.cache_protocol import CacheProtocol
from rbac.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from rbac.domain.protocols.logger_protocol import LoggerProtocol
from rbac.domain.protocols.rbac_adapter_protocol import (
    RbacAdapterProtocol,
    RbacAssignmentAdapterProtocol,
    RbacItemAdapterProtocol,
    RbacItemChildAdapterProtocol,
    RbacRuleAdapterProtocol,
)
from rbac.domain.protocols.rule_protocol import RbacRuleProtocol, RulePredicate

__all__ = [
    "CacheProtocol",
    "EventBusProtocol",
    "EventHandler",
    "LoggerProtocol",
    "RbacAdapterProtocol",
    "RbacAssignmentAdapterProtocol",
    "RbacItemAdapterProtocol",
    "RbacItemChildAdapterProtocol",
    "RbacRuleAdapterProtocol",
    "RbacRuleProtocol",
    "RulePredicate",
]
