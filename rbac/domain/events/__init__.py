"""Domain events package.

Usage:
    from rbac.domain.events import DomainEvent, RoleAssignmentSucceeded
"""

from rbac.domain.events.base_event import DomainEvent
from rbac.domain.events.rbac_events import (
    AllRolesRevoked,
    RbacItemAdded,
    RbacItemChildAdded,
    RbacItemChildRemoved,
    RbacItemRemoved,
    RbacRuleAdded,
    RbacRuleRemoved,
    RoleAssignmentAttempted,
    RoleAssignmentFailed,
    RoleAssignmentSucceeded,
    RoleRevocationAttempted,
    RoleRevocationFailed,
    RoleRevocationSucceeded,
)

# Every event the engine publishes; the container wires handlers from it.
RBAC_EVENTS: tuple[type[DomainEvent], ...] = (
    RoleAssignmentAttempted,
    RoleAssignmentSucceeded,
    RoleAssignmentFailed,
    RoleRevocationAttempted,
    RoleRevocationSucceeded,
    RoleRevocationFailed,
    AllRolesRevoked,
    RbacItemAdded,
    RbacItemRemoved,
    RbacItemChildAdded,
    RbacItemChildRemoved,
    RbacRuleAdded,
    RbacRuleRemoved,
)

__all__ = [
    "RBAC_EVENTS",
    "AllRolesRevoked",
    "DomainEvent",
    "RbacItemAdded",
    "RbacItemChildAdded",
    "RbacItemChildRemoved",
    "RbacItemRemoved",
    "RbacRuleAdded",
    "RbacRuleRemoved",
    "RoleAssignmentAttempted",
    "RoleAssignmentFailed",
    "RoleAssignmentSucceeded",
    "RoleRevocationAttempted",
    "RoleRevocationFailed",
    "RoleRevocationSucceeded",
]
