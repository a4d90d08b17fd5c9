"""Logging event handler for authorization domain events.

Log Levels:
    - INFO: ATTEMPTED/SUCCEEDED workflow events and mutation facts
    - WARNING: FAILED events

Structured Fields:
    - event_id: UUID for event correlation
    - occurred_at: ISO 8601 timestamp (UTC)
    - user_id / role: assignment events
    - item_name / parent / child / rule_name: hierarchy and rule events
    - reason: ErrorCode value (FAILED events)

Handler methods are named ``handle_<event_name_in_snake_case>`` so the
container can wire every event in RBAC_EVENTS by name.

Usage:
    >>> handler = LoggingEventHandler(logger=get_logger())
    >>> event_bus.subscribe(
    ...     RoleAssignmentSucceeded, handler.handle_role_assignment_succeeded
    ... )
"""

import re

from rbac.domain.events import (
    AllRolesRevoked,
    DomainEvent,
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
from rbac.domain.protocols.logger_protocol import LoggerProtocol

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def handler_method_name(event_type: type[DomainEvent]) -> str:
    """``RoleAssignmentFailed`` -> ``handle_role_assignment_failed``."""
    return "handle_" + _CAMEL_BOUNDARY.sub("_", event_type.__name__).lower()


class LoggingEventHandler:
    """Structured logging of authorization events.

    Attributes:
        _logger: Logger protocol implementation (from container).
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    def _base(self, event: DomainEvent) -> dict[str, str]:
        return {
            "event_id": str(event.event_id),
            "occurred_at": event.occurred_at.isoformat(),
        }

    # =========================================================================
    # Role Assignment
    # =========================================================================

    async def handle_role_assignment_attempted(self, event: RoleAssignmentAttempted) -> None:
        """Log role assignment attempt (INFO level)."""
        self._logger.info(
            "role_assignment_attempted",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
        )

    async def handle_role_assignment_succeeded(self, event: RoleAssignmentSucceeded) -> None:
        """Log successful role assignment (INFO level)."""
        self._logger.info(
            "role_assignment_succeeded",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
            created=event.created,
        )

    async def handle_role_assignment_failed(self, event: RoleAssignmentFailed) -> None:
        """Log failed role assignment (WARNING level)."""
        self._logger.warning(
            "role_assignment_failed",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
            reason=event.reason,
        )

    # =========================================================================
    # Role Revocation
    # =========================================================================

    async def handle_role_revocation_attempted(self, event: RoleRevocationAttempted) -> None:
        """Log role revocation attempt (INFO level)."""
        self._logger.info(
            "role_revocation_attempted",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
        )

    async def handle_role_revocation_succeeded(self, event: RoleRevocationSucceeded) -> None:
        """Log successful role revocation (INFO level)."""
        self._logger.info(
            "role_revocation_succeeded",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
        )

    async def handle_role_revocation_failed(self, event: RoleRevocationFailed) -> None:
        """Log failed role revocation (WARNING level)."""
        self._logger.warning(
            "role_revocation_failed",
            **self._base(event),
            user_id=event.user_id,
            role=event.role,
            reason=event.reason,
        )

    async def handle_all_roles_revoked(self, event: AllRolesRevoked) -> None:
        """Log bulk revocation (INFO level)."""
        self._logger.info(
            "all_roles_revoked",
            **self._base(event),
            user_id=event.user_id,
            count=event.count,
        )

    # =========================================================================
    # Hierarchy
    # =========================================================================

    async def handle_rbac_item_added(self, event: RbacItemAdded) -> None:
        self._logger.info(
            "rbac_item_added",
            **self._base(event),
            item_name=event.item_name,
            item_type=event.item_type,
            rule=event.rule,
        )

    async def handle_rbac_item_removed(self, event: RbacItemRemoved) -> None:
        self._logger.info(
            "rbac_item_removed",
            **self._base(event),
            item_name=event.item_name,
            edges_removed=event.edges_removed,
            assignments_removed=event.assignments_removed,
        )

    async def handle_rbac_item_child_added(self, event: RbacItemChildAdded) -> None:
        self._logger.info(
            "rbac_item_child_added",
            **self._base(event),
            parent=event.parent,
            child=event.child,
        )

    async def handle_rbac_item_child_removed(self, event: RbacItemChildRemoved) -> None:
        self._logger.info(
            "rbac_item_child_removed",
            **self._base(event),
            parent=event.parent,
            child=event.child,
        )

    # =========================================================================
    # Rules
    # =========================================================================

    async def handle_rbac_rule_added(self, event: RbacRuleAdded) -> None:
        self._logger.info("rbac_rule_added", **self._base(event), rule_name=event.rule_name)

    async def handle_rbac_rule_removed(self, event: RbacRuleRemoved) -> None:
        self._logger.info("rbac_rule_removed", **self._base(event), rule_name=event.rule_name)
