"""Authorization domain events.

Pattern: 3 events per assignment workflow (ATTEMPTED -> SUCCEEDED/FAILED)
- *Attempted: Operation initiated (before validation)
- *Succeeded: Operation persisted
- *Failed: Operation rejected (validation or backend failure)

Hierarchy and rule mutations emit a single fact event after they persist.

Handlers:
- LoggingEventHandler: ALL events
"""

from dataclasses import dataclass

from rbac.domain.events.base_event import DomainEvent


# ═══════════════════════════════════════════════════════════════
# Role Assignment (Workflow 1)
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class RoleAssignmentAttempted(DomainEvent):
    """Role assignment attempt initiated.

    Attributes:
        user_id: User to receive the role.
        role: Role being assigned.
    """

    user_id: str
    role: str


@dataclass(frozen=True, kw_only=True)
class RoleAssignmentSucceeded(DomainEvent):
    """Role assignment persisted.

    Attributes:
        user_id: User who received the role.
        role: Role that was assigned.
        created: False when the user already held the role (idempotent no-op).
    """

    user_id: str
    role: str
    created: bool = True


@dataclass(frozen=True, kw_only=True)
class RoleAssignmentFailed(DomainEvent):
    """Role assignment rejected.

    Attributes:
        user_id: User targeted for the role.
        role: Role that was attempted.
        reason: ErrorCode value explaining the failure (e.g., "invalid_reference").
    """

    user_id: str
    role: str
    reason: str


# ═══════════════════════════════════════════════════════════════
# Role Revocation (Workflow 2)
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class RoleRevocationAttempted(DomainEvent):
    """Role revocation attempt initiated.

    Attributes:
        user_id: User to lose the role.
        role: Role being revoked.
    """

    user_id: str
    role: str


@dataclass(frozen=True, kw_only=True)
class RoleRevocationSucceeded(DomainEvent):
    """Role revocation persisted.

    Attributes:
        user_id: User who lost the role.
        role: Role that was revoked.
    """

    user_id: str
    role: str


@dataclass(frozen=True, kw_only=True)
class RoleRevocationFailed(DomainEvent):
    """Role revocation rejected.

    Attributes:
        user_id: User targeted for revocation.
        role: Role that was attempted.
        reason: ErrorCode value explaining the failure (e.g., "assignment_not_found").
    """

    user_id: str
    role: str
    reason: str


@dataclass(frozen=True, kw_only=True)
class AllRolesRevoked(DomainEvent):
    """Every assignment of a user removed.

    Attributes:
        user_id: User whose assignments were removed.
        count: Number of assignments removed.
    """

    user_id: str
    count: int


# ═══════════════════════════════════════════════════════════════
# Hierarchy mutations
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class RbacItemAdded(DomainEvent):
    """Role or permission created.

    Attributes:
        item_name: Name of the new item.
        item_type: "role" or "permission".
        rule: Rule gating the item, if any.
    """

    item_name: str
    item_type: str
    rule: str | None = None


@dataclass(frozen=True, kw_only=True)
class RbacItemRemoved(DomainEvent):
    """Item removed together with its edges and assignments.

    Attributes:
        item_name: Name of the removed item.
        edges_removed: Number of edges deleted by the cascade.
        assignments_removed: Number of assignments deleted by the cascade.
    """

    item_name: str
    edges_removed: int
    assignments_removed: int


@dataclass(frozen=True, kw_only=True)
class RbacItemChildAdded(DomainEvent):
    """Edge parent -> child created.

    Attributes:
        parent: Granting item.
        child: Granted item.
    """

    parent: str
    child: str


@dataclass(frozen=True, kw_only=True)
class RbacItemChildRemoved(DomainEvent):
    """Edge parent -> child removed.

    Attributes:
        parent: Granting item.
        child: Granted item.
    """

    parent: str
    child: str


# ═══════════════════════════════════════════════════════════════
# Rule lifecycle
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class RbacRuleAdded(DomainEvent):
    """Rule registered and its metadata persisted.

    Attributes:
        rule_name: Name of the rule.
    """

    rule_name: str


@dataclass(frozen=True, kw_only=True)
class RbacRuleRemoved(DomainEvent):
    """Rule unregistered and its metadata deleted.

    Attributes:
        rule_name: Name of the rule.
    """

    rule_name: str
