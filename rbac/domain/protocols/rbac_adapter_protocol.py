"""Persistence adapter protocol (port) for the authorization model.

The engine consumes storage only through this contract and never knows
which backend is in use. Four capability groups mirror the stored record
kinds: items, item children (edges), assignments and rule metadata.

Implementations:
    - InMemoryRbacAdapter: reference backend (tests, single process)
    - HTTP, document-store and relational backends: external packages

Error Handling:
    Every method returns a Result. Backend faults (network, driver,
    disconnected client) MUST surface as BackendUnavailableError and
    constraint violations as the matching RbacError kind
    (DUPLICATE_ITEM, DUPLICATE_EDGE, INVALID_REFERENCE,
    ASSIGNMENT_NOT_FOUND). The engine never interprets backend-native
    error formats.

Ordering:
    list_edges / list_edges_by_parent return edges in insertion order and
    list_by_user returns roles in assignment order. Check traversal order
    depends on it.

Isolation:
    ``supports_snapshot_isolation`` tells the engine whether reads observe
    a consistent snapshot while a mutation is in flight. When False, checks
    wait for in-flight mutations.
"""

from typing import Protocol

from rbac.core.errors import DomainError
from rbac.core.result import Result
from rbac.domain.entities import RbacAssignment, RbacItem, RbacItemChild, RbacRule
from rbac.domain.enums import ItemType


class RbacItemAdapterProtocol(Protocol):
    """Item storage capabilities."""

    async def list_items(self) -> Result[list[RbacItem], DomainError]:
        """Return every item."""
        ...

    async def list_items_by_type(
        self, item_type: ItemType
    ) -> Result[list[RbacItem], DomainError]:
        """Return every item of one type."""
        ...

    async def get_item(self, name: str) -> Result[RbacItem | None, DomainError]:
        """Return the item or None when absent."""
        ...

    async def put_item(self, item: RbacItem) -> Result[RbacItem, DomainError]:
        """Create an item.

        Returns:
            Failure(ItemError DUPLICATE_ITEM) if the name is taken.
        """
        ...

    async def delete_item(self, name: str) -> Result[bool, DomainError]:
        """Delete an item. Success(False) when it did not exist."""
        ...


class RbacItemChildAdapterProtocol(Protocol):
    """Edge storage capabilities."""

    async def list_edges(self) -> Result[list[RbacItemChild], DomainError]:
        """Return every edge in insertion order."""
        ...

    async def list_edges_by_parent(self, parent: str) -> Result[list[str], DomainError]:
        """Return the children of ``parent`` in insertion order."""
        ...

    async def put_edge(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        """Create an edge.

        Returns:
            Failure(HierarchyError DUPLICATE_EDGE) if present,
            Failure(HierarchyError INVALID_REFERENCE) if an endpoint is unknown.
        """
        ...

    async def delete_edge(self, parent: str, child: str) -> Result[bool, DomainError]:
        """Delete an edge. Success(False) when it did not exist."""
        ...

    async def delete_edges_for_item(
        self, name: str
    ) -> Result[list[RbacItemChild], DomainError]:
        """Delete every edge where ``name`` is parent or child.

        Returns:
            Success with the deleted edges in insertion order.
        """
        ...


class RbacAssignmentAdapterProtocol(Protocol):
    """Assignment storage capabilities."""

    async def list_assignments(self) -> Result[list[RbacAssignment], DomainError]:
        """Return every assignment in insertion order."""
        ...

    async def list_by_user(self, user_id: str) -> Result[list[str], DomainError]:
        """Return the roles assigned to ``user_id`` in assignment order."""
        ...

    async def get_assignment(
        self, user_id: str, role: str
    ) -> Result[RbacAssignment | None, DomainError]:
        """Return the assignment or None when absent."""
        ...

    async def put_assignment(
        self, user_id: str, role: str
    ) -> Result[RbacAssignment, DomainError]:
        """Create an assignment (idempotent).

        Returns:
            Failure(AssignmentError INVALID_REFERENCE) if the role is unknown.
        """
        ...

    async def delete_assignment(self, user_id: str, role: str) -> Result[None, DomainError]:
        """Delete an assignment.

        Returns:
            Failure(AssignmentError ASSIGNMENT_NOT_FOUND) if absent.
        """
        ...

    async def delete_all_for_user(self, user_id: str) -> Result[int, DomainError]:
        """Delete every assignment of a user; returns how many were deleted."""
        ...

    async def delete_assignments_for_role(
        self, role: str
    ) -> Result[list[RbacAssignment], DomainError]:
        """Delete every assignment of ``role``; returns the deleted ones."""
        ...


class RbacRuleAdapterProtocol(Protocol):
    """Rule metadata storage capabilities."""

    async def list_rule_names(self) -> Result[list[str], DomainError]:
        """Return every persisted rule name."""
        ...

    async def put_rule(self, rule: RbacRule) -> Result[RbacRule, DomainError]:
        """Persist rule metadata (idempotent)."""
        ...

    async def delete_rule(self, name: str) -> Result[bool, DomainError]:
        """Delete rule metadata. Success(False) when it did not exist."""
        ...


class RbacAdapterProtocol(
    RbacItemAdapterProtocol,
    RbacItemChildAdapterProtocol,
    RbacAssignmentAdapterProtocol,
    RbacRuleAdapterProtocol,
    Protocol,
):
    """Full persistence contract consumed by the engine.

    Attributes:
        supports_snapshot_isolation: True when reads see a consistent
            snapshot during concurrent mutations.
    """

    supports_snapshot_isolation: bool
