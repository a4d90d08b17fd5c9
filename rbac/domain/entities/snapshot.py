"""Snapshot and removal-impact value objects.

RbacSnapshot is the bulk form of the whole authorization state, used to
seed a backend or copy state between backends. RemovalImpact reports what
a cascading item removal deletes (or would delete, for a dry run).
"""

from dataclasses import dataclass, field

from rbac.domain.entities.assignment import RbacAssignment
from rbac.domain.entities.item import RbacItem
from rbac.domain.entities.item_child import RbacItemChild
from rbac.domain.entities.rule import RbacRule


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacSnapshot:
    """Full authorization state.

    Attributes:
        items: Every role and permission.
        item_children: Every hierarchy edge, in insertion order.
        assignments: Every user assignment, in insertion order.
        rules: Persisted rule metadata.
    """

    items: tuple[RbacItem, ...] = field(default_factory=tuple)
    item_children: tuple[RbacItemChild, ...] = field(default_factory=tuple)
    assignments: tuple[RbacAssignment, ...] = field(default_factory=tuple)
    rules: tuple[RbacRule, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True, kw_only=True)
class RemovalImpact:
    """Outcome of removing an item.

    Attributes:
        item: The removed (or to-be-removed) item.
        edges_removed: Edges where the item was parent or child.
        assignments_removed: Assignments of the item.
        dry_run: True when nothing was actually deleted.
    """

    item: RbacItem
    edges_removed: tuple[RbacItemChild, ...]
    assignments_removed: tuple[RbacAssignment, ...]
    dry_run: bool = False

    @property
    def affected_count(self) -> int:
        """Total number of records deleted along with the item."""
        return len(self.edges_removed) + len(self.assignments_removed)
