"""Domain entities for the authorization hierarchy.

Pure data with no framework dependencies.
"""

from rbac.domain.entities.assignment import RbacAssignment
from rbac.domain.entities.item import RbacItem
from rbac.domain.entities.item_child import RbacItemChild
from rbac.domain.entities.rule import RbacRule
from rbac.domain.entities.snapshot import RbacSnapshot, RemovalImpact

__all__ = [
    "RbacAssignment",
    "RbacItem",
    "RbacItemChild",
    "RbacRule",
    "RbacSnapshot",
    "RemovalImpact",
]
