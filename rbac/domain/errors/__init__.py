"""Domain errors package.

Usage:
    from rbac.domain.errors import RbacError, HierarchyError
"""

from rbac.domain.errors.rbac_error import (
    AssignmentError,
    CheckCancelledError,
    HierarchyError,
    ItemError,
    RbacError,
    RuleError,
)

__all__ = [
    "AssignmentError",
    "CheckCancelledError",
    "HierarchyError",
    "ItemError",
    "RbacError",
    "RuleError",
]
