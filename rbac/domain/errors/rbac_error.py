"""Authorization error types.

Every failure the engine reports is one of these, returned inside
``Failure``. The ErrorCode carries the precise kind; the class groups kinds
by the part of the model they concern.

Kinds:
    ItemError: UNKNOWN_ITEM, DUPLICATE_ITEM, INVALID_REFERENCE
    HierarchyError: INVALID_REFERENCE, CYCLE_DETECTED, DUPLICATE_EDGE,
        EDGE_NOT_FOUND
    AssignmentError: INVALID_REFERENCE, ASSIGNMENT_NOT_FOUND
    RuleError: RULE_NOT_FOUND, RULE_EVALUATION_FAILED, RULE_IN_USE,
        INVALID_REFERENCE
    CheckCancelledError: CHECK_CANCELLED

Denial is NOT an error. ``check_permission`` returns ``Success(value=False)``
for a denied user; an RbacError means the check could not be decided.

Usage:
    from rbac.domain.errors import HierarchyError
    from rbac.core.enums import ErrorCode
    from rbac.core.result import Failure

    return Failure(error=HierarchyError(
        code=ErrorCode.CYCLE_DETECTED,
        message="Adding 'user' -> 'admin' would create a cycle",
        parent="user",
        child="admin",
    ))
"""

from dataclasses import dataclass

from rbac.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacError(DomainError):
    """Base class for authorization errors."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemError(RbacError):
    """Item lookup or uniqueness failure.

    Attributes:
        item_name: Name of the item involved.
    """

    item_name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class HierarchyError(RbacError):
    """Hierarchy (edge) invariant violation.

    Attributes:
        parent: Parent endpoint of the edge.
        child: Child endpoint of the edge.
    """

    parent: str
    child: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AssignmentError(RbacError):
    """Assignment lookup or reference failure.

    Attributes:
        user_id: User of the assignment.
        role: Item of the assignment.
    """

    user_id: str
    role: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RuleError(RbacError):
    """Rule lookup, execution or lifecycle failure.

    A rule fault during a check is NOT equivalent to denial: callers must
    treat it as "undecidable".

    Attributes:
        rule_name: Name of the rule involved.
        item_name: Item whose rule was being evaluated, if any.
    """

    rule_name: str
    item_name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CheckCancelledError(RbacError):
    """Permission check aborted by its deadline.

    Attributes:
        user_id: User being checked.
        item_name: Item being checked.
    """

    user_id: str
    item_name: str
