"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_REASON naming convention and travel inside
DomainError instances returned through Result types.

Categories:
- Validation errors (VALIDATION_*)
- Reference errors (INVALID_REFERENCE, UNKNOWN_ITEM)
- Conflict errors (DUPLICATE_*)
- Hierarchy errors (CYCLE_DETECTED, EDGE_NOT_FOUND)
- Assignment errors (ASSIGNMENT_NOT_FOUND)
- Rule errors (RULE_*)
- Availability errors (BACKEND_UNAVAILABLE, CHECK_CANCELLED)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Validation errors
    VALIDATION_FAILED = "validation_failed"

    # Reference errors
    INVALID_REFERENCE = "invalid_reference"
    UNKNOWN_ITEM = "unknown_item"

    # Conflict errors
    DUPLICATE_ITEM = "duplicate_item"
    DUPLICATE_EDGE = "duplicate_edge"

    # Hierarchy errors
    CYCLE_DETECTED = "cycle_detected"
    EDGE_NOT_FOUND = "edge_not_found"

    # Assignment errors
    ASSIGNMENT_NOT_FOUND = "assignment_not_found"

    # Rule errors
    RULE_NOT_FOUND = "rule_not_found"
    RULE_EVALUATION_FAILED = "rule_evaluation_failed"
    RULE_IN_USE = "rule_in_use"

    # Availability errors
    BACKEND_UNAVAILABLE = "backend_unavailable"
    CHECK_CANCELLED = "check_cancelled"
