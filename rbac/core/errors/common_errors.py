"""Common error classes shared by every layer.

Error Types:
- ValidationError: Input validation failures (empty names, bad types)

Usage:
    from rbac.core.errors import ValidationError
    from rbac.core.enums import ErrorCode
    from rbac.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.VALIDATION_FAILED,
        message="Item name must be a non-empty string",
        field="name",
    ))
"""

from dataclasses import dataclass

from rbac.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None

