"""Infrastructure layer error types.

Infrastructure errors represent failures in external systems (persistence
backends, cache).

Architecture:
- Infrastructure catches exceptions and maps them to DomainError
- Infrastructure errors inherit from DomainError (not Exception)
- InfrastructureErrorCode is kept for internal tracking
"""

from dataclasses import dataclass

from rbac.core.errors import DomainError
from rbac.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        infrastructure_code: Original infrastructure error code.
    """

    infrastructure_code: InfrastructureErrorCode | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendUnavailableError(InfrastructureError):
    """Persistence backend could not serve the request.

    Always carries ErrorCode.BACKEND_UNAVAILABLE. Fatal to the operation
    that hit it: a check never turns it into a denial.

    Attributes:
        operation: Adapter operation that failed (e.g., "list_by_user").
    """

    operation: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Cache-specific errors.

    Wraps Redis exceptions. Callers treat these as cache misses.
    """

    pass
