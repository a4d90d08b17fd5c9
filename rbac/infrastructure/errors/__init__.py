"""Infrastructure errors package.

Usage:
    from rbac.infrastructure.errors import BackendUnavailableError, CacheError
"""

from rbac.infrastructure.errors.infrastructure_error import (
    BackendUnavailableError,
    CacheError,
    InfrastructureError,
)

__all__ = [
    "BackendUnavailableError",
    "CacheError",
    "InfrastructureError",
]
