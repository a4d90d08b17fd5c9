"""Core errors package.

Usage:
    from rbac.core.errors import DomainError, ValidationError
"""

from rbac.core.errors.common_errors import ValidationError
from rbac.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
]
