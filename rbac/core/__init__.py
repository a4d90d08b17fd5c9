"""Core shared kernel.

Foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes for domain-level error handling
- Settings and the async reader/writer lock

The core module has NO dependencies on the application or infrastructure layers.
"""

from rbac.core.enums import ErrorCode
from rbac.core.errors import DomainError, ValidationError
from rbac.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
    "ValidationError",
]
