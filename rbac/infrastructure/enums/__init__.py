"""Infrastructure enums package.

Usage:
    from rbac.infrastructure.enums import InfrastructureErrorCode
"""

from rbac.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
