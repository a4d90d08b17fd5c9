"""Core enums package.

Usage:
    from rbac.core.enums import ErrorCode, Environment
"""

from rbac.core.enums.environment import Environment
from rbac.core.enums.error_code import ErrorCode

__all__ = ["Environment", "ErrorCode"]
