"""Infrastructure-specific error codes.

Internal codes for tracking infrastructure failures. They are mapped to a
domain ErrorCode when flowing to the engine.

Categories:
- Backend errors (BACKEND_*)
- Cache errors (CACHE_*)
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Persistence backend errors
    BACKEND_DISCONNECTED = "backend_disconnected"
    BACKEND_CONNECTION_FAILED = "backend_connection_failed"
    BACKEND_TIMEOUT = "backend_timeout"
    BACKEND_ERROR = "backend_error"

    # Cache errors
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
