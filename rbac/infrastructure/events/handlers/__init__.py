"""Event handlers subscribed by the container."""

from rbac.infrastructure.events.handlers.logging_event_handler import (
    LoggingEventHandler,
    handler_method_name,
)

__all__ = ["LoggingEventHandler", "handler_method_name"]
