"""Event bus dependency factory.

Application-scoped singleton for domain event publishing. Every event in
RBAC_EVENTS is wired to its LoggingEventHandler method at startup.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rbac.domain.protocols.event_bus_protocol import EventBusProtocol


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Returns:
        Event bus implementing EventBusProtocol.

    Raises:
        RuntimeError: If an event has no matching logging handler method.
    """
    from rbac.core.container.infrastructure import get_logger
    from rbac.domain.events import RBAC_EVENTS
    from rbac.infrastructure.events.handlers.logging_event_handler import (
        LoggingEventHandler,
        handler_method_name,
    )
    from rbac.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    logger = get_logger()
    event_bus = InMemoryEventBus(logger=logger)
    logging_handler = LoggingEventHandler(logger=logger)

    for event_class in RBAC_EVENTS:
        method_name = handler_method_name(event_class)
        handler_method = getattr(logging_handler, method_name, None)
        if handler_method is None:
            raise RuntimeError(
                f"Missing logging handler for {event_class.__name__}: "
                f"expected LoggingEventHandler.{method_name}"
            )
        event_bus.subscribe(event_class, handler_method)

    return event_bus
