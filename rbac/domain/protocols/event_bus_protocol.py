"""Event bus protocol (port) for domain events.

The domain defines this port; infrastructure provides adapters
(InMemoryEventBus). The RbacManager publishes mutation events through it.

Usage:
    >>> event_bus = get_event_bus()
    >>> event_bus.subscribe(RbacItemAdded, handler.handle_item_added)
    >>> await event_bus.publish(RbacItemAdded(item_name="admin", item_type="role"))
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from rbac.domain.events.base_event import DomainEvent

# Async handler: single event argument, side effects only.
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        1. **Fail-open behavior**: One handler failure must NOT prevent other
           handlers from executing, and must never fail the publisher.
        2. **Async support**: All handlers are async.
        3. **Type-based routing**: Handlers receive only their event type.
    """

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register event handler for specific event type.

        Args:
            event_type: Class of event to handle (exact type match).
            handler: Async function called with the event.
        """
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Publish event to all registered handlers.

        Args:
            event: Domain event to publish.

        Notes:
            MUST NOT raise when a handler fails.
        """
        ...
