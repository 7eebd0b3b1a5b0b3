"""Event publisher factory.

Provides get_publisher() / set_publisher() to swap implementations, chosen
by ORDERS_EVENT_TRANSPORT:
- InMemoryEventPublisher for "memory" (development and testing)
- BusEventPublisher over RedisStreamBus for "redis"
"""

from orders.config import load_settings
from orders.messaging.memory_adapter import InMemoryEventPublisher, InMemoryMessageBus
from orders.messaging.port import EventPublisher, MessageBus
from orders.messaging.publisher import BusEventPublisher
from orders.messaging.redis_adapter import RedisStreamBus

__all__ = [
    "BusEventPublisher",
    "EventPublisher",
    "InMemoryEventPublisher",
    "InMemoryMessageBus",
    "MessageBus",
    "RedisStreamBus",
    "get_publisher",
    "reset_publisher",
    "set_publisher",
]

_current_publisher: EventPublisher | None = None


def get_publisher() -> EventPublisher:
    """Return the current event publisher, building the configured default."""
    global _current_publisher
    if _current_publisher is None:
        settings = load_settings()
        if settings.event_transport == "redis":
            bus = RedisStreamBus.from_url(settings.redis_url, partitions=settings.partitions)
            _current_publisher = BusEventPublisher(bus, settings)
        elif settings.event_transport == "memory":
            _current_publisher = InMemoryEventPublisher()
        else:
            raise ValueError(f"Unknown ORDERS_EVENT_TRANSPORT: {settings.event_transport}")
    return _current_publisher


def set_publisher(publisher: EventPublisher) -> None:
    """Override the active event publisher (useful for tests)."""
    global _current_publisher
    _current_publisher = publisher


def reset_publisher() -> None:
    """Reset to the configured default publisher."""
    global _current_publisher
    _current_publisher = None
