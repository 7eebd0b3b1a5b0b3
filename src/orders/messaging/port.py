"""Messaging ports (abstract interfaces).

``EventPublisher`` is what the orders code calls to announce an order event;
``MessageBus`` is the transport underneath it, also used by the consumer runner
to receive payments events. Adapters:
- InMemoryEventPublisher / InMemoryMessageBus for development and testing
- BusEventPublisher over RedisStreamBus for deployments
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from shared.events.envelope import EventEnvelope

MessageHandler = Callable[[Any], Any]


class EventPublisher(ABC):
    """Abstract outbound event publisher."""

    @abstractmethod
    def publish(self, envelope: EventEnvelope, key: str) -> None:
        """Publish an envelope. ``key`` is the order id, used for partitioning."""
        ...


class MessageBus(ABC):
    """Abstract keyed publish/subscribe transport."""

    @abstractmethod
    def publish(self, topic: str, key: str, message: dict) -> None:
        """Append ``message`` to ``topic``.

        Messages sharing a key must be delivered in the order they were
        published.
        """
        ...

    @abstractmethod
    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        """Deliver every message published to ``topic`` to ``handler``."""
        ...
