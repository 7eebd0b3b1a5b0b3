"""In-memory messaging adapters for development and testing.

Nothing leaves the process: published envelopes are kept in lists that tests
can inspect, and subscribers are called synchronously in publish order.
"""

from collections import defaultdict

import structlog

from orders.messaging.port import EventPublisher, MessageBus, MessageHandler
from shared.events.envelope import EventEnvelope

logger = structlog.get_logger(__name__)


class InMemoryEventPublisher(EventPublisher):
    """Records published envelopes."""

    def __init__(self) -> None:
        self.published: list[tuple[str, EventEnvelope]] = []

    def publish(self, envelope: EventEnvelope, key: str) -> None:
        logger.debug("Event published", event_name=envelope.name, key=key)
        self.published.append((key, envelope))

    def envelopes(self, name: str | None = None) -> list[EventEnvelope]:
        return [envelope for _, envelope in self.published if name is None or envelope.name == name]

    def clear(self) -> None:
        self.published.clear()


class InMemoryMessageBus(MessageBus):
    """Delivers each message to the topic's subscribers before ``publish`` returns."""

    def __init__(self) -> None:
        self.messages: dict[str, list[tuple[str, dict]]] = defaultdict(list)
        self._handlers: dict[str, list[MessageHandler]] = defaultdict(list)

    def publish(self, topic: str, key: str, message: dict) -> None:
        self.messages[topic].append((key, message))
        for handler in self._handlers[topic]:
            handler(message)

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        self._handlers[topic].append(handler)
