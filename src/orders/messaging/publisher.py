"""Event publisher that writes envelopes to a message bus.

Each event name maps to a configurable topic; the order id is the message
key, so every event about one order lands in the same partition.
"""

import structlog

from orders.config import Settings
from orders.messaging.port import EventPublisher, MessageBus
from shared.events.envelope import EventEnvelope

logger = structlog.get_logger(__name__)


class BusEventPublisher(EventPublisher):
    def __init__(self, bus: MessageBus, settings: Settings) -> None:
        self.bus = bus
        self.settings = settings

    def publish(self, envelope: EventEnvelope, key: str) -> None:
        topic = self.settings.topic_for(envelope.name)
        self.bus.publish(topic, key, envelope.to_dict())
        logger.info(
            "Event published",
            event_name=envelope.name,
            topic=topic,
            key=key,
            correlation_id=envelope.metadata.correlation_id,
        )
