"""Service settings read from the environment.

Protean infrastructure (databases, event store) is configured in
``domain.toml``; this module holds the settings the orders code itself reads:
topic names, the catalog collaborator and the message transport.
"""

import os
from dataclasses import dataclass

from shared.events.orders import ORDERS_ORDER_CREATED_EVENT, ORDERS_ORDER_STATUS_CHANGED_EVENT
from shared.events.payments import (
    PAYMENTS_PAYMENT_CANCELLED_EVENT,
    PAYMENTS_PAYMENT_FAILED_EVENT,
    PAYMENTS_PAYMENT_SUCCEEDED_EVENT,
)


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def parse_partitions(value: str | None) -> tuple[int, ...] | None:
    """Parse a comma-separated partition list such as ``"0,2"``; blank means all."""
    if not value or not value.strip():
        return None
    try:
        return tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid partition list: {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    orders_created_topic: str = ORDERS_ORDER_CREATED_EVENT
    orders_status_changed_topic: str = ORDERS_ORDER_STATUS_CHANGED_EVENT
    payments_succeeded_topic: str = PAYMENTS_PAYMENT_SUCCEEDED_EVENT
    payments_failed_topic: str = PAYMENTS_PAYMENT_FAILED_EVENT
    payments_cancelled_topic: str = PAYMENTS_PAYMENT_CANCELLED_EVENT

    catalog_service_url: str | None = None
    catalog_timeout_seconds: float = 5.0

    event_transport: str = "memory"  # memory | redis
    redis_url: str = "redis://localhost:6379/0"
    partitions: int = 1
    owned_partitions: tuple[int, ...] | None = None  # None: every partition
    payments_consumer_group: str = "orders-payments-consumer"
    disable_payments_consumer: bool = False

    @property
    def payment_topics(self) -> list[str]:
        return [self.payments_succeeded_topic, self.payments_failed_topic, self.payments_cancelled_topic]

    def topic_for(self, event_name: str) -> str:
        """Topic an outbound event is published to; unknown names publish under their own name."""
        return {
            ORDERS_ORDER_CREATED_EVENT: self.orders_created_topic,
            ORDERS_ORDER_STATUS_CHANGED_EVENT: self.orders_status_changed_topic,
        }.get(event_name, event_name)


def load_settings() -> Settings:
    env = os.environ
    partitions = int(env.get("ORDERS_PARTITIONS", "1"))
    if partitions < 1:
        raise ValueError("ORDERS_PARTITIONS must be a positive integer")

    return Settings(
        orders_created_topic=env.get("ORDERS_CREATED_TOPIC", ORDERS_ORDER_CREATED_EVENT),
        orders_status_changed_topic=env.get("ORDERS_STATUS_CHANGED_TOPIC", ORDERS_ORDER_STATUS_CHANGED_EVENT),
        payments_succeeded_topic=env.get("PAYMENTS_SUCCEEDED_TOPIC", PAYMENTS_PAYMENT_SUCCEEDED_EVENT),
        payments_failed_topic=env.get("PAYMENTS_FAILED_TOPIC", PAYMENTS_PAYMENT_FAILED_EVENT),
        payments_cancelled_topic=env.get("PAYMENTS_CANCELLED_TOPIC", PAYMENTS_PAYMENT_CANCELLED_EVENT),
        catalog_service_url=env.get("CATALOG_SERVICE_URL") or None,
        catalog_timeout_seconds=float(env.get("CATALOG_TIMEOUT_SECONDS", "5")),
        event_transport=env.get("ORDERS_EVENT_TRANSPORT", "memory").strip().lower(),
        redis_url=env.get("REDIS_URL", "redis://localhost:6379/0"),
        partitions=partitions,
        owned_partitions=parse_partitions(env.get("ORDERS_OWNED_PARTITIONS")),
        payments_consumer_group=env.get("PAYMENTS_CONSUMER_GROUP", "orders-payments-consumer"),
        disable_payments_consumer=_flag(env.get("DISABLE_PAYMENTS_CONSUMER")),
    )
