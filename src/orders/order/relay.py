"""Outbound relay: turns the Order's domain events into published envelopes.

Runs as an event handler, so an envelope is published only once the unit of
work that raised the event has committed, and exactly once per event.
"""

import json

import structlog
from protean.utils.mixins import handle

from orders.domain import orders
from orders.messaging import get_publisher
from orders.order.events import OrderCreated, OrderStatusChanged
from orders.order.order import Order
from shared.events.envelope import EventEnvelope, EventMetadata
from shared.events.orders import (
    ORDERS_ORDER_CREATED_EVENT,
    ORDERS_ORDER_STATUS_CHANGED_EVENT,
    MoneyPayload,
    OrderCreatedPayload,
    OrderLinePayload,
    OrderStatusChangedPayload,
)

logger = structlog.get_logger(__name__)


def _metadata(event) -> EventMetadata:
    return EventMetadata.build(
        correlation_id=event.correlation_id,
        causation_id=event.causation_id,
        occurred_at=event.occurred_at,
    )


def order_created_envelope(event: OrderCreated) -> EventEnvelope:
    items = json.loads(event.items) if isinstance(event.items, str) else event.items
    payload = OrderCreatedPayload(
        order_id=str(event.order_id),
        user_id=str(event.user_id),
        status=event.status,
        total=MoneyPayload(amount=event.total_amount, currency=event.currency),
        items=[
            OrderLinePayload(
                product_id=item["product_id"],
                quantity=item["quantity"],
                unit_price=MoneyPayload(**item["unit_price"]),
                line_total=MoneyPayload(**item["line_total"]),
            )
            for item in items
        ],
        note=event.note,
        client_reference=event.client_reference,
    )
    return EventEnvelope(
        name=ORDERS_ORDER_CREATED_EVENT,
        payload=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        metadata=_metadata(event),
    )


def order_status_changed_envelope(event: OrderStatusChanged) -> EventEnvelope:
    payload = OrderStatusChangedPayload(
        order_id=str(event.order_id),
        user_id=str(event.user_id),
        previous_status=event.previous_status,
        current_status=event.current_status,
        reason=event.reason,
    )
    return EventEnvelope(
        name=ORDERS_ORDER_STATUS_CHANGED_EVENT,
        payload=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        metadata=_metadata(event),
    )


@orders.event_handler(part_of=Order)
class OrderEventRelay:
    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        get_publisher().publish(order_created_envelope(event), key=str(event.order_id))
        logger.debug("Relayed OrderCreated", order_id=str(event.order_id))

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        get_publisher().publish(order_status_changed_envelope(event), key=str(event.order_id))
        logger.debug(
            "Relayed OrderStatusChanged",
            order_id=str(event.order_id),
            current_status=event.current_status,
        )
