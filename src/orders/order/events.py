"""Domain events raised by the Order aggregate.

Each event carries the correlation metadata of the request that caused it so
the relay can wrap it in an outbound envelope without reaching back into the
request context.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from orders.domain import orders


@orders.event(part_of="Order")
class OrderCreated:
    """A buyer placed a new order with priced line items."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    status: String(required=True)
    total_amount: Integer(required=True)
    currency: String(required=True, max_length=3)
    items: Text(required=True)  # JSON: list of priced line dicts
    note: Text()
    client_reference: String(max_length=64)
    correlation_id: String(required=True, max_length=255)
    causation_id: String(max_length=255)
    occurred_at: DateTime(required=True)


@orders.event(part_of="Order")
class OrderStatusChanged:
    """The order moved from one status to another on a buyer's request."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    previous_status: String(required=True)
    current_status: String(required=True)
    reason: Text()
    correlation_id: String(required=True, max_length=255)
    causation_id: String(max_length=255)
    occurred_at: DateTime(required=True)
