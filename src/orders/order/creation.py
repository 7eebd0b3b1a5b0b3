"""Order creation: command and handler.

Creation is idempotent per ``(user_id, client_reference)``: a retried request
returns the order created the first time, without re-pricing it or publishing
``OrderCreated`` again. Prices are never taken on trust; every line must quote
exactly the price the catalog holds for its product.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from orders.catalog import ProductCatalog, get_catalog
from orders.domain import orders
from orders.exceptions import InvalidOrder
from orders.order.order import Order, OrderLine
from orders.shared.money import Money

logger = structlog.get_logger(__name__)


@orders.command(part_of="Order")
class CreateOrder:
    user_id: String(max_length=255)
    items: Text()  # JSON: list of {product_id, quantity, unit_price: {amount, currency}}
    note: String(max_length=255)
    client_reference: String(max_length=64)
    correlation_id: String(max_length=255)
    causation_id: String(max_length=255)


def parse_items(raw) -> list[tuple[str, int, Money]]:
    """Decode requested items into ``(product_id, quantity, unit_price)`` tuples.

    Both snake_case and camelCase keys are accepted.
    """
    if raw is None or raw == "":
        raise InvalidOrder({"items": ["Order requires at least one item"]})
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as exc:
        raise InvalidOrder({"items": ["Items must be a JSON list"]}) from exc
    if not isinstance(items, list) or not items:
        raise InvalidOrder({"items": ["Order requires at least one item"]})

    requested = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidOrder({"items": [f"Item {position} must be an object"]})

        product_id = item.get("product_id", item.get("productId"))
        quantity = item.get("quantity")
        price = item.get("unit_price", item.get("unitPrice"))

        if not product_id or not str(product_id).strip():
            raise InvalidOrder({"items": [f"Item {position} is missing a product id"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidOrder({"items": [f"Item {position} quantity must be a positive integer"]})
        if not isinstance(price, dict):
            raise InvalidOrder({"items": [f"Item {position} is missing a unit price"]})
        try:
            unit_price = Money.of(price.get("amount"), price.get("currency"))
        except ValidationError as exc:
            raise InvalidOrder({"items": [f"Item {position} has an invalid unit price"]}) from exc

        requested.append((str(product_id).strip(), quantity, unit_price))
    return requested


def price_lines(requested: list[tuple[str, int, Money]], catalog: ProductCatalog) -> list[OrderLine]:
    """Check each requested line against the catalog and build priced order lines.

    The first line fixes the order currency. Nothing is written here, so a
    catalog failure half-way through leaves no trace.
    """
    lines = []
    currency = None
    for product_id, quantity, unit_price in requested:
        product = catalog.find_by_id(product_id)
        if product is None:
            raise InvalidOrder({"items": [f"Unknown product: {product_id}"]})
        if not product.price.equals(unit_price):
            raise InvalidOrder({"items": [f"Price mismatch for product {product_id}"]})
        if currency is None:
            currency = unit_price.currency
        elif unit_price.currency != currency:
            raise InvalidOrder({"items": [f"Order currency mismatch: expected {currency}, got {unit_price.currency}"]})

        lines.append(OrderLine.build(product.id, quantity, unit_price))
    return lines


@orders.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        user_id = (command.user_id or "").strip()
        if not user_id:
            raise InvalidOrder({"user_id": ["User id is required"]})

        repo = current_domain.repository_for(Order)

        client_reference = (command.client_reference or "").strip() or None
        if client_reference:
            existing = repo.find_by_user_and_client_reference(user_id, client_reference)
            if existing is not None:
                logger.info(
                    "Order already exists for client reference",
                    order_id=str(existing.id),
                    user_id=user_id,
                    client_reference=client_reference,
                )
                return str(existing.id)

        lines = price_lines(parse_items(command.items), get_catalog())

        order = Order.create(
            user_id=user_id,
            lines=lines,
            note=command.note,
            client_reference=client_reference,
            correlation_id=command.correlation_id,
            causation_id=command.causation_id,
        )
        repo.add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            user_id=user_id,
            total=order.total.amount,
            currency=order.total.currency,
            lines=len(lines),
        )
        return str(order.id)
