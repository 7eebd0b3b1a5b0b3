"""Order aggregate, the core of the orders domain.

An order is created once from catalog-priced lines and afterwards only its
status (and the bookkeeping that goes with it) changes. Transition rules live
in ``orders.order.lifecycle``; the methods here apply them and raise the
events that the relay turns into outbound messages.
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from orders.domain import orders
from orders.exceptions import InvalidOrder
from orders.order.events import OrderCreated, OrderStatusChanged
from orders.order.lifecycle import (
    OrderStatus,
    append_reason,
    cancellation_target,
    payment_failed_target,
    payment_succeeded_target,
)
from orders.shared.money import Money


def _clean(value: str | None) -> str | None:
    """Trim a free-text value; blank becomes ``None``."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


@orders.entity(part_of="Order")
class OrderLine:
    """A purchased product at the price the catalog quoted at creation time."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    unit_price: ValueObject(Money, required=True)
    line_total: ValueObject(Money, required=True)

    @invariant.post
    def line_total_must_match_unit_price_times_quantity(self):
        if self.unit_price is None or self.line_total is None or self.quantity is None:
            return
        if not self.line_total.equals(self.unit_price.multiply(self.quantity)):
            raise ValidationError({"line_total": ["Line total must equal unit price times quantity"]})

    @classmethod
    def build(cls, product_id, quantity, unit_price: Money) -> "OrderLine":
        return cls(
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            line_total=unit_price.multiply(quantity),
        )

    def to_dict_snapshot(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "quantity": self.quantity,
            "unit_price": self.unit_price.to_payload(),
            "line_total": self.line_total.to_payload(),
        }


@orders.aggregate
class Order:
    """A buyer's order and its position in the payment lifecycle."""

    user_id: Identifier(required=True)
    status: String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    total: ValueObject(Money, required=True)
    lines: HasMany(OrderLine)
    note: Text()
    client_reference: String(max_length=64)
    payment_id: String(max_length=255)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def total_must_equal_sum_of_line_totals(self):
        # Lines are loaded lazily from storage; only check when they are present
        if not self.lines or self.total is None:
            return
        if sum(line.line_total.amount for line in self.lines) != self.total.amount:
            raise ValidationError({"total": ["Order total must equal the sum of line totals"]})
        if any(line.line_total.currency != self.total.currency for line in self.lines):
            raise ValidationError({"total": ["All lines must share the order currency"]})

    @classmethod
    def create(
        cls,
        user_id,
        lines,
        note=None,
        client_reference=None,
        correlation_id=None,
        causation_id=None,
    ):
        if not lines:
            raise InvalidOrder({"items": ["Order requires at least one item"]})

        total = lines[0].line_total
        for line in lines[1:]:
            total = total.add(line.line_total)

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.CREATED.value,
            total=total,
            lines=lines,
            note=_clean(note),
            client_reference=_clean(client_reference),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=order.id,
                user_id=user_id,
                status=order.status,
                total_amount=total.amount,
                currency=total.currency,
                items=json.dumps([line.to_dict_snapshot() for line in lines]),
                note=order.note,
                client_reference=order.client_reference,
                correlation_id=correlation_id or str(uuid4()),
                causation_id=causation_id,
                occurred_at=now,
            )
        )
        return order

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def cancel(self, reason=None, correlation_id=None, causation_id=None) -> bool:
        """Cancel on the buyer's request. Returns ``False`` if already cancelled."""
        previous = self.current_status
        target = cancellation_target(previous)
        if target is None:
            return False

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                user_id=self.user_id,
                previous_status=previous.value,
                current_status=target.value,
                reason=_clean(reason),
                correlation_id=correlation_id or str(uuid4()),
                causation_id=causation_id,
                occurred_at=now,
            )
        )
        return True

    def mark_paid(self, payment_id) -> bool:
        """Confirm the order after a successful payment. No outbound event."""
        target = payment_succeeded_target(self.current_status)
        if target is None:
            return False

        self.status = target.value
        self.payment_id = payment_id
        self.updated_at = datetime.now(UTC)
        return True

    def mark_payment_failed(self, reason=None) -> bool:
        """Cancel the order after a failed or cancelled payment. No outbound event."""
        target = payment_failed_target(self.current_status)
        if target is None:
            return False

        self.status = target.value
        self.note = append_reason(self.note, reason)
        self.updated_at = datetime.now(UTC)
        return True
