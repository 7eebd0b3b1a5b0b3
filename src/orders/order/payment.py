"""Payment outcomes: commands and handler.

Sent by the payments event consumer, never by a buyer. Both commands are
safe to repeat: an unknown order or a status that no longer accepts the
outcome leaves everything untouched. Neither publishes an outbound event.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order

logger = structlog.get_logger(__name__)


@orders.command(part_of="Order")
class MarkOrderAsPaid:
    order_id: Identifier(required=True)
    payment_id: String(required=True, max_length=255)


@orders.command(part_of="Order")
class MarkOrderPaymentFailed:
    order_id: Identifier(required=True)
    reason: Text()


@orders.command_handler(part_of=Order)
class PaymentOutcomeHandler:
    @handle(MarkOrderAsPaid)
    def mark_order_as_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id(command.order_id)
        if order is None:
            logger.info("Payment succeeded for unknown order", order_id=str(command.order_id))
            return None

        if not order.mark_paid(command.payment_id):
            logger.info(
                "Payment success ignored",
                order_id=str(order.id),
                status=order.status,
            )
            return str(order.id)

        repo.add(order)
        logger.info("Order confirmed", order_id=str(order.id), payment_id=command.payment_id)
        return str(order.id)

    @handle(MarkOrderPaymentFailed)
    def mark_order_payment_failed(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id(command.order_id)
        if order is None:
            logger.info("Payment failure for unknown order", order_id=str(command.order_id))
            return None

        if not order.mark_payment_failed(command.reason):
            logger.info(
                "Payment failure ignored",
                order_id=str(order.id),
                status=order.status,
            )
            return str(order.id)

        repo.add(order)
        logger.info("Order cancelled after payment failure", order_id=str(order.id), reason=command.reason)
        return str(order.id)
