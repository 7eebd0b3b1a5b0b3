"""Order cancellation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.exceptions import OrderNotFound
from orders.order.order import Order

logger = structlog.get_logger(__name__)


@orders.command(part_of="Order")
class CancelOrder:
    order_id: Identifier()
    user_id: String(max_length=255)
    reason: String(max_length=255)
    correlation_id: String(max_length=255)
    causation_id: String(max_length=255)


@orders.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id_for_user(command.order_id, command.user_id)
        if order is None:
            raise OrderNotFound({"order_id": [f"Order {command.order_id} not found"]})

        if not order.cancel(
            reason=command.reason,
            correlation_id=command.correlation_id,
            causation_id=command.causation_id,
        ):
            logger.info("Order already cancelled", order_id=str(order.id))
            return str(order.id)

        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), user_id=str(order.user_id))
        return str(order.id)
