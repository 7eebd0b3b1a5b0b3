"""Order repository: persistence port for the Order aggregate.

``add`` (inherited) saves the order together with its lines and the events it
raised, inside the current unit of work. The production database must carry a
unique index on ``(user_id, client_reference)`` where ``client_reference`` is
set; the lookups below rely on it to keep creation idempotent.
"""

from protean.exceptions import ObjectNotFoundError

from orders.domain import orders
from orders.order.order import Order


@orders.repository(part_of=Order)
class OrderRepository:
    def find_by_id(self, order_id) -> Order | None:
        if not order_id:
            return None
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            return None

    def find_by_id_for_user(self, order_id, user_id) -> Order | None:
        """Load an order only if it belongs to ``user_id``."""
        if not user_id:
            return None
        order = self.find_by_id(order_id)
        if order is None or not order.belongs_to(user_id):
            return None
        return order

    def find_by_user_and_client_reference(self, user_id, client_reference) -> Order | None:
        if not user_id or not client_reference:
            return None
        results = self._dao.query.filter(
            user_id=str(user_id),
            client_reference=client_reference,
        ).all().items
        return results[0] if results else None

    def list_by_user(self, user_id) -> list[Order]:
        """All of a user's orders, newest first."""
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").all().items
