"""Application tests for CancelOrder."""

import pytest
from orders.exceptions import InvalidTransition, OrderNotFound
from orders.order.cancellation import CancelOrder
from orders.order.order import Order
from orders.order.payment import MarkOrderAsPaid
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _cancel(order_id, user_id, **kwargs):
    return current_domain.process(CancelOrder(order_id=order_id, user_id=user_id, **kwargs), asynchronous=False)


class TestCancelOrder:
    def test_created_order_is_cancelled(self, place_order, user_id):
        order_id = place_order()

        _cancel(order_id, user_id, reason="Changed my mind")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "Cancelled"

    def test_emits_one_status_changed_event(self, place_order, publisher, user_id):
        order_id = place_order()
        publisher.clear()

        _cancel(order_id, user_id, reason="  Changed my mind  ", correlation_id="corr-9")

        envelopes = publisher.envelopes()
        assert len(envelopes) == 1
        envelope = envelopes[0]
        assert envelope.name == "orders.order.statusChanged"
        assert envelope.payload == {
            "orderId": order_id,
            "userId": user_id,
            "previousStatus": "Created",
            "currentStatus": "Cancelled",
            "reason": "Changed my mind",
        }
        assert envelope.metadata.correlation_id == "corr-9"

    def test_reason_is_optional(self, place_order, publisher, user_id):
        order_id = place_order()
        publisher.clear()

        _cancel(order_id, user_id)

        assert "reason" not in publisher.envelopes()[0].payload

    def test_cancelling_twice_is_a_no_op(self, place_order, publisher, user_id):
        order_id = place_order()
        _cancel(order_id, user_id)
        publisher.clear()

        result = _cancel(order_id, user_id)

        assert result == order_id
        assert current_domain.repository_for(Order).get(order_id).status == "Cancelled"
        assert publisher.published == []

    def test_confirmed_order_cannot_be_cancelled(self, place_order, publisher, user_id):
        order_id = place_order()
        current_domain.process(MarkOrderAsPaid(order_id=order_id, payment_id="pay-1"), asynchronous=False)
        publisher.clear()

        with pytest.raises(InvalidTransition):
            _cancel(order_id, user_id)

        assert current_domain.repository_for(Order).get(order_id).status == "Confirmed"
        assert publisher.published == []


class TestCancelOrderLookup:
    def test_unknown_order(self, user_id):
        with pytest.raises(OrderNotFound):
            _cancel("00000000-0000-4000-8000-000000000000", user_id)

    def test_order_of_another_user_is_not_found(self, place_order):
        order_id = place_order()

        with pytest.raises(OrderNotFound):
            _cancel(order_id, "user-002")

        assert current_domain.repository_for(Order).get(order_id).status == "Created"

    def test_order_not_found_is_an_object_not_found_error(self):
        assert issubclass(OrderNotFound, ObjectNotFoundError)
