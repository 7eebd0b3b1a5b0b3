"""Transition rules, exercised without any aggregate or storage."""

import pytest
from orders.exceptions import InvalidTransition
from orders.order.lifecycle import (
    TERMINAL_STATES,
    OrderStatus,
    append_reason,
    cancellation_target,
    payment_failed_target,
    payment_succeeded_target,
)


def test_terminal_states():
    assert TERMINAL_STATES == {OrderStatus.CANCELLED, OrderStatus.FULFILLED}


class TestCancellation:
    def test_created_order_can_be_cancelled(self):
        assert cancellation_target(OrderStatus.CREATED) == OrderStatus.CANCELLED

    def test_cancelling_a_cancelled_order_is_a_no_op(self):
        assert cancellation_target(OrderStatus.CANCELLED) is None

    @pytest.mark.parametrize("status", [OrderStatus.CONFIRMED, OrderStatus.FULFILLED])
    def test_other_states_reject_cancellation(self, status):
        with pytest.raises(InvalidTransition) as exc_info:
            cancellation_target(status)
        assert "Only Created orders may be cancelled" in exc_info.value.messages["status"][0]


class TestPaymentSucceeded:
    @pytest.mark.parametrize("status", [OrderStatus.CREATED, OrderStatus.CONFIRMED])
    def test_confirms_payable_orders(self, status):
        assert payment_succeeded_target(status) == OrderStatus.CONFIRMED

    @pytest.mark.parametrize("status", [OrderStatus.FULFILLED, OrderStatus.CANCELLED])
    def test_is_absorbed_by_terminal_states(self, status):
        assert payment_succeeded_target(status) is None


class TestPaymentFailed:
    @pytest.mark.parametrize("status", [OrderStatus.CREATED, OrderStatus.CONFIRMED])
    def test_cancels_open_orders(self, status):
        assert payment_failed_target(status) == OrderStatus.CANCELLED

    @pytest.mark.parametrize("status", [OrderStatus.FULFILLED, OrderStatus.CANCELLED])
    def test_is_absorbed_by_terminal_states(self, status):
        assert payment_failed_target(status) is None


class TestAppendReason:
    def test_reason_becomes_note_when_there_is_none(self):
        assert append_reason(None, "Card declined") == "Card declined"

    def test_reason_is_appended_after_existing_note(self):
        assert append_reason("Leave at the door", "Card declined") == "Leave at the door | Card declined"

    def test_reason_is_trimmed(self):
        assert append_reason("Note", "  Card declined  ") == "Note | Card declined"

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_blank_reason_keeps_note(self, reason):
        assert append_reason("Note", reason) == "Note"
