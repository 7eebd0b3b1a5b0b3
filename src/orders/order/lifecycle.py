"""Order status machine.

    Created --cancel--------------> Cancelled
    Created --payment succeeded---> Confirmed
    Created --payment failed------> Cancelled
    Confirmed --payment failed----> Cancelled

Cancelled and Fulfilled are terminal. The functions below decide the target
status for each trigger without touching an aggregate: ``None`` means the
trigger is a no-op for the current status, an exception means it is forbidden.
"""

from enum import Enum

from orders.exceptions import InvalidTransition


class OrderStatus(Enum):
    CREATED = "Created"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    FULFILLED = "Fulfilled"


TERMINAL_STATES = {OrderStatus.CANCELLED, OrderStatus.FULFILLED}

# Statuses a payment success may confirm
_PAYABLE_STATES = {OrderStatus.CREATED, OrderStatus.CONFIRMED}


def cancellation_target(current: OrderStatus) -> OrderStatus | None:
    if current == OrderStatus.CANCELLED:
        return None
    if current != OrderStatus.CREATED:
        raise InvalidTransition(
            {"status": [f"Only Created orders may be cancelled (current status: {current.value})"]},
        )
    return OrderStatus.CANCELLED


def payment_succeeded_target(current: OrderStatus) -> OrderStatus | None:
    if current in _PAYABLE_STATES:
        return OrderStatus.CONFIRMED
    return None


def payment_failed_target(current: OrderStatus) -> OrderStatus | None:
    if current in TERMINAL_STATES:
        return None
    return OrderStatus.CANCELLED


def append_reason(note: str | None, reason: str | None) -> str | None:
    """Append a trimmed reason to an order note, separated by `` | ``."""
    trimmed = reason.strip() if reason else ""
    if not trimmed:
        return note
    if not note:
        return trimmed
    return f"{note} | {trimmed}"
