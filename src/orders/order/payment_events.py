"""Inbound handler for Payments service events.

The payments service announces outcomes as JSON envelopes on its own topics;
the message runtime hands each raw message to ``PaymentEventConsumer``, which
maps it onto ``MarkOrderAsPaid`` or ``MarkOrderPaymentFailed``.

A message that cannot be decoded or validated is logged and dropped so one
bad message never blocks the lane it arrived on. Anything else (storage or
broker trouble) propagates, so the runner crashes and the transport
redelivers.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pydantic import ValidationError as PayloadValidationError

from orders.order.payment import MarkOrderAsPaid, MarkOrderPaymentFailed
from orders.utils.logging import add_context, clear_context
from shared.events.envelope import EventEnvelope
from shared.events.payments import (
    PAYMENTS_PAYMENT_CANCELLED_EVENT,
    PAYMENTS_PAYMENT_FAILED_EVENT,
    PAYMENTS_PAYMENT_SUCCEEDED_EVENT,
    PaymentCancelledPayload,
    PaymentFailedPayload,
    PaymentSucceededPayload,
)

logger = structlog.get_logger(__name__)


def _succeeded(payload: dict):
    event = PaymentSucceededPayload.model_validate(payload)
    return MarkOrderAsPaid(order_id=event.order_id, payment_id=event.payment_id)


def _failed(payload: dict):
    event = PaymentFailedPayload.model_validate(payload)
    return MarkOrderPaymentFailed(order_id=event.order_id, reason=event.failure_reason)


def _cancelled(payload: dict):
    event = PaymentCancelledPayload.model_validate(payload)
    return MarkOrderPaymentFailed(order_id=event.order_id, reason=event.reason)


_COMMAND_BUILDERS = {
    PAYMENTS_PAYMENT_SUCCEEDED_EVENT: _succeeded,
    PAYMENTS_PAYMENT_FAILED_EVENT: _failed,
    PAYMENTS_PAYMENT_CANCELLED_EVENT: _cancelled,
}


def decode_envelope(message) -> EventEnvelope:
    if isinstance(message, bytes | bytearray):
        message = message.decode("utf-8")
    if isinstance(message, str):
        message = json.loads(message)
    return EventEnvelope.model_validate(message)


class PaymentEventConsumer:
    """Applies payments events to orders. Requires an active domain context."""

    def handle_message(self, message) -> bool:
        """Process one raw message. Returns ``True`` if a command was run."""
        if not message:
            return False

        try:
            envelope = decode_envelope(message)
            builder = _COMMAND_BUILDERS.get(envelope.name)
            if builder is None:
                logger.debug("Ignored event", event_name=envelope.name)
                return False
            command = builder(envelope.payload)
        except (ValueError, PayloadValidationError, ValidationError) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.error("Dropping malformed payments event", error=str(exc))
            return False

        add_context(correlation_id=envelope.metadata.correlation_id, event_name=envelope.name)
        try:
            logger.info("Payments event received", order_id=str(command.order_id))
            try:
                current_domain.process(command, asynchronous=False)
            except ValidationError as exc:
                logger.error(
                    "Dropping payments event rejected by the order",
                    order_id=str(command.order_id),
                    error=exc.messages,
                )
                return False
            return True
        finally:
            clear_context()

    def __call__(self, message) -> bool:
        return self.handle_message(message)
