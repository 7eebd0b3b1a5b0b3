"""Inbound event contracts for Payments service events.

The payments service publishes these inside an ``EventEnvelope``. The orders
service only relies on ``orderId`` and the kind-specific id or reason; the
remaining fields are optional so producers can evolve them freely.
"""

from pydantic import BaseModel, ConfigDict, Field

PAYMENTS_PAYMENT_SUCCEEDED_EVENT = "payments.payment.succeeded"
PAYMENTS_PAYMENT_FAILED_EVENT = "payments.payment.failed"
PAYMENTS_PAYMENT_CANCELLED_EVENT = "payments.payment.cancelled"


class PaymentAmount(BaseModel):
    amount: int
    currency: str


class _PaymentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: str = Field(alias="orderId", min_length=1)
    status: str | None = None
    provider: str | None = None
    amount: PaymentAmount | None = None
    client_reference: str | None = Field(default=None, alias="clientReference")


class PaymentSucceededPayload(_PaymentPayload):
    payment_id: str = Field(alias="paymentId", min_length=1)
    processor_reference: str | None = Field(default=None, alias="processorReference")


class PaymentFailedPayload(_PaymentPayload):
    payment_id: str | None = Field(default=None, alias="paymentId")
    failure_reason: str | None = Field(default=None, alias="failureReason")


class PaymentCancelledPayload(_PaymentPayload):
    payment_id: str | None = Field(default=None, alias="paymentId")
    reason: str | None = None
