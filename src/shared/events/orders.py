"""Outbound event contracts published by the orders service.

Other services (payments, read models) consume these as plain JSON inside an
``EventEnvelope``; the models here fix the payload shape and the camelCase
field names on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field

ORDERS_ORDER_CREATED_EVENT = "orders.order.created"
ORDERS_ORDER_STATUS_CHANGED_EVENT = "orders.order.statusChanged"


class MoneyPayload(BaseModel):
    amount: int
    currency: str


class OrderLinePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int
    unit_price: MoneyPayload = Field(alias="unitPrice")
    line_total: MoneyPayload = Field(alias="lineTotal")


class OrderCreatedPayload(BaseModel):
    """Full order snapshot at creation time."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    user_id: str = Field(alias="userId")
    status: str
    total: MoneyPayload
    items: list[OrderLinePayload]
    note: str | None = None
    client_reference: str | None = Field(default=None, alias="clientReference")


class OrderStatusChangedPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    user_id: str = Field(alias="userId")
    previous_status: str = Field(alias="previousStatus")
    current_status: str = Field(alias="currentStatus")
    reason: str | None = None
