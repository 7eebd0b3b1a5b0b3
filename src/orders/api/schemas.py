"""Pydantic request/response schemas for the Orders API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Field names are camelCase on the wire; request
bodies also accept snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field


class MoneySchema(BaseModel):
    amount: int
    currency: str


class OrderItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(ge=1)
    unit_price: MoneySchema = Field(alias="unitPrice")


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [
                        {
                            "productId": "0f0b9c0a-0d58-4a37-9882-5e39f68d3c0d",
                            "quantity": 2,
                            "unitPrice": {"amount": 2500, "currency": "KRW"},
                        }
                    ],
                    "note": "No sugar, please",
                    "clientReference": "checkout-7f3a",
                }
            ]
        },
    )

    items: list[OrderItemRequest]
    note: str | None = Field(default=None, max_length=255)
    client_reference: str | None = Field(default=None, alias="clientReference", max_length=64)


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=255)


class OrderLineResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int
    unit_price: MoneySchema = Field(alias="unitPrice")
    line_total: MoneySchema = Field(alias="lineTotal")


class OrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    status: str
    total: MoneySchema
    items: list[OrderLineResponse]
    note: str | None = None
    client_reference: str | None = Field(default=None, alias="clientReference")
    payment_id: str | None = Field(default=None, alias="paymentId")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            status=order.status,
            total=MoneySchema(amount=order.total.amount, currency=order.total.currency),
            items=[
                OrderLineResponse(
                    product_id=str(line.product_id),
                    quantity=line.quantity,
                    unit_price=MoneySchema(amount=line.unit_price.amount, currency=line.unit_price.currency),
                    line_total=MoneySchema(amount=line.line_total.amount, currency=line.line_total.currency),
                )
                for line in order.lines
            ],
            note=order.note,
            client_reference=order.client_reference,
            payment_id=order.payment_id,
            created_at=order.created_at.isoformat(),
            updated_at=order.updated_at.isoformat(),
        )


class ProductResponse(BaseModel):
    id: str
    name: str
    price: MoneySchema
