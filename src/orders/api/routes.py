"""FastAPI routes for the Orders domain.

The API gateway authenticates the buyer and forwards their id in the
``X-User-Id`` header; ``X-Correlation-Id`` and ``X-Causation-Id`` are passed
through to the commands so outbound events can be traced to the request.
"""

import json

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from orders.api.schemas import (
    CancelOrderRequest,
    CreateOrderRequest,
    MoneySchema,
    OrderResponse,
    ProductResponse,
)
from orders.catalog import get_catalog
from orders.exceptions import CatalogUnavailable
from orders.order.cancellation import CancelOrder
from orders.order.creation import CreateOrder
from orders.order.order import Order

router = APIRouter(prefix="/orders", tags=["orders"])


def authenticated_user(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def _process(command) -> str:
    """Run a command, translating domain errors into HTTP responses."""
    try:
        return current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0] if exc.args else str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    except CatalogUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _load(order_id: str, user_id: str) -> Order:
    order = current_domain.repository_for(Order).find_by_id_for_user(order_id, user_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return order


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    user_id: str = Depends(authenticated_user),
    x_correlation_id: str | None = Header(default=None),
    x_causation_id: str | None = Header(default=None),
) -> OrderResponse:
    command = CreateOrder(
        user_id=user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        note=body.note,
        client_reference=body.client_reference,
        correlation_id=x_correlation_id,
        causation_id=x_causation_id,
    )
    order_id = _process(command)
    return OrderResponse.from_order(_load(order_id, user_id))


@router.get("", response_model=list[OrderResponse])
async def list_orders(user_id: str = Depends(authenticated_user)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).list_by_user(user_id)
    return [OrderResponse.from_order(order) for order in orders]


@router.get("/products", response_model=list[ProductResponse])
async def list_products() -> list[ProductResponse]:
    try:
        products = get_catalog().list_all()
    except CatalogUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return [
        ProductResponse(
            id=product.id,
            name=product.name,
            price=MoneySchema(amount=product.price.amount, currency=product.price.currency),
        )
        for product in products
    ]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(authenticated_user)) -> OrderResponse:
    return OrderResponse.from_order(_load(order_id, user_id))


@router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    user_id: str = Depends(authenticated_user),
    x_correlation_id: str | None = Header(default=None),
    x_causation_id: str | None = Header(default=None),
) -> OrderResponse:
    command = CancelOrder(
        order_id=order_id,
        user_id=user_id,
        reason=body.reason if body else None,
        correlation_id=x_correlation_id,
        causation_id=x_causation_id,
    )
    _process(command)
    return OrderResponse.from_order(_load(order_id, user_id))
