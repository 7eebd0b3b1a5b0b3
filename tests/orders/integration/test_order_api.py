"""Integration tests for the Orders API endpoints via TestClient."""

from unittest.mock import MagicMock

import pytest
import requests
from fastapi import FastAPI
from fastapi.testclient import TestClient
from orders.api.routes import router
from orders.catalog import HttpCatalog, ProductCatalog, set_catalog
from orders.catalog.static_adapter import CAFE_LATTE_ID, ESPRESSO_ID
from orders.exceptions import CatalogUnavailable
from orders.order.payment import MarkOrderAsPaid
from protean import current_domain

HEADERS = {"X-User-Id": "user-api-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _body(**kwargs):
    body = {
        "items": [
            {"productId": ESPRESSO_ID, "quantity": 2, "unitPrice": {"amount": 2500, "currency": "KRW"}},
            {"productId": CAFE_LATTE_ID, "quantity": 1, "unitPrice": {"amount": 4500, "currency": "KRW"}},
        ]
    }
    body.update(kwargs)
    return body


def _create(client, **kwargs):
    response = client.post("/orders", json=_body(**kwargs), headers=HEADERS)
    assert response.status_code == 201
    return response.json()


class TestCreateOrderEndpoint:
    def test_returns_created_order(self, client):
        data = _create(client, note="No sugar", clientReference="checkout-1")

        assert data["userId"] == "user-api-001"
        assert data["status"] == "Created"
        assert data["total"] == {"amount": 9500, "currency": "KRW"}
        assert data["note"] == "No sugar"
        assert data["clientReference"] == "checkout-1"
        assert data["items"][0] == {
            "productId": ESPRESSO_ID,
            "quantity": 2,
            "unitPrice": {"amount": 2500, "currency": "KRW"},
            "lineTotal": {"amount": 5000, "currency": "KRW"},
        }
        assert data["createdAt"]
        assert data["updatedAt"]

    def test_retry_with_same_client_reference_returns_same_order(self, client, publisher):
        first = _create(client, clientReference="checkout-1")
        second = _create(client, clientReference="checkout-1")

        assert first["id"] == second["id"]
        assert len(publisher.envelopes("orders.order.created")) == 1

    def test_forwards_tracing_headers(self, client, publisher):
        client.post(
            "/orders",
            json=_body(),
            headers={**HEADERS, "X-Correlation-Id": "corr-http", "X-Causation-Id": "cause-http"},
        )

        metadata = publisher.envelopes()[0].metadata
        assert metadata.correlation_id == "corr-http"
        assert metadata.causation_id == "cause-http"

    def test_price_mismatch_is_rejected(self, client, publisher):
        body = _body(items=[{"productId": ESPRESSO_ID, "quantity": 1, "unitPrice": {"amount": 1, "currency": "KRW"}}])

        response = client.post("/orders", json=body, headers=HEADERS)

        assert response.status_code == 400
        assert publisher.published == []

    def test_unknown_product_is_rejected(self, client):
        body = _body(items=[{"productId": "nope", "quantity": 1, "unitPrice": {"amount": 1, "currency": "KRW"}}])
        assert client.post("/orders", json=body, headers=HEADERS).status_code == 400

    def test_empty_items_are_rejected(self, client):
        assert client.post("/orders", json=_body(items=[]), headers=HEADERS).status_code == 400

    def test_requires_user_header(self, client):
        assert client.post("/orders", json=_body()).status_code == 401

    def test_catalog_outage_is_service_unavailable(self, client):
        class DownCatalog(ProductCatalog):
            def find_by_id(self, product_id):
                raise CatalogUnavailable("catalog down")

            def list_all(self):
                raise CatalogUnavailable("catalog down")

        set_catalog(DownCatalog())

        assert client.post("/orders", json=_body(), headers=HEADERS).status_code == 503
        assert client.get("/orders/products").status_code == 503

    def test_malformed_catalog_price_is_service_unavailable(self, client, publisher):
        response = MagicMock(spec=requests.Response)
        response.status_code = 200
        response.ok = True
        response.json.return_value = {"id": ESPRESSO_ID, "name": "Espresso", "price": {"amount": 25.0, "currency": "KRW"}}
        session = MagicMock(spec=requests.Session)
        session.get.return_value = response
        set_catalog(HttpCatalog("http://catalog.test", session=session))

        result = client.post("/orders", json=_body(), headers=HEADERS)

        assert result.status_code == 503
        assert publisher.envelopes() == []


class TestReadEndpoints:
    def test_get_order(self, client):
        order_id = _create(client)["id"]

        response = client.get(f"/orders/{order_id}", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["id"] == order_id

    def test_get_order_of_another_user_is_not_found(self, client):
        order_id = _create(client)["id"]

        response = client.get(f"/orders/{order_id}", headers={"X-User-Id": "someone-else"})

        assert response.status_code == 404

    def test_list_orders_only_returns_own_orders(self, client):
        _create(client)
        _create(client)
        client.post("/orders", json=_body(), headers={"X-User-Id": "someone-else"})

        response = client.get("/orders", headers=HEADERS)

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert {order["userId"] for order in response.json()} == {"user-api-001"}

    def test_list_products(self, client):
        response = client.get("/orders/products")

        assert response.status_code == 200
        products = {product["id"]: product for product in response.json()}
        assert products[ESPRESSO_ID] == {
            "id": ESPRESSO_ID,
            "name": "Espresso",
            "price": {"amount": 2500, "currency": "KRW"},
        }


class TestCancelEndpoint:
    def test_cancel_order(self, client, publisher):
        order_id = _create(client)["id"]
        publisher.clear()

        response = client.patch(f"/orders/{order_id}/cancel", json={"reason": "Changed my mind"}, headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"
        assert publisher.envelopes()[0].payload["reason"] == "Changed my mind"

    def test_cancel_without_body(self, client):
        order_id = _create(client)["id"]

        response = client.patch(f"/orders/{order_id}/cancel", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"

    def test_cancel_confirmed_order_is_rejected(self, client):
        order_id = _create(client)["id"]
        current_domain.process(MarkOrderAsPaid(order_id=order_id, payment_id="pay-1"), asynchronous=False)

        response = client.patch(f"/orders/{order_id}/cancel", json={}, headers=HEADERS)

        assert response.status_code == 400

    def test_cancel_unknown_order_is_not_found(self, client):
        response = client.patch(
            "/orders/00000000-0000-4000-8000-000000000000/cancel",
            json={},
            headers=HEADERS,
        )
        assert response.status_code == 404
        assert response.json()["detail"] == {
            "order_id": ["Order 00000000-0000-4000-8000-000000000000 not found"]
        }

    def test_cancel_order_of_another_user_is_not_found(self, client):
        order_id = _create(client)["id"]

        response = client.patch(f"/orders/{order_id}/cancel", json={}, headers={"X-User-Id": "someone-else"})

        assert response.status_code == 404
        assert client.get(f"/orders/{order_id}", headers=HEADERS).json()["status"] == "Created"
