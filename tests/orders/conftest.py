import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def orders_bed():
    from orders.domain import orders

    bed = DomainFixture(orders)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(orders_bed):
    with orders_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def catalog():
    """Seeded in-memory catalog, installed for every test."""
    from orders.catalog import StaticCatalog, reset_catalog, set_catalog

    catalog = StaticCatalog()
    set_catalog(catalog)
    yield catalog
    reset_catalog()


@pytest.fixture(autouse=True)
def publisher():
    """Recording publisher, installed for every test."""
    from orders.messaging import InMemoryEventPublisher, reset_publisher, set_publisher

    publisher = InMemoryEventPublisher()
    set_publisher(publisher)
    yield publisher
    reset_publisher()


@pytest.fixture()
def user_id():
    return "user-001"


@pytest.fixture()
def cafe_items():
    """2 x Espresso (2500 KRW) + 1 x Cafe Latte (4500 KRW) = 9500 KRW."""
    from orders.catalog.static_adapter import CAFE_LATTE_ID, ESPRESSO_ID

    return [
        {"product_id": ESPRESSO_ID, "quantity": 2, "unit_price": {"amount": 2500, "currency": "KRW"}},
        {"product_id": CAFE_LATTE_ID, "quantity": 1, "unit_price": {"amount": 4500, "currency": "KRW"}},
    ]


@pytest.fixture()
def place_order(user_id, cafe_items):
    """Process a CreateOrder command and return the order id."""
    import json

    from orders.order.creation import CreateOrder
    from protean import current_domain

    def _place(items=None, **kwargs):
        kwargs.setdefault("user_id", user_id)
        return current_domain.process(
            CreateOrder(items=json.dumps(cafe_items if items is None else items), **kwargs),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def payment_event():
    """Build a payments event envelope as the payments service sends it."""

    def _build(name, payload, correlation_id="corr-payments-001"):
        return {
            "name": name,
            "version": 1,
            "payload": payload,
            "metadata": {
                "correlationId": correlation_id,
                "occurredAt": "2026-10-17T09:30:00+00:00",
            },
        }

    return _build
