import pytest
from orders.config import Settings, load_settings, parse_partitions

_VARIABLES = [
    "ORDERS_CREATED_TOPIC",
    "ORDERS_STATUS_CHANGED_TOPIC",
    "PAYMENTS_SUCCEEDED_TOPIC",
    "PAYMENTS_FAILED_TOPIC",
    "PAYMENTS_CANCELLED_TOPIC",
    "CATALOG_SERVICE_URL",
    "CATALOG_TIMEOUT_SECONDS",
    "ORDERS_EVENT_TRANSPORT",
    "REDIS_URL",
    "ORDERS_PARTITIONS",
    "ORDERS_OWNED_PARTITIONS",
    "PAYMENTS_CONSUMER_GROUP",
    "DISABLE_PAYMENTS_CONSUMER",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings == Settings()
    assert settings.payment_topics == [
        "payments.payment.succeeded",
        "payments.payment.failed",
        "payments.payment.cancelled",
    ]
    assert settings.event_transport == "memory"
    assert settings.disable_payments_consumer is False


def test_environment_overrides(clean_env):
    clean_env.setenv("ORDERS_CREATED_TOPIC", "prod.orders.created")
    clean_env.setenv("PAYMENTS_FAILED_TOPIC", "prod.payments.failed")
    clean_env.setenv("ORDERS_EVENT_TRANSPORT", " Redis ")
    clean_env.setenv("ORDERS_PARTITIONS", "8")
    clean_env.setenv("DISABLE_PAYMENTS_CONSUMER", "true")

    settings = load_settings()

    assert settings.topic_for("orders.order.created") == "prod.orders.created"
    assert settings.topic_for("orders.order.statusChanged") == "orders.order.statusChanged"
    assert "prod.payments.failed" in settings.payment_topics
    assert settings.event_transport == "redis"
    assert settings.partitions == 8
    assert settings.disable_payments_consumer is True


@pytest.mark.parametrize("value", ["0", "-2"])
def test_partitions_must_be_positive(clean_env, value):
    clean_env.setenv("ORDERS_PARTITIONS", value)
    with pytest.raises(ValueError):
        load_settings()


def test_owned_partitions(clean_env):
    clean_env.setenv("ORDERS_PARTITIONS", "4")
    clean_env.setenv("ORDERS_OWNED_PARTITIONS", "2, 0")

    settings = load_settings()

    assert settings.owned_partitions == (2, 0)


@pytest.mark.parametrize("value", [None, "", "  "])
def test_blank_partition_list_means_all(value):
    assert parse_partitions(value) is None


def test_invalid_partition_list(clean_env):
    clean_env.setenv("ORDERS_OWNED_PARTITIONS", "0,two")
    with pytest.raises(ValueError):
        load_settings()
