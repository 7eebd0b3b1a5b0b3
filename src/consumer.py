"""Payments event consumer runner for the orders domain.

Subscribes ``PaymentEventConsumer`` to the payments topics on Redis Streams
and applies each event to its order. An exception other than a malformed
message ends the process; run it under a supervisor that restarts it, and
unacknowledged messages are redelivered on restart.

Each partition stream must be read by exactly one running consumer, or events
for one order could be applied out of order. A single consumer reads every
partition; to scale out, give each process a disjoint ``--partitions-owned``
set that together covers every partition.

Usage:
    python src/consumer.py
    python src/consumer.py --partitions 4 --partitions-owned 0,1
    python src/consumer.py --partitions 4 --partitions-owned 2,3
"""

import argparse
import sys

from orders.config import load_settings, parse_partitions
from orders.domain import orders
from orders.messaging import RedisStreamBus
from orders.order.payment_events import PaymentEventConsumer
from orders.utils.logging import get_logger

logger = get_logger(__name__)


def build_bus(settings, consumer_name=None, partitions=None, owned_partitions=None) -> RedisStreamBus:
    bus = RedisStreamBus.from_url(
        settings.redis_url,
        partitions=partitions or settings.partitions,
        group=settings.payments_consumer_group,
        consumer_name=consumer_name,
        owned_partitions=owned_partitions or settings.owned_partitions,
    )
    handler = PaymentEventConsumer()
    for topic in settings.payment_topics:
        bus.subscribe(topic, handler)
    return bus


def run(consumer_name=None, partitions=None, owned_partitions=None) -> int:
    settings = load_settings()
    if settings.disable_payments_consumer:
        logger.warning("Payments events consumer disabled via configuration")
        return 0

    orders.init()
    bus = build_bus(
        settings,
        consumer_name=consumer_name,
        partitions=partitions,
        owned_partitions=owned_partitions,
    )
    logger.info(
        "Payments events consumer started",
        topics=settings.payment_topics,
        partitions=list(bus.owned_partitions),
        consumer=bus.consumer_name,
    )
    try:
        with orders.domain_context():
            bus.run_forever()
    except KeyboardInterrupt:
        logger.info("Payments events consumer stopped")
    finally:
        bus.close()
    return 0


def main():
    parser = argparse.ArgumentParser(description="Orders payments event consumer")
    parser.add_argument(
        "--consumer-name",
        help="Consumer name within the group (default: derived from the owned partitions)",
    )
    parser.add_argument("--partitions", type=int, help="Override ORDERS_PARTITIONS")
    parser.add_argument(
        "--partitions-owned",
        type=parse_partitions,
        help="Comma-separated partitions this process reads (default: ORDERS_OWNED_PARTITIONS, else all)",
    )
    args = parser.parse_args()

    sys.exit(
        run(
            consumer_name=args.consumer_name,
            partitions=args.partitions,
            owned_partitions=args.partitions_owned,
        )
    )


if __name__ == "__main__":
    main()
