"""Message bus backed by Redis Streams.

A topic is split into ``partitions`` streams named ``{topic}:{n}``; a message
goes to the stream picked by ``crc32(key) % partitions``, so all messages for
one order share a stream and keep their publish order. Consumers read through
a consumer group and acknowledge a message only after its handler returns:
a handler that raises leaves the message pending, and it is redelivered when
the consumer restarts under the same name.

A consumer group shares the entries of one stream among all of its readers,
so each partition stream must have exactly one reader. A bus reads the
partitions listed in ``owned_partitions`` (all of them by default); to scale
out, run one consumer per disjoint set of partitions. The default consumer
name is derived from the owned partitions, so a restarted consumer recovers
what its predecessor left pending.
"""

import json
import threading
import zlib
from collections.abc import Iterable

import redis
import structlog
from redis.exceptions import ResponseError

from orders.messaging.port import MessageBus, MessageHandler

logger = structlog.get_logger(__name__)


class RedisStreamBus(MessageBus):
    def __init__(
        self,
        client: redis.Redis,
        partitions: int = 1,
        group: str = "orders",
        consumer_name: str | None = None,
        owned_partitions: Iterable[int] | None = None,
        block_ms: int = 5000,
        batch_size: int = 10,
    ) -> None:
        if partitions < 1:
            raise ValueError("partitions must be a positive integer")
        self.client = client
        self.partitions = partitions
        self.group = group
        self.owned_partitions = self._check_owned(owned_partitions, partitions)
        self.consumer_name = consumer_name or f"{group}-p" + "-".join(map(str, self.owned_partitions))
        self.block_ms = block_ms
        self.batch_size = batch_size
        self._handlers: dict[str, MessageHandler] = {}

    @staticmethod
    def _check_owned(owned_partitions, partitions: int) -> tuple[int, ...]:
        if owned_partitions is None:
            return tuple(range(partitions))
        owned = tuple(sorted(set(owned_partitions)))
        if not owned:
            raise ValueError("owned_partitions must name at least one partition")
        outside = [partition for partition in owned if not 0 <= partition < partitions]
        if outside:
            raise ValueError(f"owned_partitions {outside} outside 0..{partitions - 1}")
        return owned

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisStreamBus":
        return cls(redis.Redis.from_url(url, decode_responses=True), **kwargs)

    def stream_for(self, topic: str, key: str) -> str:
        partition = zlib.crc32(key.encode("utf-8")) % self.partitions
        return f"{topic}:{partition}"

    def streams_of(self, topic: str) -> list[str]:
        """Streams of ``topic`` this bus reads."""
        return [f"{topic}:{partition}" for partition in self.owned_partitions]

    def publish(self, topic: str, key: str, message: dict) -> None:
        stream = self.stream_for(topic, key)
        self.client.xadd(stream, {"key": key, "value": json.dumps(message)})

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        for stream in self.streams_of(topic):
            self._ensure_group(stream)
            self._handlers[stream] = handler

    def _ensure_group(self, stream: str) -> None:
        try:
            self.client.xgroup_create(stream, self.group, id="$", mkstream=True)
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise

    def _read(self, start_id: str, block: int | None) -> int:
        if not self._handlers:
            return 0

        response = self.client.xreadgroup(
            self.group,
            self.consumer_name,
            {stream: start_id for stream in self._handlers},
            count=self.batch_size,
            block=block,
        )

        processed = 0
        for stream, entries in response or []:
            handler = self._handlers[stream]
            for message_id, fields in entries:
                # Pending entries already acknowledged elsewhere come back without fields
                if fields:
                    handler(fields.get("value"))
                self.client.xack(stream, self.group, message_id)
                processed += 1
        return processed

    def recover_pending(self) -> int:
        """Re-run messages this consumer received but never acknowledged."""
        recovered = 0
        while True:
            processed = self._read("0", block=None)
            if not processed:
                break
            recovered += processed
        if recovered:
            logger.info("Recovered pending messages", count=recovered, consumer=self.consumer_name)
        return recovered

    def poll(self) -> int:
        """Process one batch of new messages; returns how many were handled."""
        return self._read(">", block=self.block_ms)

    def run_forever(self, stop_event: threading.Event | None = None) -> None:
        logger.info(
            "Consuming streams",
            streams=sorted(self._handlers),
            group=self.group,
            consumer=self.consumer_name,
        )
        self.recover_pending()
        while stop_event is None or not stop_event.is_set():
            self.poll()

    def close(self) -> None:
        self.client.close()
