"""PMQ Priority Queue - Producer Handle.

Usage::

    from pmq import MessageQueue, QueueConfig

    mq = MessageQueue.connect(QueueConfig(name="jobs", redis_addr="localhost:6379"))
    mq.put(b"resize image 42", priority=5)

    consumer = mq.get_consumer()
    for message in consumer.get(10):
        handle(message.body)
    consumer.ack()

    mq.close()

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from pmq.broker.broker import Broker, BrokerStats
from pmq.errors import QueueClosedError, StoreConnectionError
from pmq.protocol.codec import MemberCodec, default_codec
from pmq.queue.consumer import Consumer
from pmq.queue.message import PrioritizedMessage
from pmq.storage.backend import OrderedSetStore
from pmq.storage.redis import RedisStore

logger = logging.getLogger(__name__)


@dataclass
class QueueConfig:
    """Queue configuration.

    Attributes:
        name: Collection name in the store
        redis_addr: ``host:port`` or a ``redis://`` URL
        redis_db: Logical database index
        password: Optional store password
    """

    name: str
    redis_addr: str = "localhost:6379"
    redis_db: int = 0
    password: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Queue name is required")
        if not self.redis_addr:
            raise ValueError("Store address is required")
        if self.redis_db < 0:
            raise ValueError(f"Invalid database index {self.redis_db}")


def probe(store: OrderedSetStore, address: str) -> None:
    """Verify the store answers, or raise :class:`StoreConnectionError`."""
    try:
        store.ping()
    except Exception as e:
        logger.error(f"Store at {address} is unreachable: {e}")
        raise StoreConnectionError(address, str(e)) from e


class MessageQueue:
    """Priority message queue.

    Producer handle and owner of the broker lifecycle. Consumers obtained
    from :meth:`get_consumer` share this queue's broker.
    """

    def __init__(
        self,
        store: OrderedSetStore,
        name: str,
        codec: Optional[MemberCodec] = None,
        address: str = "memory",
    ):
        """Initialize queue over an existing store.

        Args:
            store: Ordered-set store
            name: Collection name
            codec: Member codec (defaults to the process-wide codec)
            address: Store address, for error messages

        Raises:
            StoreConnectionError: If the store does not answer a ping
        """
        probe(store, address)

        self.codec = codec or default_codec()
        self.broker = Broker(store, name)
        self.broker.start()
        self._closed = False

        logger.info(f"Message queue {name} opened on {address}")

    @classmethod
    def connect(cls, config: QueueConfig, codec: Optional[MemberCodec] = None) -> "MessageQueue":
        """Connect to Redis and open the queue named in ``config``.

        Raises:
            StoreConnectionError: If Redis is unreachable
        """
        store = RedisStore(
            address=config.redis_addr,
            db=config.redis_db,
            password=config.password,
        )
        try:
            return cls(store, config.name, codec=codec, address=config.redis_addr)
        except StoreConnectionError:
            store.close()
            raise

    @property
    def name(self) -> str:
        return self.broker.name

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, body: Union[bytes, str], priority: float = 0.0) -> None:
        """Enqueue ``body`` with ``priority`` (higher is delivered first).

        Raises:
            QueueClosedError: If the queue has been closed
        """
        if self._closed:
            logger.warning(f"Put on closed queue {self.name}")
            raise QueueClosedError(f"Queue {self.name} is closed")

        message = PrioritizedMessage(member=self.codec.encode(body), priority=priority)
        self.broker.put([message])

    def get_consumer(self, consumer_id: Optional[str] = None) -> Consumer:
        """Create a consumer with an empty lease bound to this queue."""
        return Consumer(self.broker, codec=self.codec, consumer_id=consumer_id)

    def size(self) -> int:
        """Number of messages in the queue, leased or not."""
        return self.broker.size()

    def get_stats(self) -> BrokerStats:
        return self.broker.get_stats()

    def close(self) -> None:
        """Stop the acknowledgment worker and release the store.

        Blocks until queued acknowledgments have been processed.
        """
        if self._closed:
            return
        self._closed = True
        self.broker.stop()
        self.broker.store.close()
        logger.info(f"Message queue {self.name} closed")

    def __enter__(self) -> "MessageQueue":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"MessageQueue(name={self.name!r}, {state})"


new = MessageQueue.connect


__all__ = ["MessageQueue", "QueueConfig", "new", "probe"]
