"""PMQ Simple Queue - Timestamp-Ordered Queue Without Leasing.

Messages are scored by their timestamp and popped one at a time, newest
first. There is no acknowledgment step: :meth:`SimpleQueue.get` removes
the message it returns.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union

from pmq.errors import MemberDecodeError, QueueClosedError
from pmq.protocol.codec import now_micros, to_bytes
from pmq.protocol.serializer import JSONSerializer, Serializer
from pmq.queue.priority import QueueConfig, probe
from pmq.storage.backend import OrderedSetStore
from pmq.storage.redis import RedisStore

logger = logging.getLogger(__name__)


@dataclass
class QueueMessage:
    """A simple queue message.

    Attributes:
        body: Message payload
        timestamp: Microseconds since the epoch; 0 means "stamp on put"
    """

    body: bytes = b""
    timestamp: int = 0

    def __post_init__(self):
        self.body = to_bytes(self.body)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "body": base64.b64encode(self.body).decode("ascii"),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "QueueMessage":
        if not isinstance(data, dict) or "body" not in data or "timestamp" not in data:
            raise MemberDecodeError(f"Member is not a queue message: {data!r}")
        try:
            body = base64.b64decode(data["body"], validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise MemberDecodeError(f"Member body is not base64: {e}") from e
        try:
            timestamp = int(data["timestamp"])
        except (TypeError, ValueError) as e:
            raise MemberDecodeError(f"Member timestamp is not an integer: {e}") from e
        return cls(body=body, timestamp=timestamp)


class SimpleQueue:
    """Timestamp-scored queue that pops the newest message."""

    def __init__(
        self,
        store: OrderedSetStore,
        name: str,
        serializer: Optional[Serializer] = None,
        address: str = "memory",
    ):
        if not name:
            raise ValueError("Queue name is required")
        probe(store, address)

        self.store = store
        self.name = name
        self.serializer = serializer or JSONSerializer()
        self._lock = threading.Lock()
        self._closed = False

        logger.info(f"Simple queue {name} opened on {address}")

    @classmethod
    def connect(cls, config: QueueConfig) -> "SimpleQueue":
        """Connect to Redis and open the queue named in ``config``."""
        store = RedisStore(
            address=config.redis_addr,
            db=config.redis_db,
            password=config.password,
        )
        try:
            return cls(store, config.name, address=config.redis_addr)
        except Exception:
            store.close()
            raise

    def put(self, message: Union[QueueMessage, bytes, str]) -> QueueMessage:
        """Store ``message``, stamping a copy with the current time if unset.

        The caller's message is left unchanged.

        Returns:
            The message as stored
        """
        if self._closed:
            raise QueueClosedError(f"Queue {self.name} is closed")

        if not isinstance(message, QueueMessage):
            message = QueueMessage(body=message)
        if message.timestamp == 0:
            message = replace(message, timestamp=now_micros())

        member = self.serializer.serialize(message.to_dict())
        self.store.add(self.name, {member: float(message.timestamp)})
        logger.debug(f"Put message ts={message.timestamp} into {self.name}")
        return message

    def get(self) -> Optional[QueueMessage]:
        """Pop the message with the latest timestamp, or ``None`` if empty."""
        if self._closed:
            raise QueueClosedError(f"Queue {self.name} is closed")

        with self._lock:
            rows = self.store.range_with_scores(self.name, 0, 0, reverse=True)
            if not rows:
                return None

            member, _ = rows[0]
            message = QueueMessage.from_dict(self.serializer.deserialize(member))
            self.store.remove(self.name, member)
            return message

    def size(self) -> int:
        return self.store.count(self.name)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.store.close()
        logger.info(f"Simple queue {self.name} closed")

    def __enter__(self) -> "SimpleQueue":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["SimpleQueue", "QueueMessage"]
