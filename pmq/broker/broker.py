"""PMQ Broker - Store Access and Serialized Acknowledgment.

The broker owns one named collection in the store. Inserts and range reads
go straight to the store; removals are funnelled through a single
acknowledgment worker thread so that at most one removal batch is in
flight per broker at any time.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import List, Optional, Sequence

from pmq.errors import QueueClosedError
from pmq.queue.message import PrioritizedMessage
from pmq.storage.backend import OrderedSetStore

logger = logging.getLogger(__name__)


class BrokerState(Enum):
    """Broker operational states."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()


@dataclass
class BrokerStats:
    """Broker statistics."""

    state: BrokerState = BrokerState.STOPPED
    messages_put: int = 0
    messages_fetched: int = 0
    messages_acknowledged: int = 0
    ack_batches: int = 0
    ack_failures: int = 0
    started_at: Optional[datetime] = None


@dataclass
class AckRequest:
    """One acknowledgment batch and the reply slot for its outcome.

    Attributes:
        members: Packed members to remove
        reply: Receives ``None`` on success or the raised exception
    """

    members: List[bytes]
    reply: "queue.Queue[Optional[BaseException]]" = field(
        default_factory=lambda: queue.Queue(maxsize=1)
    )

    def wait(self) -> Optional[BaseException]:
        return self.reply.get()


_SHUTDOWN = object()


class Broker:
    """Gateway to one ordered collection.

    Features:
    - Multi-member insert scored by negated priority
    - Non-destructive range reads, highest priority first
    - Removal batches serialized through one worker thread
    """

    def __init__(self, store: OrderedSetStore, name: str):
        """Initialize broker.

        Args:
            store: Ordered-set store holding the collection
            name: Collection name
        """
        if not name:
            raise ValueError("Collection name is required")

        self.store = store
        self.name = name

        self._requests: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._state = BrokerState.STOPPED
        self._lock = threading.RLock()
        self._started_at: Optional[datetime] = None

        self._stats = {
            "messages_put": 0,
            "messages_fetched": 0,
            "messages_acknowledged": 0,
            "ack_batches": 0,
            "ack_failures": 0,
        }

    @property
    def state(self) -> BrokerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == BrokerState.RUNNING

    # Lifecycle

    def start(self) -> None:
        """Start the acknowledgment worker."""
        with self._lock:
            if self._state != BrokerState.STOPPED:
                return

            self._thread = threading.Thread(
                target=self._ack_loop,
                daemon=True,
                name=f"AckListener-{self.name}",
            )
            self._thread.start()
            self._started_at = datetime.now()
            self._state = BrokerState.RUNNING
            logger.info(f"Broker {self.name} started")

    def stop(self) -> None:
        """Stop the acknowledgment worker.

        Requests already queued are processed before the worker exits.
        Blocks until it has exited.
        """
        with self._lock:
            if self._state != BrokerState.RUNNING:
                return
            self._state = BrokerState.STOPPING
            self._requests.put(_SHUTDOWN)
            thread = self._thread

        if thread is not None:
            thread.join()

        with self._lock:
            self._thread = None
            self._state = BrokerState.STOPPED
        logger.info(f"Broker {self.name} stopped")

    def _ack_loop(self) -> None:
        while True:
            request = self._requests.get()
            if request is _SHUTDOWN:
                break

            error: Optional[BaseException] = None
            try:
                self._remove_many(request.members)
            except Exception as e:
                error = e

            request.reply.put(error)

    # Store operations

    def put(self, messages: Sequence[PrioritizedMessage]) -> None:
        """Insert messages in one multi-member write.

        Store errors propagate unchanged.
        """
        if not messages:
            return

        mapping = dict(message.to_entry() for message in messages)
        self.store.add(self.name, mapping)

        with self._lock:
            self._stats["messages_put"] += len(mapping)
        logger.debug(f"Put {len(mapping)} message(s) into {self.name}")

    def get(self, limit: int) -> List[PrioritizedMessage]:
        """Read the ``limit`` highest-priority messages without removing them.

        Raises:
            ValueError: If ``limit`` is less than 1
            MemberDecodeError: If a stored member is malformed
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        rows = self.store.range_with_scores(self.name, 0, limit - 1)
        messages = [PrioritizedMessage.from_store(member, score) for member, score in rows]

        with self._lock:
            self._stats["messages_fetched"] += len(messages)
        logger.debug(f"Fetched {len(messages)} message(s) from {self.name}")
        return messages

    def _remove_many(self, members: Sequence[bytes]) -> None:
        # Stops at the first failure; earlier members stay removed.
        for member in members:
            self.store.remove(self.name, member)

    def acknowledge(self, members: Sequence[bytes]) -> None:
        """Remove ``members`` through the acknowledgment worker.

        Blocks until this batch has been processed.

        Raises:
            QueueClosedError: If the broker is not running
        """
        if not members:
            return

        with self._lock:
            if self._state != BrokerState.RUNNING:
                logger.warning(f"Acknowledgment on stopped broker {self.name}")
                raise QueueClosedError(f"Broker {self.name} is not running")
            request = AckRequest(members=list(members))
            self._requests.put(request)

        error = request.wait()

        with self._lock:
            self._stats["ack_batches"] += 1
            if error is None:
                self._stats["messages_acknowledged"] += len(request.members)
            else:
                self._stats["ack_failures"] += 1

        if error is not None:
            logger.warning(f"Acknowledgment of {len(request.members)} member(s) failed: {error}")
            raise error

        logger.debug(f"Acknowledged {len(request.members)} member(s) in {self.name}")

    def size(self) -> int:
        """Number of messages in the collection."""
        return self.store.count(self.name)

    def get_stats(self) -> BrokerStats:
        """Get broker statistics."""
        with self._lock:
            return BrokerStats(
                state=self._state,
                started_at=self._started_at,
                **self._stats,
            )

    def __repr__(self) -> str:
        return f"Broker(name={self.name!r}, state={self._state.name})"


__all__ = ["Broker", "BrokerState", "BrokerStats", "AckRequest"]
