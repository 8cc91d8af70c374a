"""PMQ Consumer - Leasing, Acknowledgment and Requeue.

A consumer leases a batch of messages with :meth:`Consumer.get` and keeps
it in memory until the batch is acknowledged or requeued. Nothing is
removed from the store by reading, so a consumer that dies while holding
a batch loses nothing: the messages are delivered again to the next
reader.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import uuid
from enum import Enum, auto
from typing import List, Optional

from pmq.broker.broker import Broker
from pmq.protocol.codec import MemberCodec, default_codec
from pmq.queue.message import PrioritizedMessage, members_of

logger = logging.getLogger(__name__)


class ConsumerState(Enum):
    """Consumer lease states."""

    IDLE = auto()     # Nothing held
    HOLDING = auto()  # A fetched batch awaits ack or requeue


class Consumer:
    """Queue consumer.

    Holds at most one unacknowledged batch. While a batch is held,
    :meth:`get` returns that same batch without reading the store again.
    """

    def __init__(
        self,
        broker: Broker,
        codec: Optional[MemberCodec] = None,
        consumer_id: Optional[str] = None,
    ):
        self.broker = broker
        self.codec = codec or default_codec()
        self.consumer_id = consumer_id or f"consumer-{uuid.uuid4().hex[:8]}"
        self._unacked: List[PrioritizedMessage] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> ConsumerState:
        return ConsumerState.HOLDING if self._unacked else ConsumerState.IDLE

    @property
    def held(self) -> List[PrioritizedMessage]:
        """Copy of the currently held batch."""
        with self._lock:
            return list(self._unacked)

    def get(self, limit: int) -> List[PrioritizedMessage]:
        """Lease up to ``limit`` highest-priority messages.

        Args:
            limit: Maximum number of messages to fetch

        Returns:
            The held batch if one is outstanding, otherwise a fresh batch
            (possibly empty)
        """
        with self._lock:
            if self._unacked:
                return list(self._unacked)

            messages = self.broker.get(limit)
            if messages:
                self._unacked = messages
                logger.debug(f"Consumer {self.consumer_id} leased {len(messages)} message(s)")
            return list(messages)

    def ack(self) -> None:
        """Acknowledge the held batch, removing it from the store.

        On failure the batch stays held and the error is re-raised; calling
        ``ack`` again retries the whole batch. Some members may already be
        gone by then, which the store treats as a no-op.
        """
        with self._lock:
            self._ack_locked()

    def _ack_locked(self) -> None:
        if not self._unacked:
            return

        self.broker.acknowledge(members_of(self._unacked))
        logger.debug(f"Consumer {self.consumer_id} acknowledged {len(self._unacked)} message(s)")
        self._unacked = []

    def requeue(self) -> None:
        """Put the held batch back behind its same-priority peers.

        The originals are acknowledged first, then re-inserted with fresh
        timestamps, the same bodies and their current priorities (including
        any :meth:`PrioritizedMessage.add_priority` adjustment).
        """
        with self._lock:
            if not self._unacked:
                return

            snapshot = self._unacked
            self._ack_locked()

            refreshed = [message.refreshed(self.codec) for message in snapshot]
            try:
                self.broker.put(refreshed)
            except Exception:
                # Originals are gone; hold the refreshed batch so a retry re-inserts it.
                self._unacked = refreshed
                logger.warning(
                    f"Consumer {self.consumer_id} failed to re-insert "
                    f"{len(refreshed)} message(s); batch still held"
                )
                raise

            logger.debug(f"Consumer {self.consumer_id} requeued {len(refreshed)} message(s)")

    def __repr__(self) -> str:
        return (
            f"Consumer(id={self.consumer_id!r}, state={self.state.name}, "
            f"held={len(self._unacked)})"
        )


__all__ = ["Consumer", "ConsumerState"]
