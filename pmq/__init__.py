"""PMQ - Priority Message Queue on Redis Sorted Sets.

PMQ builds a priority queue with at-least-once delivery on top of an
ordered-set store. Messages are sorted-set members scored by their negated
priority, so the store's ascending order hands out the highest priority
first; a timestamp prefix on each member breaks ties in insertion order.

Architecture Overview:
┌─────────────────────────────────────────────────────────────────┐
│                              PMQ                                │
├─────────────────────────────────────────────────────────────────┤
│  ┌──────────────┐    ┌──────────────┐    ┌──────────────────┐   │
│  │ MessageQueue │───▶│    Broker    │───▶│  OrderedSetStore │   │
│  │ • put        │    │ • put / get  │    │ • RedisStore     │   │
│  │ • close      │    │ • ack worker │    │ • MemoryStore    │   │
│  └──────────────┘    └──────▲───────┘    └──────────────────┘   │
│  ┌──────────────┐           │                                   │
│  │   Consumer   │───────────┘                                   │
│  │ • get        │  lease, then ack (remove) or requeue          │
│  │ • ack        │  (remove + re-insert with a fresh timestamp)  │
│  │ • requeue    │                                               │
│  └──────────────┘                                               │
└─────────────────────────────────────────────────────────────────┘

Delivery is at-least-once: reading does not remove anything, so a
consumer that crashes before acknowledging leaves its batch in place.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

# Errors
from pmq.errors import (
    PMQError,
    StoreConnectionError,
    MemberDecodeError,
    QueueClosedError,
)

# Protocol components
from pmq.protocol.codec import Member, MemberCodec
from pmq.protocol.serializer import Serializer, JSONSerializer

# Storage components
from pmq.storage.backend import OrderedSetStore
from pmq.storage.memory import MemoryStore
from pmq.storage.redis import RedisStore

# Queue components
from pmq.queue.message import PrioritizedMessage
from pmq.queue.consumer import Consumer, ConsumerState
from pmq.queue.priority import MessageQueue, QueueConfig, new
from pmq.queue.simple import QueueMessage, SimpleQueue

# Broker components
from pmq.broker.broker import Broker, BrokerState, BrokerStats

__version__ = "1.0.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

__all__ = [
    # Version
    "__version__",
    # Errors
    "PMQError",
    "StoreConnectionError",
    "MemberDecodeError",
    "QueueClosedError",
    # Protocol
    "Member",
    "MemberCodec",
    "Serializer",
    "JSONSerializer",
    # Storage
    "OrderedSetStore",
    "MemoryStore",
    "RedisStore",
    # Queue
    "PrioritizedMessage",
    "Consumer",
    "ConsumerState",
    "MessageQueue",
    "QueueConfig",
    "new",
    "QueueMessage",
    "SimpleQueue",
    # Broker
    "Broker",
    "BrokerState",
    "BrokerStats",
]
