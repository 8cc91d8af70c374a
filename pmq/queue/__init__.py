"""PMQ Queue Module - Producer and Consumer Handles.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from pmq.queue.message import PrioritizedMessage
from pmq.queue.consumer import Consumer, ConsumerState
from pmq.queue.priority import MessageQueue, QueueConfig, new
from pmq.queue.simple import QueueMessage, SimpleQueue

__all__ = [
    "PrioritizedMessage",
    "Consumer",
    "ConsumerState",
    "MessageQueue",
    "QueueConfig",
    "new",
    "QueueMessage",
    "SimpleQueue",
]
