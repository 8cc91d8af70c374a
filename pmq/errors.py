"""PMQ Errors - Exception Taxonomy.

Store operation errors raised by the client library (``redis.exceptions``)
are never wrapped; they reach the caller of ``put``/``get``/``ack``/``requeue``
unchanged. The types below cover the failures PMQ itself detects.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations


class PMQError(Exception):
    """Base class for PMQ errors."""


class StoreConnectionError(PMQError):
    """The store did not answer the liveness probe at construction time."""

    def __init__(self, address: str, reason: str = ""):
        self.address = address
        self.reason = reason
        message = f"Store at {address} is unreachable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MemberDecodeError(PMQError, ValueError):
    """A stored member could not be interpreted as a queue member."""


class QueueClosedError(PMQError, RuntimeError):
    """Operation attempted on a queue whose broker has been stopped."""


__all__ = [
    "PMQError",
    "StoreConnectionError",
    "MemberDecodeError",
    "QueueClosedError",
]
