"""PMQ Member Codec - Timestamp-Prefixed Store Members.

A queue member is the pair ``(timestamp, body)``. The timestamp is the
wall-clock time in microseconds at encode time and only breaks ties between
messages of equal priority; the priority itself lives in the store score.

Wire layout of a member::

    +------------------------------+----------------------+
    | timestamp (16 ASCII digits)  | body (raw bytes)     |
    +------------------------------+----------------------+

The prefix is zero-padded to a fixed width so that byte-wise (store) order
and numeric order of timestamps agree.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from pmq.errors import MemberDecodeError

PREFIX_LENGTH = 16
MAX_TIMESTAMP = 10 ** PREFIX_LENGTH - 1


def now_micros() -> int:
    """Current wall-clock time in microseconds since the epoch."""
    return time.time_ns() // 1000


def to_bytes(body: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """Coerce a message body to bytes. Strings are UTF-8 encoded."""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    raise TypeError(f"Message body must be bytes or str, not {type(body).__name__}")


@dataclass(frozen=True, order=True)
class Member:
    """Composite store member ordered by ``(timestamp, body)``.

    Attributes:
        timestamp: Microseconds since the epoch at encode time
        body: Message payload
    """

    timestamp: int = field(compare=True)
    body: bytes = field(compare=True)

    def __post_init__(self):
        if not 0 <= self.timestamp <= MAX_TIMESTAMP:
            raise ValueError(
                f"Timestamp {self.timestamp} does not fit in {PREFIX_LENGTH} digits"
            )

    def pack(self) -> bytes:
        """Encode to the store's member representation."""
        return f"{self.timestamp:0{PREFIX_LENGTH}d}".encode("ascii") + self.body

    @classmethod
    def unpack(cls, raw: Union[bytes, str]) -> "Member":
        """Decode a member read back from the store.

        Raises:
            MemberDecodeError: If ``raw`` was not produced by :meth:`pack`
        """
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        elif not isinstance(raw, bytes):
            raise MemberDecodeError(
                f"Member has invalid type {type(raw).__name__}"
            )

        if len(raw) < PREFIX_LENGTH:
            raise MemberDecodeError(
                f"Member is {len(raw)} bytes, shorter than the {PREFIX_LENGTH}-byte prefix"
            )

        prefix = raw[:PREFIX_LENGTH]
        if not prefix.isdigit():
            raise MemberDecodeError(f"Member prefix {prefix!r} is not a timestamp")

        return cls(timestamp=int(prefix), body=raw[PREFIX_LENGTH:])

    def refresh(self, codec: "MemberCodec") -> "Member":
        """Same body under a fresh timestamp."""
        return codec.encode(self.body)


class MemberCodec:
    """Stamps message bodies with fresh, strictly increasing timestamps.

    Timestamps come from the wall clock. When the clock has not moved past
    the last issued value (same microsecond, or the clock stepped back) the
    last value plus one is used instead, so every member issued by one codec
    is later than the previous one.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or now_micros
        self._last = 0
        self._lock = threading.Lock()

    def next_timestamp(self) -> int:
        with self._lock:
            ts = self._clock()
            if ts <= self._last:
                ts = self._last + 1
            self._last = ts
            return ts

    def encode(self, body: Union[bytes, str]) -> Member:
        """Wrap ``body`` in a member carrying a fresh timestamp."""
        return Member(timestamp=self.next_timestamp(), body=to_bytes(body))

    def encode_member(self, body: Union[bytes, str]) -> bytes:
        """Encode straight to the wire form."""
        return self.encode(body).pack()

    @staticmethod
    def decode(raw: Union[bytes, str]) -> bytes:
        """Strip the timestamp prefix and return the body."""
        return Member.unpack(raw).body


_default_codec = MemberCodec()


def default_codec() -> MemberCodec:
    """Process-wide codec shared by queues that are not given their own."""
    return _default_codec


__all__ = [
    "PREFIX_LENGTH",
    "Member",
    "MemberCodec",
    "default_codec",
    "now_micros",
    "to_bytes",
]
