"""PMQ Message - Prioritized Queue Messages.

This module defines the message pairing handed to consumers: a store
member plus the priority recovered from its score.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Union

from pmq.protocol.codec import Member, MemberCodec


def score_for(priority: float) -> float:
    """Store score for a priority.

    Scores are the negated priority so that the store's ascending order
    delivers the highest priority first.
    """
    return -float(priority)


def priority_for(score: float) -> float:
    """Priority recovered from a store score."""
    return -float(score)


@dataclass
class PrioritizedMessage:
    """A queued message and its priority.

    Attributes:
        member: Composite (timestamp, body) store member
        priority: Delivery priority, higher first
    """

    member: Member
    priority: float = 0.0

    @classmethod
    def from_store(cls, raw: Union[bytes, str], score: float) -> "PrioritizedMessage":
        """Build from a member/score pair read from the store.

        Raises:
            MemberDecodeError: If the member is malformed
        """
        return cls(member=Member.unpack(raw), priority=priority_for(score))

    @property
    def body(self) -> bytes:
        return self.member.body

    @property
    def timestamp(self) -> int:
        return self.member.timestamp

    def add_priority(self, delta: float) -> None:
        """Raise (or lower, with a negative delta) the priority before a requeue."""
        self.priority += delta

    def to_score(self) -> float:
        return score_for(self.priority)

    def to_entry(self) -> tuple:
        """``(packed member, score)`` as written to the store."""
        return self.member.pack(), self.to_score()

    def refreshed(self, codec: MemberCodec) -> "PrioritizedMessage":
        """Copy with the same body and priority under a fresh timestamp."""
        return PrioritizedMessage(member=self.member.refresh(codec), priority=self.priority)

    def __repr__(self) -> str:
        return (
            f"PrioritizedMessage(body={self.body!r}, priority={self.priority}, "
            f"timestamp={self.timestamp})"
        )


def members_of(messages: Iterable[PrioritizedMessage]) -> List[bytes]:
    """Packed store members of ``messages``, in order."""
    return [message.member.pack() for message in messages]


__all__ = [
    "PrioritizedMessage",
    "members_of",
    "score_for",
    "priority_for",
]
