"""PMQ Storage Backend - Ordered-Set Store Interface.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Union

MemberLike = Union[bytes, str]


class OrderedSetStore(ABC):
    """Named collections of unique members, each carrying a float score.

    Members come back from reads as ``bytes``. Within a collection members
    are ordered by score ascending, then by member bytes.
    """

    @abstractmethod
    def ping(self) -> bool:
        """Probe the store. Raises if it cannot be reached."""
        pass

    @abstractmethod
    def add(self, name: str, mapping: Dict[MemberLike, float]) -> int:
        """Insert or re-score members atomically.

        Returns:
            Number of members that were newly added
        """
        pass

    @abstractmethod
    def range_with_scores(
        self,
        name: str,
        start: int,
        stop: int,
        reverse: bool = False,
    ) -> List[Tuple[bytes, float]]:
        """Read members by rank, ``stop`` inclusive.

        Negative indices count from the end, as in Redis ``ZRANGE``.
        ``reverse`` reads from the highest score down.
        """
        pass

    @abstractmethod
    def remove(self, name: str, member: MemberLike) -> int:
        """Remove one member. Removing an absent member returns 0."""
        pass

    @abstractmethod
    def count(self, name: str) -> int:
        """Number of members in a collection."""
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Drop a whole collection."""
        pass

    def close(self) -> None:
        """Close the store connection."""
        pass


__all__ = ["OrderedSetStore", "MemberLike"]
