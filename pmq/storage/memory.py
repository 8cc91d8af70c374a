"""PMQ Memory Backend - In-Process Ordered Sets.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Dict, List, Tuple

from pmq.storage.backend import MemberLike, OrderedSetStore


def _as_bytes(member: MemberLike) -> bytes:
    if isinstance(member, str):
        return member.encode("utf-8")
    return bytes(member)


class MemoryStore(OrderedSetStore):
    """In-memory store with Redis sorted-set semantics."""

    def __init__(self):
        self._storage: Dict[str, Dict[bytes, float]] = defaultdict(dict)
        self._lock = threading.RLock()

    def ping(self) -> bool:
        return True

    def add(self, name: str, mapping: Dict[MemberLike, float]) -> int:
        with self._lock:
            collection = self._storage[name]
            added = 0
            for member, score in mapping.items():
                key = _as_bytes(member)
                if key not in collection:
                    added += 1
                collection[key] = float(score)
            return added

    def _sorted(self, name: str) -> List[Tuple[bytes, float]]:
        items = self._storage.get(name, {}).items()
        return sorted(items, key=lambda item: (item[1], item[0]))

    def range_with_scores(
        self,
        name: str,
        start: int,
        stop: int,
        reverse: bool = False,
    ) -> List[Tuple[bytes, float]]:
        with self._lock:
            items = self._sorted(name)
            if reverse:
                items.reverse()

            size = len(items)
            if start < 0:
                start = max(size + start, 0)
            if stop < 0:
                stop = size + stop
            if start >= size or start > stop:
                return []
            return items[start:min(stop, size - 1) + 1]

    def remove(self, name: str, member: MemberLike) -> int:
        with self._lock:
            collection = self._storage.get(name)
            if collection is None:
                return 0
            if collection.pop(_as_bytes(member), None) is None:
                return 0
            if not collection:
                del self._storage[name]
            return 1

    def count(self, name: str) -> int:
        with self._lock:
            return len(self._storage.get(name, {}))

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._storage.pop(name, None) is not None


__all__ = ["MemoryStore"]
