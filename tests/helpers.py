"""
Test doubles and helpers shared across the PMQ test suite.
"""

import threading
from typing import Optional

from pmq import MemoryStore, MemberCodec
from pmq.storage.backend import MemberLike


class FlakyStore(MemoryStore):
    """MemoryStore whose writes can be made to fail on demand."""

    def __init__(self):
        super().__init__()
        self.fail_add: Optional[Exception] = None
        self.fail_range: Optional[Exception] = None
        self.fail_remove_after: Optional[int] = None
        self.remove_error: Exception = ConnectionError("store went away")
        self.remove_calls = 0
        self.range_calls = 0

    def add(self, name, mapping):
        if self.fail_add is not None:
            raise self.fail_add
        return super().add(name, mapping)

    def range_with_scores(self, name, start, stop, reverse=False):
        self.range_calls += 1
        if self.fail_range is not None:
            raise self.fail_range
        return super().range_with_scores(name, start, stop, reverse=reverse)

    def remove(self, name, member: MemberLike) -> int:
        with self._lock:
            if self.fail_remove_after is not None and self.remove_calls >= self.fail_remove_after:
                raise self.remove_error
            self.remove_calls += 1
        return super().remove(name, member)


class SlowRemoveStore(MemoryStore):
    """Records how many removals overlap in time."""

    def __init__(self, delay: float = 0.002):
        super().__init__()
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._counter_lock = threading.Lock()

    def remove(self, name, member):
        with self._counter_lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            threading.Event().wait(self.delay)
            return super().remove(name, member)
        finally:
            with self._counter_lock:
                self.in_flight -= 1


def all_members(store, name):
    """Full ascending range of a collection."""
    return store.range_with_scores(name, 0, -1)


def all_bodies(store, name):
    return [MemberCodec.decode(member) for member, _ in all_members(store, name)]


