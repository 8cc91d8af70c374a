"""PMQ Redis Backend - Sorted-Set Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import redis

from pmq.storage.backend import MemberLike, OrderedSetStore

logger = logging.getLogger(__name__)


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts. The port defaults to 6379."""
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, 6379
    if not port.isdigit():
        raise ValueError(f"Invalid store address {address!r}")
    return host or "localhost", int(port)


class RedisStore(OrderedSetStore):
    """Redis sorted sets as an ordered-set store.

    Redis errors are not caught here; they reach the caller as raised by
    redis-py.
    """

    def __init__(
        self,
        address: str = "localhost:6379",
        db: int = 0,
        password: Optional[str] = None,
        client: Optional[redis.Redis] = None,
    ):
        self.address = address
        self.db = db
        self.password = password
        self._client = client

    def _connect(self) -> redis.Redis:
        """Lazy connect to Redis."""
        if self._client is None:
            if "://" in self.address:
                self._client = redis.Redis.from_url(
                    self.address,
                    db=self.db,
                    password=self.password,
                )
            else:
                host, port = parse_address(self.address)
                self._client = redis.Redis(
                    host=host,
                    port=port,
                    db=self.db,
                    password=self.password,
                )
            logger.debug(f"Redis client created for {self.address} db={self.db}")
        return self._client

    @property
    def client(self) -> redis.Redis:
        return self._connect()

    def ping(self) -> bool:
        return bool(self._connect().ping())

    def add(self, name: str, mapping: Dict[MemberLike, float]) -> int:
        return self._connect().zadd(name, mapping)

    def range_with_scores(
        self,
        name: str,
        start: int,
        stop: int,
        reverse: bool = False,
    ) -> List[Tuple[bytes, float]]:
        rows = self._connect().zrange(name, start, stop, desc=reverse, withscores=True)
        return [(member, float(score)) for member, score in rows]

    def remove(self, name: str, member: MemberLike) -> int:
        return self._connect().zrem(name, member)

    def count(self, name: str) -> int:
        return self._connect().zcard(name)

    def delete(self, name: str) -> bool:
        return self._connect().delete(name) > 0

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


__all__ = ["RedisStore", "parse_address"]
