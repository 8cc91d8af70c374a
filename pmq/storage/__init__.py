"""PMQ Storage Module - Ordered-Set Stores.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from pmq.storage.backend import OrderedSetStore
from pmq.storage.memory import MemoryStore
from pmq.storage.redis import RedisStore

__all__ = ["OrderedSetStore", "MemoryStore", "RedisStore"]
