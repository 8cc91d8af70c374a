"""PMQ Serializer - Structured Member Serialization.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from pmq.errors import MemberDecodeError


class Serializer(ABC):
    """Abstract member serializer."""

    @abstractmethod
    def serialize(self, data: Any) -> bytes:
        """Serialize data to bytes."""
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to data."""
        pass


class JSONSerializer(Serializer):
    """JSON serializer.

    Keys are sorted so that equal payloads always serialize to the same
    bytes, which matters when the bytes are used as a set member.
    """

    def serialize(self, data: Any) -> bytes:
        return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, bytes):
            raise MemberDecodeError(f"Member has invalid type {type(data).__name__}")
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MemberDecodeError(f"Member is not valid JSON: {e}") from e


__all__ = ["Serializer", "JSONSerializer"]
