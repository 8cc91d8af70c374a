"""PMQ Protocol Module - Member Encoding.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from pmq.protocol.codec import PREFIX_LENGTH, Member, MemberCodec, default_codec
from pmq.protocol.serializer import Serializer, JSONSerializer

__all__ = [
    "PREFIX_LENGTH",
    "Member",
    "MemberCodec",
    "default_codec",
    "Serializer",
    "JSONSerializer",
]
