"""
Tests for the member codec and message priority/score mapping.
"""

import itertools

import pytest

from pmq import MemberDecodeError
from pmq.protocol.codec import PREFIX_LENGTH, Member, MemberCodec
from pmq.queue.message import PrioritizedMessage, priority_for, score_for


def fixed_clock(*values):
    it = iter(values)
    return lambda: next(it)


# ============================================================================
# Member Wire Format
# ============================================================================

class TestMember:
    """Member packing and unpacking."""

    def test_pack_layout(self):
        member = Member(timestamp=1700000000123456, body=b"payload")
        assert member.pack() == b"1700000000123456payload"

    def test_prefix_is_left_padded(self):
        packed = Member(timestamp=42, body=b"x").pack()
        assert packed[:PREFIX_LENGTH] == b"0000000000000042"
        assert len(packed) == PREFIX_LENGTH + 1

    def test_unpack_strips_exactly_the_prefix(self):
        member = Member.unpack(b"0000000000000042" + b"123abc")
        assert member.timestamp == 42
        assert member.body == b"123abc"

    def test_unpack_accepts_str(self):
        member = Member.unpack("1700000000123456hello")
        assert member.body == b"hello"

    def test_empty_body(self):
        member = Member.unpack(Member(timestamp=7, body=b"").pack())
        assert member.body == b""

    def test_body_with_leading_digits_survives(self):
        body = b"9999999999999999 not a timestamp"
        assert Member.unpack(Member(timestamp=1, body=body).pack()).body == body

    def test_binary_body_survives(self):
        body = bytes(range(256))
        assert Member.unpack(Member(timestamp=1, body=body).pack()).body == body

    def test_timestamp_too_wide_rejected(self):
        with pytest.raises(ValueError):
            Member(timestamp=10 ** PREFIX_LENGTH, body=b"")

    def test_short_member_rejected(self):
        with pytest.raises(MemberDecodeError):
            Member.unpack(b"12345")

    def test_non_numeric_prefix_rejected(self):
        with pytest.raises(MemberDecodeError):
            Member.unpack(b"not-a-timestamp!body")

    def test_wrong_type_rejected(self):
        with pytest.raises(MemberDecodeError):
            Member.unpack(12345678901234567)

    def test_ordering_matches_packed_order(self):
        members = [
            Member(timestamp=5, body=b"b"),
            Member(timestamp=5, body=b"a"),
            Member(timestamp=100, body=b"a"),
            Member(timestamp=9, body=b"z"),
        ]
        by_value = sorted(members)
        by_bytes = sorted(members, key=lambda m: m.pack())
        assert by_value == by_bytes


# ============================================================================
# Codec
# ============================================================================

class TestMemberCodec:
    """Fresh timestamps and round trips."""

    def test_encode_uses_clock(self):
        codec = MemberCodec(clock=fixed_clock(1000))
        member = codec.encode(b"body")
        assert member.timestamp == 1000
        assert member.body == b"body"

    def test_str_body_is_utf8_encoded(self):
        codec = MemberCodec(clock=fixed_clock(1))
        assert codec.encode("héllo").body == "héllo".encode("utf-8")

    def test_rejects_non_bytes_body(self):
        with pytest.raises(TypeError):
            MemberCodec().encode(123)

    def test_timestamps_strictly_increase_when_clock_stalls(self):
        codec = MemberCodec(clock=lambda: 500)
        stamps = [codec.encode(b"x").timestamp for _ in range(5)]
        assert stamps == [500, 501, 502, 503, 504]

    def test_timestamps_strictly_increase_when_clock_steps_back(self):
        codec = MemberCodec(clock=fixed_clock(1000, 900, 1500))
        stamps = [codec.encode(b"x").timestamp for _ in range(3)]
        assert stamps == [1000, 1001, 1500]

    def test_reencoding_same_body_gives_distinct_member(self):
        codec = MemberCodec()
        first = codec.encode_member(b"same")
        second = codec.encode_member(b"same")
        assert first != second
        assert second > first

    def test_refresh_keeps_body(self):
        codec = MemberCodec(clock=fixed_clock(10, 20))
        original = codec.encode(b"job")
        refreshed = original.refresh(codec)
        assert refreshed.body == b"job"
        assert refreshed.timestamp == 20

    @pytest.mark.parametrize("body", [b"", b"a", b"consumer_get_data_000", "text", b"\x00\xff"])
    def test_round_trip(self, body):
        codec = MemberCodec()
        expected = body.encode("utf-8") if isinstance(body, str) else body
        assert MemberCodec.decode(codec.encode_member(body)) == expected

    def test_real_clock_fits_prefix(self):
        packed = MemberCodec().encode_member(b"x")
        assert packed[:PREFIX_LENGTH].isdigit()


# ============================================================================
# Priority <-> Score
# ============================================================================

class TestScore:
    """score == -priority."""

    @pytest.mark.parametrize("priority", [0.0, 1.0, -1.0, 2.5, 1e9, -3.75])
    def test_score_is_negated_priority(self, priority):
        assert score_for(priority) == -priority
        assert priority_for(score_for(priority)) == priority

    def test_higher_priority_sorts_first_by_score(self):
        priorities = [3.0, -1.0, 10.0, 0.0]
        ordered = sorted(priorities, key=score_for)
        assert ordered == [10.0, 3.0, 0.0, -1.0]

    def test_message_round_trip_through_store_entry(self):
        codec = MemberCodec()
        message = PrioritizedMessage(member=codec.encode(b"body"), priority=4.5)
        raw, score = message.to_entry()
        restored = PrioritizedMessage.from_store(raw, score)
        assert restored.body == b"body"
        assert restored.priority == 4.5
        assert restored.timestamp == message.timestamp

    def test_add_priority(self):
        message = PrioritizedMessage(member=Member(timestamp=1, body=b"x"), priority=1.0)
        message.add_priority(2.5)
        message.add_priority(-0.5)
        assert message.priority == 3.0
        assert message.to_score() == -3.0

    def test_refreshed_keeps_priority(self):
        codec = MemberCodec(clock=itertools.count(1).__next__)
        message = PrioritizedMessage(member=codec.encode(b"x"), priority=7.0)
        copy = message.refreshed(codec)
        assert copy.priority == 7.0
        assert copy.body == b"x"
        assert copy.timestamp > message.timestamp
