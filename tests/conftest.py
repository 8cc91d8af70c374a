"""
Shared fixtures for the PMQ test suite.

Queues run over an in-memory store unless a test says otherwise.
"""

import pytest

from pmq import MemberCodec, MessageQueue

from tests.helpers import FlakyStore


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def codec():
    return MemberCodec()


@pytest.fixture
def mq(store, codec):
    queue = MessageQueue(store, "test_mq", codec=codec)
    yield queue
    queue.close()
