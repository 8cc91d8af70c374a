"""PMQ Broker Module - Store Gateway and Acknowledgment Worker.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from pmq.broker.broker import AckRequest, Broker, BrokerState, BrokerStats

__all__ = ["AckRequest", "Broker", "BrokerState", "BrokerStats"]
