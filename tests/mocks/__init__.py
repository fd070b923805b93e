"""Mock implementations for testing."""

from tests.mocks.factories import make_card, make_message, make_query
from tests.mocks.ports import MockCardSource, MockMetrics, MockTransport

__all__ = [
    "MockCardSource",
    "MockMetrics",
    "MockTransport",
    "make_card",
    "make_message",
    "make_query",
]
