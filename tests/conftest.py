"""Shared pytest fixtures for fabtcg-bot tests."""

import pytest

from fabtcg_bot.core.allowlist import Allowlist
from tests.mocks import MockCardSource, MockMetrics, MockTransport, make_card


@pytest.fixture
def transport() -> MockTransport:
    """Provide a recording transport."""
    return MockTransport()


@pytest.fixture
def metrics() -> MockMetrics:
    """Provide recording metrics."""
    return MockMetrics()


@pytest.fixture
def cards() -> MockCardSource:
    """Provide a card source returning three cards."""
    return MockCardSource(cards=[make_card(i) for i in range(3)])


@pytest.fixture
def open_allowlist() -> Allowlist:
    """Provide an empty allowlist, which permits everyone."""
    return Allowlist()


@pytest.fixture
def admin_allowlist() -> Allowlist:
    """Provide an allowlist containing only user 42."""
    return Allowlist([42])
