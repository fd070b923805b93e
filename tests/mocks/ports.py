"""Mock implementations of the bot's ports for testing.

These mocks implement the Transport, CardSource and BotMetrics protocols
defined in fabtcg_bot/ports/. They record every call so tests can assert on
what the bot sent without a Telegram connection or network access.
"""

import asyncio
from collections import Counter
from collections.abc import Sequence

from fabtcg_bot.core.errors import RemoteAPIError
from fabtcg_bot.ports.cards import Card
from fabtcg_bot.ports.messaging import (
    InlineQueryCallback,
    InlineResult,
    MessageCallback,
)


class MockTransport:
    """Mock implementation of the Transport protocol.

    Attributes:
        handlers: Registered callbacks keyed by trigger.
        sent: ``(chat_id, text)`` for every send call.
        answers: ``(query_id, results, cache_time)`` for every answer call.
        send_error: If set, raised by ``send``.
        answer_error: If set, raised by ``answer``.

    Example:
        >>> transport = MockTransport()
        >>> await transport.send(42, "hi")
        >>> assert transport.sent == [(42, "hi")]
    """

    def __init__(self) -> None:
        self.handlers: dict[str, MessageCallback | InlineQueryCallback] = {}
        self.sent: list[tuple[int, str]] = []
        self.answers: list[tuple[str, list[InlineResult], int]] = []
        self.send_error: Exception | None = None
        self.answer_error: Exception | None = None
        self.started = asyncio.Event()
        self.stopped = asyncio.Event()
        self.stop_calls = 0

    def handle(self, trigger: str, callback: MessageCallback | InlineQueryCallback) -> None:
        self.handlers[trigger] = callback

    async def start(self) -> None:
        self.started.set()
        await self.stopped.wait()

    async def stop(self) -> None:
        self.stop_calls += 1
        self.stopped.set()

    async def send(self, chat_id: int, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((chat_id, text))

    async def answer(
        self,
        query_id: str,
        results: Sequence[InlineResult],
        cache_time: int,
    ) -> None:
        if self.answer_error is not None:
            raise self.answer_error
        self.answers.append((query_id, list(results), cache_time))


class MockCardSource:
    """Mock implementation of the CardSource protocol.

    Attributes:
        cards: Cards returned by ``list_cards``. An empty list raises
            RemoteAPIError, like the real client.
        error: If set, raised by every lookup.
        queries: Queries passed to ``list_cards``.
    """

    def __init__(self, cards: list[Card] | None = None, error: Exception | None = None) -> None:
        self.cards = cards or []
        self.error = error
        self.queries: list[str] = []
        self.identifiers: list[str] = []

    async def list_cards(self, query: str, *, timeout: float | None = None) -> list[Card]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        if not self.cards:
            raise RemoteAPIError("JSON response does not have any card fields")
        return list(self.cards)

    async def get_card(self, identifier: str, *, timeout: float | None = None) -> Card:
        self.identifiers.append(identifier)
        if self.error is not None:
            raise self.error
        for card in self.cards:
            if card.identifier == identifier.lower():
                return card
        raise RemoteAPIError("HTTP response with status code 404", status_code=404)


class MockMetrics:
    """Mock implementation of the BotMetrics protocol backed by Counters."""

    def __init__(self) -> None:
        self.commands: Counter[str] = Counter()
        self.incoming: Counter[str] = Counter()
        self.outgoing: Counter[str] = Counter()

    def inc_command(self, command: str) -> None:
        self.commands[command] += 1

    def inc_incoming(self, event_type: str) -> None:
        self.incoming[event_type] += 1

    def inc_outgoing(self, event_type: str) -> None:
        self.outgoing[event_type] += 1
