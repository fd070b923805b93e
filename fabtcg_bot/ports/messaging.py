"""Messaging protocol between the bot core and the chat transport.

Inbound events and outbound results are plain dataclasses with no
python-telegram-bot types, so the dispatch middleware and the handlers can
be exercised without a Telegram connection.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

# Trigger used to register the inline query callback with Transport.handle
ON_INLINE_QUERY = "\ainline_query"

PRIVATE_CHAT = "private"


@dataclass(frozen=True)
class User:
    """Sender of a message or inline query."""

    id: int
    is_bot: bool = False
    username: str | None = None
    first_name: str = ""


@dataclass(frozen=True)
class Chat:
    """Chat a message was posted in."""

    id: int
    type: str = PRIVATE_CHAT


@dataclass(frozen=True)
class Message:
    """An inbound chat message.

    Attributes:
        text: Message text, empty for non-text messages.
        sender: The author, or None for anonymous channel posts.
        chat: The chat the message was posted in.
        is_service: True for service messages (member joined, pinned
            message, chat title changed, ...).
    """

    text: str
    sender: User | None
    chat: Chat
    is_service: bool = False

    @property
    def is_private(self) -> bool:
        """Whether the message was sent in a one-to-one chat."""
        return self.chat.type == PRIVATE_CHAT


@dataclass(frozen=True)
class InlineQuery:
    """An inline query typed as ``@bot <text>`` in any chat."""

    id: str
    text: str
    sender: User


@dataclass(frozen=True)
class InlineResult:
    """A photo-style result offered in answer to an inline query."""

    result_id: str
    title: str
    description: str
    photo_url: str
    thumbnail_url: str


MessageCallback = Callable[[Message], Awaitable[None]]
InlineQueryCallback = Callable[[InlineQuery], Awaitable[None]]


class Transport(Protocol):
    """Protocol for the chat transport the bot runs on."""

    async def start(self) -> None:
        """Start receiving updates. Returns once ``stop`` was called."""
        ...

    async def stop(self) -> None:
        """Stop receiving updates."""
        ...

    async def send(self, chat_id: int, text: str) -> None:
        """Send a text message to a user or chat."""
        ...

    async def answer(
        self,
        query_id: str,
        results: Sequence[InlineResult],
        cache_time: int,
    ) -> None:
        """Answer an inline query."""
        ...

    def handle(
        self,
        trigger: str,
        callback: MessageCallback | InlineQueryCallback,
    ) -> None:
        """Register a callback for a command (``"/start"``) or ON_INLINE_QUERY."""
        ...
