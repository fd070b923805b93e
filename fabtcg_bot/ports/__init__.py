"""Ports (interfaces) for the application.

This module contains Protocol definitions that define the boundaries between
the bot core and external systems (the card API, the chat transport and the
metrics backend), together with the platform-agnostic data they exchange.
"""

from fabtcg_bot.ports.cards import (
    Card,
    CardSet,
    CardSource,
    Printing,
    SearchLinks,
    SearchMeta,
    SearchResponse,
    Sku,
)
from fabtcg_bot.ports.messaging import (
    ON_INLINE_QUERY,
    Chat,
    InlineQuery,
    InlineQueryCallback,
    InlineResult,
    Message,
    MessageCallback,
    Transport,
    User,
)
from fabtcg_bot.ports.metrics import (
    INLINE_QUERY_EVENT_TYPE,
    MESSAGE_EVENT_TYPE,
    BotMetrics,
)

__all__ = [
    # Data classes
    "Card",
    "CardSet",
    "Chat",
    "InlineQuery",
    "InlineResult",
    "Message",
    "Printing",
    "SearchLinks",
    "SearchMeta",
    "SearchResponse",
    "Sku",
    "User",
    # Protocols
    "BotMetrics",
    "CardSource",
    "Transport",
    # Callbacks and constants
    "INLINE_QUERY_EVENT_TYPE",
    "InlineQueryCallback",
    "MESSAGE_EVENT_TYPE",
    "MessageCallback",
    "ON_INLINE_QUERY",
]
