"""Dispatch middleware wrapped around every Telegram handler.

Each wrapper turns a handler coroutine into the callback the transport
invokes for an inbound event. The wrappers count traffic, drop events from
bots, enforce the allowlist and never let a handler exception escape:
a failing handler is logged at warning level and the event is dropped.

Counters form a funnel. ``incoming`` counts every event before filtering,
``command`` counts messages that passed the allowlist, ``outgoing`` counts
events whose handler completed.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fabtcg_bot.clients.telegram.checks import is_permitted
from fabtcg_bot.clients.telegram.constants import MIN_INLINE_QUERY_LENGTH
from fabtcg_bot.core.allowlist import Allowlist
from fabtcg_bot.core.errors import classify_error
from fabtcg_bot.core.logging import bind_contextvars, get_logger, unbind_contextvars
from fabtcg_bot.ports.messaging import InlineQuery, Message
from fabtcg_bot.ports.metrics import (
    INLINE_QUERY_EVENT_TYPE,
    MESSAGE_EVENT_TYPE,
    BotMetrics,
)

logger = get_logger(__name__)

MessageHandler = Callable[[Message], Awaitable[None]]
InlineQueryHandler = Callable[[InlineQuery], Awaitable[None]]

_CONTEXT_KEYS = ("correlation_id", "event", "user_id")


def command_name(text: str) -> str:
    """Return the first whitespace-delimited token of ``text``."""
    parts = text.split(maxsplit=1)
    return parts[0] if parts else ""


async def _invoke(handler: Callable[[], Awaitable[None]], event_failed: str) -> bool:
    """Run a handler, logging and swallowing any exception.

    Returns:
        True if the handler completed.
    """
    try:
        await handler()
    except asyncio.CancelledError:
        raise
    except Exception as ex:
        logger.warning(
            event_failed,
            error=str(ex),
            error_type=type(ex).__name__,
            category=classify_error(ex).name,
        )
        return False
    return True


def message_middleware(
    handler: MessageHandler,
    *,
    allowlist: Allowlist,
    metrics: BotMetrics,
) -> MessageHandler:
    """Wrap a command handler.

    Args:
        handler: Coroutine handling one message. Exceptions are logged.
        allowlist: Senders allowed to use the bot.
        metrics: Counters to record the event in.

    Returns:
        The callback to register with the transport.
    """

    @functools.wraps(handler)
    async def wrapper(message: Message) -> None:
        metrics.inc_incoming(MESSAGE_EVENT_TYPE)

        sender = message.sender
        if message.is_service or sender is None or sender.is_bot:
            return

        if not is_permitted(allowlist, sender.id, message.text):
            logger.info(
                "received_message_from_forbidden_sender",
                sender_id=sender.id,
                sender_username=sender.username,
            )
            return

        command = command_name(message.text)
        metrics.inc_command(command)

        bind_contextvars(
            correlation_id=str(uuid4())[:8],
            event=command,
            user_id=sender.id,
        )
        try:
            logger.debug("received_message", text=message.text)
            completed = await _invoke(
                functools.partial(handler, message), "failed_to_handle_bot_command"
            )
        finally:
            unbind_contextvars(*_CONTEXT_KEYS)

        if completed:
            metrics.inc_outgoing(MESSAGE_EVENT_TYPE)

    return wrapper


def query_middleware(
    handler: InlineQueryHandler,
    *,
    allowlist: Allowlist,
    metrics: BotMetrics,
) -> InlineQueryHandler:
    """Wrap an inline query handler.

    Queries of MIN_INLINE_QUERY_LENGTH characters or fewer are dropped.

    Args:
        handler: Coroutine handling one inline query. Exceptions are logged.
        allowlist: Senders allowed to use the bot.
        metrics: Counters to record the event in.

    Returns:
        The callback to register with the transport.
    """

    @functools.wraps(handler)
    async def wrapper(query: InlineQuery) -> None:
        metrics.inc_incoming(INLINE_QUERY_EVENT_TYPE)

        sender = query.sender
        if sender.is_bot or len(query.text) <= MIN_INLINE_QUERY_LENGTH:
            return

        if not is_permitted(allowlist, sender.id, query.text):
            logger.info(
                "received_query_from_forbidden_sender",
                sender_id=sender.id,
                sender_username=sender.username,
            )
            return

        bind_contextvars(
            correlation_id=str(uuid4())[:8],
            event=INLINE_QUERY_EVENT_TYPE,
            user_id=sender.id,
        )
        try:
            logger.debug("received_inline_query", text=query.text)
            completed = await _invoke(
                functools.partial(handler, query), "failed_to_handle_inline_query"
            )
        finally:
            unbind_contextvars(*_CONTEXT_KEYS)

        if completed:
            metrics.inc_outgoing(INLINE_QUERY_EVENT_TYPE)

    return wrapper
