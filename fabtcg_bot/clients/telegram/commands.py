"""Telegram command and inline query handlers."""

from fabtcg_bot.clients.telegram.constants import (
    CARD_SEARCH_TIMEOUT,
    INLINE_CACHE_TIME,
    RESPONSE_ABOUT,
    RESPONSE_HELP,
    RESPONSE_ID,
    RESPONSE_START,
    RESPONSE_STOP,
)
from fabtcg_bot.core.logging import get_logger
from fabtcg_bot.ports.cards import Card, CardSource
from fabtcg_bot.ports.messaging import InlineQuery, InlineResult, Message, Transport

logger = get_logger(__name__)


def card_to_inline_result(index: int, card: Card) -> InlineResult:
    """Build the photo result shown for ``card`` at position ``index``."""
    return InlineResult(
        result_id=str(index),
        title=card.name,
        description=card.text,
        photo_url=card.image,
        thumbnail_url=card.image,
    )


class BotCommands:
    """Handlers for every command the bot understands.

    Handlers share no state; each one answers a single event through the
    transport and raises on failure. Error handling is left to the dispatch
    middleware.
    """

    def __init__(self, transport: Transport, cards: CardSource) -> None:
        self._transport = transport
        self._cards = cards

    def _log_command(self, command: str, message: Message) -> None:
        sender = message.sender
        logger.info(
            "user_executed_command",
            command=command,
            username=sender.username if sender else None,
            user_id=sender.id if sender else None,
        )

    async def handle_start(self, message: Message) -> None:
        """Greet the sender in a direct message."""
        assert message.sender is not None, "Command must have a sender"
        self._log_command("start", message)
        await self._transport.send(
            message.sender.id, RESPONSE_START.format(name=message.sender.first_name)
        )

    async def handle_stop(self, message: Message) -> None:
        """Say goodbye to the sender in a direct message."""
        assert message.sender is not None, "Command must have a sender"
        self._log_command("stop", message)
        await self._transport.send(
            message.sender.id, RESPONSE_STOP.format(name=message.sender.first_name)
        )

    async def handle_help(self, message: Message) -> None:
        self._log_command("help", message)
        await self._transport.send(message.chat.id, RESPONSE_HELP)

    async def handle_about(self, message: Message) -> None:
        self._log_command("about", message)
        await self._transport.send(message.chat.id, RESPONSE_ABOUT)

    async def handle_id(self, message: Message) -> None:
        """Tell the sender their Telegram id.

        Only answers in private chats; in groups the command is ignored.
        """
        assert message.sender is not None, "Command must have a sender"
        self._log_command("id", message)
        if not message.is_private:
            return
        await self._transport.send(
            message.chat.id, RESPONSE_ID.format(user_id=message.sender.id)
        )

    async def handle_inline_query(self, query: InlineQuery) -> None:
        """Search cards for the query text and answer with one photo per card.

        A failed search sends no answer; the query times out on the client.
        """
        try:
            cards = await self._cards.list_cards(query.text, timeout=CARD_SEARCH_TIMEOUT)
        except Exception as ex:
            logger.warning(
                "failed_to_query_cards",
                sender_id=query.sender.id,
                query=query.text,
                error=str(ex),
            )
            raise

        results = [card_to_inline_result(i, card) for i, card in enumerate(cards)]

        try:
            await self._transport.answer(query.id, results, cache_time=INLINE_CACHE_TIME)
        except Exception as ex:
            logger.warning(
                "failed_to_send_query_response",
                sender_id=query.sender.id,
                query=query.text,
                error=str(ex),
            )
            raise
