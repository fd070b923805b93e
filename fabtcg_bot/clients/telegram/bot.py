"""Telegram bot core - handler registration and lifecycle management."""

from collections.abc import Iterable
from datetime import UTC, datetime

from fabtcg_bot.clients.telegram.commands import BotCommands
from fabtcg_bot.clients.telegram.constants import (
    CMD_ABOUT,
    CMD_HELP,
    CMD_ID,
    CMD_START,
    CMD_STOP,
)
from fabtcg_bot.clients.telegram.decorators import message_middleware, query_middleware
from fabtcg_bot.clients.telegram.transport import TelegramTransport
from fabtcg_bot.core.allowlist import Allowlist
from fabtcg_bot.core.logging import get_logger
from fabtcg_bot.ports.cards import CardSource
from fabtcg_bot.ports.messaging import ON_INLINE_QUERY, Transport
from fabtcg_bot.ports.metrics import BotMetrics

logger = get_logger(__name__)


class FabTCGBot:
    """The Flesh and Blood card bot.

    Wires the command handlers through the dispatch middleware into the
    transport and runs the transport's receive loop.

    Attributes:
        allowlist: Users allowed to use the bot. Fixed at construction.
        start_time: When the bot was built.
        revision: Source revision the process was built from.
    """

    def __init__(
        self,
        cards: CardSource,
        transport: Transport,
        metrics: BotMetrics,
        *,
        allowlist: Iterable[int] = (),
        start_time: datetime | None = None,
        revision: str = "",
    ) -> None:
        self._cards = cards
        self._transport = transport
        self._metrics = metrics
        self.allowlist = Allowlist(allowlist)
        self.start_time = start_time or datetime.now(UTC)
        self.revision = revision
        self.commands = BotCommands(transport, cards)
        self._registered = False

    def register_handlers(self) -> None:
        """Register every command and the inline query handler once."""
        if self._registered:
            return

        def wrap(handler):
            return message_middleware(handler, allowlist=self.allowlist, metrics=self._metrics)

        self._transport.handle(CMD_START, wrap(self.commands.handle_start))
        self._transport.handle(CMD_STOP, wrap(self.commands.handle_stop))
        self._transport.handle(CMD_HELP, wrap(self.commands.handle_help))
        self._transport.handle(CMD_ABOUT, wrap(self.commands.handle_about))
        self._transport.handle(CMD_ID, wrap(self.commands.handle_id))

        self._transport.handle(
            ON_INLINE_QUERY,
            query_middleware(
                self.commands.handle_inline_query,
                allowlist=self.allowlist,
                metrics=self._metrics,
            ),
        )
        self._registered = True

    async def run(self) -> None:
        """Register handlers and receive updates until stopped or cancelled."""
        self.register_handlers()
        logger.info("bot_running", allowlist_size=len(self.allowlist))
        await self._transport.start()

    async def stop(self) -> None:
        """Stop the receive loop."""
        await self._transport.stop()


def create_bot(
    cards: CardSource,
    token: str,
    metrics: BotMetrics,
    **kwargs,
) -> FabTCGBot:
    """Create a bot talking to Telegram with ``token``.

    Args:
        cards: Card source used by the inline query handler.
        token: Telegram bot token.
        metrics: Metrics backend.
        **kwargs: Passed to FabTCGBot (allowlist, start_time, revision).

    Raises:
        telegram.error.InvalidToken: If the token is empty.
    """
    transport = TelegramTransport(token)
    return FabTCGBot(cards, transport, metrics, **kwargs)
