"""python-telegram-bot implementation of the Transport protocol.

Converts Telegram updates into the platform-agnostic events defined in
fabtcg_bot/ports/messaging.py and runs the long polling loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import telegram
from telegram import InlineQueryResultPhoto, Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    InlineQueryHandler,
    filters,
)

from fabtcg_bot.clients.telegram.constants import POLL_TIMEOUT
from fabtcg_bot.core.logging import get_logger
from fabtcg_bot.ports.messaging import (
    ON_INLINE_QUERY,
    Chat,
    InlineQuery,
    InlineQueryCallback,
    InlineResult,
    Message,
    MessageCallback,
    User,
)

logger = get_logger(__name__)

# Message attributes that mark a service message
_SERVICE_ATTRIBUTES = (
    "new_chat_members",
    "left_chat_member",
    "new_chat_title",
    "new_chat_photo",
    "delete_chat_photo",
    "group_chat_created",
    "supergroup_chat_created",
    "channel_chat_created",
    "migrate_to_chat_id",
    "migrate_from_chat_id",
    "pinned_message",
)


def user_from_telegram(user: telegram.User | None) -> User | None:
    if user is None:
        return None
    return User(
        id=user.id,
        is_bot=user.is_bot,
        username=user.username,
        first_name=user.first_name,
    )


def is_service_message(message: telegram.Message) -> bool:
    """Whether ``message`` announces a chat event rather than carrying content."""
    return any(getattr(message, attr, None) for attr in _SERVICE_ATTRIBUTES)


def message_from_telegram(message: telegram.Message) -> Message:
    return Message(
        text=message.text or "",
        sender=user_from_telegram(message.from_user),
        chat=Chat(id=message.chat.id, type=message.chat.type),
        is_service=is_service_message(message),
    )


def inline_query_from_telegram(query: telegram.InlineQuery) -> InlineQuery:
    sender = user_from_telegram(query.from_user)
    assert sender is not None, "Inline queries always have a sender"
    return InlineQuery(id=query.id, text=query.query, sender=sender)


def result_to_telegram(result: InlineResult) -> InlineQueryResultPhoto:
    return InlineQueryResultPhoto(
        id=result.result_id,
        photo_url=result.photo_url,
        thumbnail_url=result.thumbnail_url,
        title=result.title,
        description=result.description,
    )


class TelegramTransport:
    """Telegram transport backed by a python-telegram-bot Application.

    Attributes:
        application: The underlying Application. Handlers registered with
            ``handle`` are added to it.
    """

    def __init__(
        self,
        token: str | None = None,
        application: Application | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            token: Bot token. Ignored when ``application`` is given.
            application: Prebuilt Application, mainly for tests.

        Raises:
            telegram.error.InvalidToken: If the token is empty.
        """
        if application is None:
            application = (
                Application.builder()
                .token(token or "")
                .concurrent_updates(True)
                .build()
            )
            application.add_error_handler(self._on_error)
        self.application = application
        self._stopped = asyncio.Event()

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("telegram_update_failed", error=str(context.error))

    def handle(self, trigger: str, callback: MessageCallback | InlineQueryCallback) -> None:
        """Register ``callback`` for a command such as "/start" or ON_INLINE_QUERY."""
        if trigger == ON_INLINE_QUERY:
            inline_callback = callback

            async def on_inline_query(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
                if update.inline_query is None:
                    return
                await inline_callback(inline_query_from_telegram(update.inline_query))  # type: ignore[arg-type]

            self.application.add_handler(InlineQueryHandler(on_inline_query))
            return

        message_callback = callback

        async def on_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if update.message is None:
                return
            await message_callback(message_from_telegram(update.message))  # type: ignore[arg-type]

        self.application.add_handler(
            CommandHandler(
                trigger.removeprefix("/"),
                on_command,
                filters=filters.UpdateType.MESSAGE,
            )
        )

    async def start(self) -> None:
        """Start long polling and block until ``stop`` is called or cancelled."""
        self._stopped.clear()
        app = self.application
        await app.initialize()
        try:
            await app.start()
            assert app.updater is not None, "Application must be built with an updater"
            await app.updater.start_polling(
                timeout=POLL_TIMEOUT,
                allowed_updates=[Update.MESSAGE, Update.INLINE_QUERY],
            )
            logger.info("telegram_polling_started")
            await self._stopped.wait()
        finally:
            if app.updater is not None and app.updater.running:
                await app.updater.stop()
            if app.running:
                await app.stop()
            await app.shutdown()
            logger.info("telegram_polling_stopped")

    async def stop(self) -> None:
        self._stopped.set()

    async def send(self, chat_id: int, text: str) -> None:
        await self.application.bot.send_message(chat_id=chat_id, text=text)

    async def answer(
        self,
        query_id: str,
        results: Sequence[InlineResult],
        cache_time: int,
    ) -> None:
        await self.application.bot.answer_inline_query(
            inline_query_id=query_id,
            results=[result_to_telegram(r) for r in results],
            cache_time=cache_time,
        )
