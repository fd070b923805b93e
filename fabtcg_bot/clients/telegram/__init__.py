"""Telegram client package."""

from fabtcg_bot.clients.telegram.bot import FabTCGBot, create_bot
from fabtcg_bot.clients.telegram.checks import EXEMPT_COMMANDS, is_permitted
from fabtcg_bot.clients.telegram.commands import BotCommands, card_to_inline_result
from fabtcg_bot.clients.telegram.decorators import message_middleware, query_middleware
from fabtcg_bot.clients.telegram.transport import TelegramTransport

__all__ = [
    "BotCommands",
    "EXEMPT_COMMANDS",
    "FabTCGBot",
    "TelegramTransport",
    "card_to_inline_result",
    "create_bot",
    "is_permitted",
    "message_middleware",
    "query_middleware",
]
