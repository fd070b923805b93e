"""Telegram bot for Flesh and Blood TCG card lookups."""

__version__ = "1.0.0"
