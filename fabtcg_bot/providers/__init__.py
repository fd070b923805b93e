"""Card source implementations.

This module contains concrete implementations of the CardSource protocol
defined in fabtcg_bot/ports/cards.py.
"""

from fabtcg_bot.providers.fabdb_provider import FabDBClient, parse_card, parse_search_response

__all__ = [
    "FabDBClient",
    "parse_card",
    "parse_search_response",
]
