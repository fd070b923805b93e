"""Card source protocol and the card records it returns.

The records mirror the FaB DB JSON payloads but carry no HTTP or
Telegram types, so handlers and tests can build them directly.
"""

from dataclasses import dataclass, field
from typing import Protocol

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class CardSet:
    """A card set a printing belongs to."""

    id: str = ""
    name: str = ""
    released: str = ""
    browseable: bool = False
    draftable: bool = False


@dataclass
class Sku:
    """Stock keeping unit of a single printing.

    Attributes:
        sku: The SKU code, e.g. "WTR001".
        finish: Foiling of the printing (regular, rainbow, cold).
        number: Collector number within the set.
        set: The set this SKU was printed in.
    """

    sku: str = ""
    finish: str = ""
    number: str = ""
    set: CardSet = field(default_factory=CardSet)


@dataclass
class Printing:
    """One printing of a card (set, language, flavour text, SKU)."""

    id: int = 0
    language: str = ""
    name: str = ""
    text: str = ""
    flavour: str = ""
    sku: Sku = field(default_factory=Sku)
    set: str = ""
    rarity: str = ""


@dataclass
class Card:
    """A Flesh and Blood card.

    Attributes:
        identifier: Stable slug of the card, e.g. "command-and-conquer".
        name: Display name.
        keywords: Keywords of the card (class, talent, type).
        text: Rules text.
        rarity: Rarity code.
        image: URL of the card image.
        sideboard_total: Number of copies allowed in a sideboard.
        printings: All known printings of the card.
    """

    identifier: str
    name: str
    keywords: list[str] = field(default_factory=list)
    text: str = ""
    rarity: str = ""
    image: str = ""
    sideboard_total: int = 0
    printings: list[Printing] = field(default_factory=list)


@dataclass
class SearchLinks:
    """Pagination links of a search response."""

    first: str = ""
    last: str = ""
    prev: str = ""
    next: str = ""


@dataclass
class SearchMeta:
    """Pagination metadata of a search response."""

    current_page: int = 0
    from_: int = 0
    last_page: int = 0
    path: str = ""
    per_page: str = ""
    to: int = 0
    total: int = 0


@dataclass
class SearchResponse:
    """A page of card search results."""

    data: list[Card] = field(default_factory=list)
    links: SearchLinks = field(default_factory=SearchLinks)
    meta: SearchMeta = field(default_factory=SearchMeta)


# =============================================================================
# Protocols
# =============================================================================


class CardSource(Protocol):
    """Protocol for looking up cards.

    Implementations raise ``RemoteAPIError`` on any failure, including a
    search that matched nothing.
    """

    async def list_cards(self, query: str, *, timeout: float | None = None) -> list[Card]:
        """Search cards by free-text keywords."""
        ...

    async def get_card(self, identifier: str, *, timeout: float | None = None) -> Card:
        """Fetch a single card by identifier (case-insensitive)."""
        ...
