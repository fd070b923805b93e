"""FaB DB card API provider implementation.

This module implements the CardSource protocol against https://api.fabdb.net.
Requests are plain GETs with no retries; any non-2xx response, transport
failure or undecodable body surfaces as a RemoteAPIError.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import aiohttp

from fabtcg_bot import __version__
from fabtcg_bot.core.errors import DecodeError, EmptyResultError, RemoteAPIError
from fabtcg_bot.core.logging import get_logger
from fabtcg_bot.ports.cards import (
    Card,
    CardSet,
    Printing,
    SearchLinks,
    SearchMeta,
    SearchResponse,
    Sku,
)

logger = get_logger(__name__)

T = TypeVar("T")

API_ENDPOINT = "https://api.fabdb.net"
USER_AGENT = f"fabtcg-bot/{__version__}"
CONTENT_TYPE = "application/json"

SEARCH_PAGE_SIZE = 30

# Transport level limits, applied to every request
CONNECT_TIMEOUT_SECONDS = 30.0
KEEPALIVE_TIMEOUT_SECONDS = 60.0
MAX_CONNECTIONS = 10


def _parse_printing(item: dict[str, Any]) -> Printing:
    sku = item.get("sku") or {}
    card_set = sku.get("set") or {}
    return Printing(
        id=int(item.get("id") or 0),
        language=item.get("language") or "",
        name=item.get("name") or "",
        text=item.get("text") or "",
        flavour=item.get("flavour") or "",
        sku=Sku(
            sku=sku.get("sku") or "",
            finish=sku.get("finish") or "",
            number=str(sku.get("number") or ""),
            set=CardSet(
                id=card_set.get("id") or "",
                name=card_set.get("name") or "",
                released=card_set.get("released") or "",
                browseable=bool(card_set.get("browseable", False)),
                draftable=bool(card_set.get("draftable", False)),
            ),
        ),
        set=item.get("set") or "",
        rarity=item.get("rarity") or "",
    )


def parse_card(item: dict[str, Any]) -> Card:
    """Build a Card from one JSON card object.

    Raises:
        DecodeError: If the object is not a mapping.
    """
    if not isinstance(item, dict):
        raise DecodeError(f"expected a JSON object for a card, got {type(item).__name__}")
    return Card(
        identifier=item.get("identifier") or "",
        name=item.get("name") or "",
        keywords=list(item.get("keywords") or []),
        text=item.get("text") or "",
        rarity=item.get("rarity") or "",
        image=item.get("image") or "",
        sideboard_total=int(item.get("sideboardTotal") or 0),
        printings=[_parse_printing(p) for p in item.get("printings") or []],
    )


def _decode(parser: Callable[[Any], T], payload: Any) -> T:
    """Run a parser over a decoded body, turning type mismatches into DecodeError."""
    try:
        return parser(payload)
    except (TypeError, ValueError, AttributeError) as ex:
        raise DecodeError(f"unexpected JSON structure: {ex}") from ex


def parse_search_response(payload: Any) -> SearchResponse:
    """Build a SearchResponse from the paginated search envelope.

    Raises:
        DecodeError: If the envelope is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise DecodeError("search response is not a JSON object")
    links = payload.get("links") or {}
    meta = payload.get("meta") or {}
    return SearchResponse(
        data=[parse_card(item) for item in payload.get("data") or []],
        links=SearchLinks(
            first=links.get("first") or "",
            last=links.get("last") or "",
            prev=links.get("prev") or "",
            next=links.get("next") or "",
        ),
        meta=SearchMeta(
            current_page=int(meta.get("current_page") or 0),
            from_=int(meta.get("from") or 0),
            last_page=int(meta.get("last_page") or 0),
            path=meta.get("path") or "",
            per_page=str(meta.get("per_page") or ""),
            to=int(meta.get("to") or 0),
            total=int(meta.get("total") or 0),
        ),
    )


class FabDBClient:
    """FaB DB API client implementing the CardSource protocol.

    The aiohttp session is created on first use and shared by all requests.
    Pass ``session`` to reuse an existing one; it is then left open by
    ``close``.

    Example:
        async with FabDBClient() as client:
            cards = await client.list_cards("snatch")
    """

    def __init__(
        self,
        api_endpoint: str = API_ENDPOINT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_endpoint: Base URL of the API, without trailing slash.
            session: Optional session to send requests with.
        """
        self._api_endpoint = api_endpoint.rstrip("/")
        self._session = session
        self._owns_session = session is None

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=MAX_CONNECTIONS,
                keepalive_timeout=KEEPALIVE_TIMEOUT_SECONDS,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(sock_connect=CONNECT_TIMEOUT_SECONDS),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> FabDBClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_json(self, path: str, timeout: float | None) -> Any:
        """GET ``path`` and decode the JSON body.

        Raises:
            RemoteAPIError: On transport failure or a non-2xx response.
            DecodeError: If the body is not valid JSON.
        """
        url = f"{self._api_endpoint}{path}"
        headers = {"User-Agent": USER_AGENT, "Content-Type": CONTENT_TYPE}
        # Without a caller timeout the session defaults (connect timeout) apply
        request_options: dict[str, Any] = {}
        if timeout:
            request_options["timeout"] = aiohttp.ClientTimeout(
                total=timeout, sock_connect=CONNECT_TIMEOUT_SECONDS
            )

        logger.debug("fabdb_request", url=url)

        try:
            async with self._get_session().get(
                url, headers=headers, **request_options
            ) as response:
                if response.status < 200 or response.status > 299:
                    raise RemoteAPIError.from_response(
                        response.status, response.headers.get("Content-Type", "")
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as ex:
                    raise DecodeError(
                        f"failed to decode response body: {ex}",
                        status_code=response.status,
                    ) from ex
        except (aiohttp.ClientError, asyncio.TimeoutError) as ex:
            raise RemoteAPIError(f"Error calling the API endpoint: {ex}") from ex

    async def search(self, query: str, *, timeout: float | None = None) -> SearchResponse:
        """Fetch the first page of search results for ``query``.

        Args:
            query: Free-text keywords.
            timeout: Optional total timeout for the request, in seconds.

        Returns:
            The parsed search envelope, possibly with no cards.

        Raises:
            RemoteAPIError: If the request fails or the body is malformed.
        """
        path = (
            f"/cards?per_page={SEARCH_PAGE_SIZE}&keywords={quote(query)}"
            "&page=1&use-case=browse"
        )
        payload = await self._get_json(path, timeout)
        return _decode(parse_search_response, payload)

    async def list_cards(self, query: str, *, timeout: float | None = None) -> list[Card]:
        """Search cards by keywords.

        Args:
            query: Free-text keywords.
            timeout: Optional total timeout for the request, in seconds.

        Returns:
            The matching cards in the order the API returned them.

        Raises:
            EmptyResultError: If nothing matched.
            RemoteAPIError: If the request fails or the body is malformed.
        """
        result = await self.search(query, timeout=timeout)
        if not result.data:
            raise EmptyResultError("JSON response does not have any card fields")
        return result.data

    async def get_card(self, identifier: str, *, timeout: float | None = None) -> Card:
        """Fetch one card by identifier. Lookup is case-insensitive.

        Raises:
            RemoteAPIError: If the request fails or the body is malformed.
        """
        payload = await self._get_json(f"/cards/{quote(identifier.lower())}", timeout)
        return _decode(parse_card, payload)
