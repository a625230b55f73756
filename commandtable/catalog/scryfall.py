"""Scryfall-backed card catalog.

Resolves card names through the /cards/collection endpoint and searches
tokens and random cards through /cards/search.
Respects Scryfall rate limits (10 requests/second).
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from commandtable.catalog.base import CardCatalog, CatalogError
from commandtable.config import settings
from commandtable.models.card import CARD_BACK_URL, Card

logger = logging.getLogger(__name__)

USER_AGENT = "CommandTable/0.1"

# Scryfall returns at most this many token matches we care to show
MAX_TOKEN_RESULTS = 20


def generate_fallback_cards(count: int) -> list[Card]:
    """
    Placeholder cards used when Scryfall is unreachable.

    The first card is a legendary creature so it can serve as commander.
    """
    images = dict.fromkeys(("small", "normal", "large", "png", "art_crop"), CARD_BACK_URL)
    return [
        Card(
            id=f"fallback-{i}",
            name=f"Card {i + 1}",
            type_line="Legendary Creature — Human Wizard" if i == 0 else "Instant",
            oracle_text="Fallback card - API unavailable",
            image_uris=dict(images),
        )
        for i in range(count)
    ]


class ScryfallCatalog(CardCatalog):
    """Card catalog backed by the Scryfall REST API.

    Args:
        base_url: API root. Defaults to settings.scryfall_api_url
        client: Optional shared AsyncClient; created per call if omitted
        batch_size: Names per /cards/collection request (Scryfall max is 75)
        rate_limit_delay: Seconds to wait between batches
        timeout: Request timeout for clients this catalog creates
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        batch_size: int | None = None,
        rate_limit_delay: float | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.batch_size = batch_size or settings.scryfall_batch_size
        self.rate_limit_delay = (
            settings.scryfall_rate_limit_delay if rate_limit_delay is None else rate_limit_delay
        )
        self.timeout = timeout or settings.scryfall_timeout
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        ) as client:
            yield client

    async def _fetch_batch(self, client: httpx.AsyncClient, names: list[str]) -> list[Card]:
        """POST one batch of names to /cards/collection.

        Raises:
            CatalogError: If the request fails
        """
        url = f"{self.base_url}/cards/collection"
        identifiers = [{"name": name} for name in names]

        try:
            response = await client.post(url, json={"identifiers": identifiers})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(
                f"Failed to fetch card batch: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise CatalogError(f"Failed to fetch card batch: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Failed to fetch card batch: invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise CatalogError("Failed to fetch card batch: unexpected response body")

        not_found = data.get("not_found") or []
        if not_found:
            logger.debug("scryfall_names_not_found", extra={"count": len(not_found)})

        return [Card.from_scryfall(card) for card in data.get("data", [])]

    async def fetch_cards_by_names(self, names: list[str]) -> list[Card]:
        """
        Resolve names in batches.

        A failing batch is logged and skipped: its names come back as
        not-found rather than failing the whole lookup.
        """
        cards: list[Card] = []

        async with self._session() as client:
            for start in range(0, len(names), self.batch_size):
                batch = names[start : start + self.batch_size]
                try:
                    cards.extend(await self._fetch_batch(client, batch))
                except CatalogError as e:
                    logger.warning(
                        "scryfall_batch_failed",
                        extra={"batch_start": start, "batch_size": len(batch), "error": str(e)},
                    )

                if start + self.batch_size < len(names):
                    await asyncio.sleep(self.rate_limit_delay)

        return cards

    async def _search(
        self, client: httpx.AsyncClient, query: str, order: str
    ) -> list[dict[str, Any]]:
        """Run a /cards/search query. Scryfall answers 404 when nothing matches.

        Raises:
            CatalogError: If the request fails or the body is not a search result
        """
        try:
            response = await client.get(
                f"{self.base_url}/cards/search",
                params={"q": query, "order": order},
            )
            if response.status_code == 404:
                return []
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise CatalogError(f"Card search failed: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Card search failed: invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise CatalogError("Card search failed: unexpected response body")
        return list(data.get("data", []))

    async def search_tokens(self, query: str) -> list[Card]:
        """
        Search token cards by free text.

        Returns an empty list for a blank query or on any transport error.
        """
        if not query.strip():
            return []

        try:
            async with self._session() as client:
                results = await self._search(client, f"t:token {query}", order="name")
        except CatalogError as e:
            logger.warning("token_search_failed", extra={"query": query, "error": str(e)})
            return []

        return [Card.from_scryfall(card) for card in results[:MAX_TOKEN_RESULTS]]

    async def fetch_random_cards(self, count: int) -> list[Card]:
        """
        Fetch commander-legal cards in random order.

        Falls back to placeholder cards if Scryfall is unavailable.
        """
        try:
            async with self._session() as client:
                results = await self._search(client, "format:commander", order="random")
        except CatalogError as e:
            logger.warning("random_cards_fetch_failed", extra={"error": str(e)})
            results = []

        if not results:
            return generate_fallback_cards(count)

        return [Card.from_scryfall(card) for card in results[:count]]
