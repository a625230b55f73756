"""Tests for the Scryfall catalog client."""

import json

import httpx
import pytest
import respx

from commandtable.catalog import ScryfallCatalog

API = "https://api.scryfall.com"


def scryfall_card(name: str, type_line: str = "Artifact") -> dict:
    return {"id": name.lower().replace(" ", "-"), "name": name, "type_line": type_line}


@pytest.fixture
def catalog() -> ScryfallCatalog:
    return ScryfallCatalog(API, batch_size=2, rate_limit_delay=0)


class TestFetchCardsByNames:
    @respx.mock
    async def test_batches_requests(self, catalog: ScryfallCatalog) -> None:
        """Names are sent in batches of batch_size."""
        route = respx.post(f"{API}/cards/collection").mock(
            side_effect=[
                httpx.Response(
                    200, json={"data": [scryfall_card("Sol Ring"), scryfall_card("Arcane Signet")]}
                ),
                httpx.Response(
                    200,
                    json={"data": [], "not_found": [{"name": "Not A Card"}]},
                ),
            ]
        )

        cards = await catalog.fetch_cards_by_names(["Sol Ring", "Arcane Signet", "Not A Card"])

        assert [card.name for card in cards] == ["Sol Ring", "Arcane Signet"]
        assert route.call_count == 2
        first_body = json.loads(route.calls[0].request.content)
        assert first_body == {"identifiers": [{"name": "Sol Ring"}, {"name": "Arcane Signet"}]}

    @respx.mock
    async def test_failed_batch_is_skipped(self, catalog: ScryfallCatalog) -> None:
        """A failing batch does not fail the whole lookup."""
        respx.post(f"{API}/cards/collection").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json={"data": [scryfall_card("Command Tower", "Land")]}),
            ]
        )

        cards = await catalog.fetch_cards_by_names(["Sol Ring", "Arcane Signet", "Command Tower"])

        assert [card.name for card in cards] == ["Command Tower"]

    @respx.mock
    async def test_connection_error_is_skipped(self, catalog: ScryfallCatalog) -> None:
        respx.post(f"{API}/cards/collection").mock(side_effect=httpx.ConnectError("refused"))

        assert await catalog.fetch_cards_by_names(["Sol Ring"]) == []

    @respx.mock
    async def test_non_json_body_is_skipped(self, catalog: ScryfallCatalog) -> None:
        respx.post(f"{API}/cards/collection").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        assert await catalog.fetch_cards_by_names(["Sol Ring"]) == []

    @respx.mock
    async def test_uses_injected_client(self) -> None:
        respx.post(f"{API}/cards/collection").mock(
            return_value=httpx.Response(200, json={"data": [scryfall_card("Sol Ring")]})
        )

        async with httpx.AsyncClient() as client:
            catalog = ScryfallCatalog(API, client=client, rate_limit_delay=0)
            cards = await catalog.fetch_cards_by_names(["Sol Ring"])
            assert not client.is_closed

        assert cards[0].name == "Sol Ring"


class TestSearchTokens:
    @respx.mock
    async def test_searches_tokens(self, catalog: ScryfallCatalog) -> None:
        route = respx.get(f"{API}/cards/search").mock(
            return_value=httpx.Response(
                200,
                json={"data": [scryfall_card(f"Soldier {i}", "Token Creature") for i in range(30)]},
            )
        )

        tokens = await catalog.search_tokens("soldier")

        assert len(tokens) == 20
        params = route.calls.last.request.url.params
        assert params["q"] == "t:token soldier"
        assert params["order"] == "name"

    @respx.mock
    async def test_no_matches(self, catalog: ScryfallCatalog) -> None:
        """Scryfall answers 404 when a search matches nothing."""
        respx.get(f"{API}/cards/search").mock(return_value=httpx.Response(404))

        assert await catalog.search_tokens("nothing") == []

    @respx.mock
    async def test_server_error(self, catalog: ScryfallCatalog) -> None:
        respx.get(f"{API}/cards/search").mock(return_value=httpx.Response(500))

        assert await catalog.search_tokens("goblin") == []

    @respx.mock
    async def test_non_json_body(self, catalog: ScryfallCatalog) -> None:
        respx.get(f"{API}/cards/search").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        assert await catalog.search_tokens("goblin") == []

    async def test_blank_query(self, catalog: ScryfallCatalog) -> None:
        assert await catalog.search_tokens("   ") == []


class TestFetchRandomCards:
    @respx.mock
    async def test_random_order(self, catalog: ScryfallCatalog) -> None:
        route = respx.get(f"{API}/cards/search").mock(
            return_value=httpx.Response(
                200, json={"data": [scryfall_card(f"Card {i}") for i in range(10)]}
            )
        )

        cards = await catalog.fetch_random_cards(4)

        assert len(cards) == 4
        assert route.calls.last.request.url.params["order"] == "random"

    @respx.mock
    async def test_fallback_when_unavailable(self, catalog: ScryfallCatalog) -> None:
        respx.get(f"{API}/cards/search").mock(side_effect=httpx.ConnectError("offline"))

        cards = await catalog.fetch_random_cards(5)

        assert len(cards) == 5
        assert cards[0].type_line.startswith("Legendary Creature")
        assert all(card.id.startswith("fallback-") for card in cards)
