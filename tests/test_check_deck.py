"""Tests for the deck check job."""

import logging

import pytest

from commandtable.catalog import StaticCardCatalog
from commandtable.jobs.check_deck import run_check


class TestRunCheck:
    async def test_all_cards_resolve(
        self, catalog: StaticCardCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO)

        ok = await run_check(catalog, "Atraxa, Praetors' Voice", "1 Sol Ring\n3 Forest")

        assert ok
        assert "Resolved 4 of 4 cards for Atraxa, Praetors' Voice" in caplog.text

    async def test_reports_missing_cards(
        self, catalog: StaticCardCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        ok = await run_check(catalog, "Atraxa, Praetors' Voice", "1 Sol Ring\n1 Black Lotus")

        assert not ok
        assert "Not found: Black Lotus" in caplog.text

    async def test_missing_commander(
        self, catalog: StaticCardCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        ok = await run_check(catalog, "Nobody Special", "1 Sol Ring")

        assert not ok
        assert "Commander not found: Nobody Special" in caplog.text

    async def test_non_legendary_commander_warns(
        self, catalog: StaticCardCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        ok = await run_check(catalog, "Llanowar Elves", "1 Forest")

        assert ok
        assert "Llanowar Elves is not a legendary creature" in caplog.text
