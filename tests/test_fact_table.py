"""Tests for fact table loading and food matching."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from menu_planner.domain.errors import FactTableUnavailableError
from menu_planner.services.cache import InMemoryCache
from menu_planner.services.fact_table import (
    FactTableService,
    parse_number,
    parse_taco_rows,
)
from tests.conftest import TACO_ROWS, FakeTacoClient, fact_table


def test_parse_number_handles_taco_placeholders() -> None:
    assert parse_number("NA") == 0.0
    assert parse_number("Tr") == 0.0
    assert parse_number("") == 0.0
    assert parse_number(None) == 0.0
    assert parse_number(True) == 0.0
    assert parse_number("12,5") == 12.5
    assert parse_number(-3) == 0.0
    assert parse_number(float("nan")) == 0.0
    assert parse_number(7) == 7.0


def test_parse_taco_rows_skips_rows_without_description() -> None:
    foods = parse_taco_rows([*TACO_ROWS, {"id": 999, "description": "  "}])

    assert len(foods) == len(TACO_ROWS)
    chicken = foods[1]
    assert chicken.nutrients.protein == 32.0
    assert chicken.nutrients.vitamin_a == 0.0
    assert chicken.base_qty == 100.0


def test_lookup_prefers_prefix_match() -> None:
    table = fact_table()

    food = table.lookup("arroz")

    assert food is not None
    assert food.description == "Arroz, tipo 1, cozido"


def test_lookup_is_accent_and_case_insensitive() -> None:
    table = fact_table()

    food = table.lookup("AMENDOIM GRÃO")

    assert food is not None
    assert food.id == 543


def test_lookup_ranks_by_word_overlap() -> None:
    table = fact_table()

    food = table.lookup("Frango grelhado")

    assert food is not None
    assert food.id == 411


def test_lookup_returns_none_without_match() -> None:
    table = fact_table()

    assert table.lookup("xyzabc") is None
    assert table.lookup("   ") is None


def test_search_limits_results() -> None:
    table = fact_table()

    assert [food.id for food in table.search("leite", limit=1)] == [460]
    assert table.search("") == []


def test_service_caches_table() -> None:
    client = FakeTacoClient()
    service = FactTableService(client, InMemoryCache())

    first = asyncio.run(service.load())
    second = asyncio.run(service.load())

    assert first is second
    assert len(first) == len(TACO_ROWS)
    assert client.calls == 1


def test_service_falls_back_to_stale_copy() -> None:
    now = datetime(2025, 3, 10, 8, 0, tzinfo=UTC)
    clock = {"now": now}
    cache = InMemoryCache(clock=lambda: clock["now"])
    client = FakeTacoClient()
    service = FactTableService(client, cache, ttl_seconds=60)

    loaded = asyncio.run(service.load())
    clock["now"] = now + timedelta(minutes=5)
    client.fail = True
    fallback = asyncio.run(service.load())

    assert fallback is loaded
    assert client.calls == 2


def test_service_raises_without_any_copy() -> None:
    service = FactTableService(FakeTacoClient(fail=True), InMemoryCache())

    with pytest.raises(FactTableUnavailableError):
        asyncio.run(service.load())
