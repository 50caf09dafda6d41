"""
Unit tests for the settlements store
"""

import asyncio

import pytest

from wanderer.asset import Asset
from wanderer.models import Settlement
from wanderer.settlements import Settlements
from tests.stubs import FakeSessionFactory, load_settlements

SETTLEMENTS = {
    "FR": [
        {"name": "A", "lat": 1, "lon": 1, "pop": 100},
        {"name": "B", "lat": 2, "lon": 2, "pop": 10},
    ],
    "DE": [
        {"name": "Hildesheim", "lat": 52.15, "lon": 9.95, "pop": 101055},
        {"name": "Berlin", "lat": 52.52, "lon": 13.405, "pop": 3644826},
        {"name": "Alfeld", "lat": 51.98, "lon": 9.82, "pop": 18764},
    ],
    "AD": [],
}


@pytest.fixture
def settlements():
    return load_settlements(SETTLEMENTS)


class TestPickRandom:

    def test_population_filter(self, settlements):
        for _ in range(100):
            assert settlements.pick_random("FR", 50).name == "A"

    def test_no_filter_returns_any(self, settlements):
        names = {settlements.pick_random("FR").name for _ in range(200)}
        assert names == {"A", "B"}

    def test_nothing_qualifies(self, settlements):
        assert settlements.pick_random("FR", 1000) is None

    def test_unknown_country(self, settlements):
        assert settlements.pick_random("XX") is None

    def test_empty_country(self, settlements):
        assert settlements.pick_random("AD") is None

    def test_not_loaded(self):
        store = Settlements(asset=Asset("/settlements.json", session_factory=FakeSessionFactory()))
        assert not store.ready
        assert store.pick_random("FR") is None

    def test_returns_settlement(self, settlements):
        picked = settlements.pick_random("FR", 50)
        assert picked == Settlement(name="A", lat=1.0, lon=1.0, pop=100)


class TestSettlementQueries:

    def test_get_countries_sorted(self, settlements):
        assert settlements.get_countries() == ["AD", "DE", "FR"]

    def test_get_cities_keeps_source_order(self, settlements):
        names = [city.name for city in settlements.get_cities("DE", 50000)]
        assert names == ["Hildesheim", "Berlin"]

    def test_get_cities_unknown_country(self, settlements):
        assert settlements.get_cities("XX") == []

    def test_load_is_cached(self):
        store = load_settlements(SETTLEMENTS)
        asyncio.run(store.load())
        assert store.asset.session_factory.calls == 1

    def test_reset(self, settlements):
        settlements.reset()
        assert not settlements.ready
        assert settlements.get_countries() == []


class TestSettlementFromDict:

    @pytest.mark.parametrize("pop,expected", [(None, 0), ("1200", 1200), (3500.0, 3500), (42, 42)])
    def test_population_normalised(self, pop, expected):
        settlement = Settlement.from_dict({"name": "X", "lat": "1.5", "lon": 2, "pop": pop})
        assert settlement.pop == expected
        assert settlement.lat == 1.5

    def test_missing_population(self):
        assert Settlement.from_dict({"name": "X", "lat": 1, "lon": 2}).pop == 0

    def test_null_population_is_filterable(self):
        store = load_settlements({"FR": [{"name": "A", "lat": 1, "lon": 1, "pop": None}]})
        assert store.get_cities("FR") == [Settlement(name="A", lat=1.0, lon=1.0, pop=0)]
        assert store.pick_random("FR", 1) is None
