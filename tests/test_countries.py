"""
Unit tests for the country borders store
"""

import asyncio
import json

import aiohttp
import pytest

from wanderer.asset import Asset, AssetError
from wanderer.countries import NO_STREETVIEW_COVERAGE, Countries
from wanderer.coordinates import point_in_polygon
from tests.stubs import FakeResponse, FakeSessionFactory, load_countries

SQUARE = [[0, 0], [0, 10], [10, 10], [10, 0]]

COUNTRIES = {
    "DE": {"name": "Germany", "bbox": [0, 0, 10, 10], "geometry": [[SQUARE]]},
    "AF": {"name": "Afghanistan", "bbox": [60, 29, 75, 38], "geometry": [[[[60, 29], [60, 38], [75, 38], [75, 29]]]]},
    "CH": {
        "name": "Switzerland",
        "bbox": [0, 0, 10, 10],
        "geometry": [[SQUARE, [[1, 1], [1, 9], [9, 9], [9, 1]]]],
    },
    # Two islands far apart inside one large bounding box
    "FJ": {
        "name": "Fiji",
        "bbox": [0, 0, 20, 20],
        "geometry": [
            [[[0, 0], [0, 2], [2, 2], [2, 0]]],
            [[[18, 18], [18, 20], [20, 20], [20, 18]]],
        ],
    },
}


@pytest.fixture
def countries():
    return load_countries(COUNTRIES)


class TestCountriesLoad:

    def test_not_ready_before_load(self):
        store = Countries(asset=Asset("/countries.json", session_factory=FakeSessionFactory()))
        assert not store.ready
        assert store.get_codes() == []
        assert store.random_point_in("DE") is None

    def test_ready_after_load(self, countries):
        assert countries.ready
        assert not countries.loading
        assert countries.error is None
        assert countries.progress["done"] == len(json.dumps(COUNTRIES).encode())

    def test_load_returns_store(self):
        factory = FakeSessionFactory(FakeResponse(chunks=[json.dumps(COUNTRIES).encode()]))
        store = Countries(asset=Asset("/countries.json", session_factory=factory))
        assert asyncio.run(store.load()) is store

    def test_load_failure_is_sticky(self):
        factory = FakeSessionFactory(error=aiohttp.ClientConnectionError("offline"))
        store = Countries(asset=Asset("/countries.json", session_factory=factory))

        for _ in range(2):
            with pytest.raises(AssetError):
                asyncio.run(store.load())

        assert factory.calls == 1
        assert isinstance(store.error, AssetError)
        assert not store.ready

    def test_reset_then_reload(self):
        factory = FakeSessionFactory(error=aiohttp.ClientConnectionError("offline"))
        store = Countries(asset=Asset("/countries.json", session_factory=factory))
        with pytest.raises(AssetError):
            asyncio.run(store.load())

        factory.error = None
        factory.response = FakeResponse(chunks=[json.dumps(COUNTRIES).encode()])
        store.reset()
        asyncio.run(store.load())

        assert store.ready
        assert store.get_name("DE") == "Germany"

    def test_malformed_json_raises(self):
        factory = FakeSessionFactory(FakeResponse(chunks=[b"{not json"]))
        store = Countries(asset=Asset("/countries.json", session_factory=factory))
        with pytest.raises(json.JSONDecodeError):
            asyncio.run(store.load())
        assert not store.ready


class TestRandomPointIn:

    def test_square_country(self, countries):
        for _ in range(1000):
            point = countries.random_point_in("DE")
            assert 0 <= point.lat <= 10
            assert 0 <= point.lon <= 10

    def test_unknown_country(self, countries):
        assert countries.random_point_in("XX") is None

    def test_never_in_hole(self, countries):
        polygon = COUNTRIES["CH"]["geometry"][0]
        for _ in range(300):
            point = countries.random_point_in("CH")
            assert point_in_polygon((point.lon, point.lat), polygon)

    def test_any_polygon_accepts(self, countries):
        for _ in range(200):
            point = countries.random_point_in("FJ")
            on_first = point.lat <= 2 and point.lon <= 2
            on_second = point.lat >= 18 and point.lon >= 18
            assert on_first or on_second

    def test_fallback_to_bbox_centre(self, countries):
        point = countries.random_point_in("FJ", max_attempts=0)
        assert (point.lat, point.lon) == (10, 10)

    def test_fallback_stays_inside_bbox(self):
        # Polygon entirely outside its bbox can never be hit
        store = load_countries({
            "XX": {"name": "Nowhere", "bbox": [0, 0, 1, 1], "geometry": [[[[5, 5], [5, 6], [6, 6], [6, 5]]]]},
        })
        point = store.random_point_in("XX", max_attempts=50)
        assert 0 <= point.lat <= 1
        assert 0 <= point.lon <= 1


class TestCountryQueries:

    def test_codes_sorted(self, countries):
        assert countries.get_codes() == ["AF", "CH", "DE", "FJ"]

    def test_codes_with_coverage(self, countries):
        assert countries.get_codes_with_coverage() == ["CH", "DE", "FJ"]

    def test_has_coverage(self, countries):
        assert countries.has_coverage("DE")
        assert not countries.has_coverage("AF")
        assert "KP" in NO_STREETVIEW_COVERAGE

    def test_get_name(self, countries):
        assert countries.get_name("DE") == "Germany"
        assert countries.get_name("XX") == "XX"

    def test_get_country(self, countries):
        country = countries.get_country("DE")
        assert country.bbox == (0, 0, 10, 10)
        assert country.geometry == [[SQUARE]]
        assert countries.get_country("XX") is None

    def test_get_all(self, countries):
        assert set(countries.get_all()) == set(COUNTRIES)
