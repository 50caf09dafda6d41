"""Data types shared by the location generation engine."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# GeoJSON ordering: (lon, lat)
Position = Tuple[float, float]
Ring = List[Position]
Polygon = List[Ring]
MultiPolygon = List[Polygon]
BBox = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


class LocationMode:
    """How a candidate location is picked."""

    RANDOM = "random"
    URBAN = "urban"
    CITY = "city"

    ALL = (RANDOM, URBAN, CITY)


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float


@dataclass(frozen=True)
class StarterLocation(Location):
    name: str = ""


@dataclass(frozen=True)
class Settlement:
    name: str
    lat: float
    lon: float
    pop: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "Settlement":
        return cls(
            name=data["name"],
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            pop=int(float(data.get("pop") or 0)),
        )


@dataclass
class Country:
    """A country boundary as shipped in countries.json.

    Attributes:
        name: Display name
        bbox: Bounding box enclosing every vertex of the geometry
        geometry: Polygons making up the country; any one may contain a point
    """

    name: str
    bbox: BBox
    geometry: MultiPolygon

    @classmethod
    def from_dict(cls, data: dict) -> "Country":
        min_lon, min_lat, max_lon, max_lat = data["bbox"]
        return cls(
            name=data["name"],
            bbox=(min_lon, min_lat, max_lon, max_lat),
            geometry=data["geometry"],
        )


@dataclass(frozen=True)
class GameSettings:
    """Settings for one game round.

    Attributes:
        country: "all" or an ISO country code
        mode: One of LocationMode.ALL
        city: Settlement to centre on in city mode
        min_pop: Minimum settlement population in urban mode
        city_radius: Radius in km around the city in city mode
        map_size: Guess map size as a vw percentage (front end only)
        map_size_expanded: Guess map size on hover as a vw percentage (front end only)
    """

    country: str = "all"
    mode: str = LocationMode.RANDOM
    city: Optional[Settlement] = None
    min_pop: int = 0
    city_radius: float = 10.0
    map_size: int = 35
    map_size_expanded: int = 60


CountriesData = Dict[str, Country]
SettlementsData = Dict[str, List[Settlement]]
