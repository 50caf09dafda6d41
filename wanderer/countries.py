"""Country borders and polygon-constrained sampling."""

import json
from typing import Dict, List, Optional

from .asset import Asset
from .coordinates import point_in_polygon, random_point_in_bbox
from .models import CountriesData, Country, Location

# Countries with no or very limited Street View coverage
NO_STREETVIEW_COVERAGE = frozenset({
    "AF",  # Afghanistan
    "BY",  # Belarus
    "CN",  # China
    "CU",  # Cuba
    "IR",  # Iran
    "IQ",  # Iraq
    "KP",  # North Korea
    "LY",  # Libya
    "MM",  # Myanmar
    "SD",  # Sudan
    "SS",  # South Sudan
    "SY",  # Syria
    "TM",  # Turkmenistan
    "UZ",  # Uzbekistan
    "YE",  # Yemen
    "CF",  # Central African Republic
    "TD",  # Chad
    "CG",  # Congo
    "CD",  # DR Congo
    "GQ",  # Equatorial Guinea
    "ER",  # Eritrea
    "ET",  # Ethiopia (limited)
    "NE",  # Niger
    "SO",  # Somalia
    "TJ",  # Tajikistan
    "VE",  # Venezuela
})


class Countries:
    """Country borders keyed by ISO code, loaded from countries.json."""

    def __init__(self, asset: Optional[Asset] = None):
        """Initialize the store.

        Args:
            asset: Asset to load from. Defaults to /countries.json
        """
        self.asset = asset or Asset("/countries.json")
        self._data: Optional[CountriesData] = None

    @property
    def ready(self) -> bool:
        return self.asset.ready and self._data is not None

    @property
    def loading(self) -> bool:
        return self.asset.loading

    @property
    def error(self) -> Optional[Exception]:
        return self.asset.error

    @property
    def progress(self) -> Dict[str, int]:
        return self.asset.progress

    async def load(self, verbose: bool = False) -> "Countries":
        """Download and parse the borders. Cached after the first success."""
        raw = await self.asset.load(verbose=verbose)
        if self._data is None:
            parsed = json.loads(raw)
            self._data = {code: Country.from_dict(entry) for code, entry in parsed.items()}
            if verbose:
                print(f"🗺️  Loaded {len(self._data)} countries")
        return self

    def reset(self) -> None:
        """Drop parsed data so the next load() downloads again."""
        self.asset.reset()
        self._data = None

    def get_country(self, code: str) -> Optional[Country]:
        return (self._data or {}).get(code)

    def random_point_in(self, country_code: str, max_attempts: int = 1000) -> Optional[Location]:
        """Sample a random point inside a country's borders.

        Points are drawn uniformly in the bounding box and accepted as soon as
        any of the country's polygons contains them. If nothing is accepted
        within ``max_attempts`` draws, the bounding box centre is returned;
        that point may lie outside the country.

        Args:
            country_code: ISO country code
            max_attempts: Number of draws before falling back to the centre

        Returns:
            Location, or None if the country is unknown
        """
        country = self.get_country(country_code)
        if country is None:
            return None

        min_lon, min_lat, max_lon, max_lat = country.bbox

        for _ in range(max_attempts):
            point = random_point_in_bbox(min_lon, min_lat, max_lon, max_lat)

            for polygon in country.geometry:
                if point_in_polygon(point, polygon):
                    return Location(lat=point[1], lon=point[0])

        return Location(lat=(min_lat + max_lat) / 2, lon=(min_lon + max_lon) / 2)

    def get_codes(self) -> List[str]:
        return sorted(self._data or {})

    def get_codes_with_coverage(self) -> List[str]:
        return [code for code in self.get_codes() if code not in NO_STREETVIEW_COVERAGE]

    def has_coverage(self, code: str) -> bool:
        return code not in NO_STREETVIEW_COVERAGE

    def get_name(self, code: str) -> str:
        """Country name, or the code itself if unknown."""
        country = self.get_country(code)
        return country.name if country else code

    def get_all(self) -> Optional[CountriesData]:
        return self._data
