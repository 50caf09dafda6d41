"""Wanderer - Street View location generator for a geography guessing game

Picks random coordinates inside a country, around a city or among populated
places, and keeps only those that have Street View panoramas nearby.
"""

from .countries import Countries
from .models import GameSettings, Location, LocationMode, Settlement, StarterLocation
from .sampling import generate_candidate, generate_location
from .settlements import Settlements
from .streetview import check_coverage

__version__ = "0.1.0"
__all__ = [
    "Countries",
    "Settlements",
    "GameSettings",
    "Location",
    "LocationMode",
    "Settlement",
    "StarterLocation",
    "check_coverage",
    "generate_candidate",
    "generate_location",
]
