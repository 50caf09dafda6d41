"""Hand-picked locations with known Street View coverage."""

import random
from typing import List

from .models import StarterLocation

STARTERS: List[StarterLocation] = [
    # Hildesheim
    StarterLocation(lat=52.15185, lon=9.9505, name="St. Andreas, Hildesheim"),
    StarterLocation(lat=52.15282, lon=9.94442, name="St. Michaelis, Hildesheim"),
    StarterLocation(lat=52.15317, lon=9.95227, name="Marktplatz, Hildesheim"),
    StarterLocation(lat=52.14972, lon=9.94824, name="Dom, Hildesheim"),
    StarterLocation(lat=52.15939, lon=9.95279, name="Hauptbahnhof, Hildesheim"),
    # World
    StarterLocation(lat=35.6595, lon=139.7004, name="Shibuya, Tokyo"),
    StarterLocation(lat=48.8584, lon=2.2945, name="Eiffel Tower, Paris"),
    StarterLocation(lat=40.758, lon=-73.9855, name="Times Square, NYC"),
    StarterLocation(lat=-33.8568, lon=151.2153, name="Sydney Opera House"),
    StarterLocation(lat=51.5007, lon=-0.1246, name="Big Ben, London"),
]


def pick_starter() -> StarterLocation:
    return random.choice(STARTERS)
