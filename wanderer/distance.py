"""Great-circle distance helpers."""

import math

from .models import Location

EARTH_RADIUS_KM = 6371


def haversine_distance(a: Location, b: Location) -> float:
    """Calculate the great-circle distance between two locations in km."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2

    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def format_distance(km: float) -> str:
    """Format a distance for display, e.g. "250 m", "4.2 km", "830 km"."""
    if km < 1:
        return f"{round(km * 1000)} m"
    if km < 10:
        return f"{km:.1f} km"
    return f"{round(km)} km"
