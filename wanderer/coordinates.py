"""Coordinate generation and polygon containment utilities."""

import math
import random
from typing import Sequence

from .models import Location, Polygon, Position

# 1 degree of latitude is ~111.32 km
KM_PER_DEGREE = 111.32


def random_point_in_bbox(
    min_lon: float, min_lat: float, max_lon: float, max_lat: float
) -> Position:
    """Generate random coordinates within a bounding box.

    Each axis is drawn independently, so the result is uniform in degrees
    rather than in area on the sphere.

    Args:
        min_lon: Minimum longitude
        min_lat: Minimum latitude
        max_lon: Maximum longitude
        max_lat: Maximum latitude

    Returns:
        Tuple of (longitude, latitude)
    """
    lon = random.uniform(min_lon, max_lon)
    lat = random.uniform(min_lat, max_lat)
    return lon, lat


def point_in_polygon(point: Position, polygon: Polygon) -> bool:
    """Check if a point is inside a polygon.

    The first ring is the outer boundary and any further rings are holes.
    The point must be inside the outer ring and inside none of the holes.

    Args:
        point: (longitude, latitude)
        polygon: List of rings, each a list of (longitude, latitude) pairs

    Returns:
        True if the point is inside the polygon
    """
    x, y = point[0], point[1]

    if not _point_in_ring(x, y, polygon[0]):
        return False

    for hole in polygon[1:]:
        if _point_in_ring(x, y, hole):
            return False

    return True


def _point_in_ring(x: float, y: float, ring: Sequence[Position]) -> bool:
    """Even-odd ray casting against a single ring."""
    inside = False

    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def random_point_in_radius(lat: float, lon: float, radius_km: float) -> Location:
    """Pick a uniformly random point within a circle around a centre.

    Args:
        lat: Centre latitude
        lon: Centre longitude
        radius_km: Circle radius in kilometres

    Returns:
        Location inside the circle
    """
    r = radius_km * math.sqrt(random.random())
    theta = random.random() * 2 * math.pi

    d_lat = r * math.cos(theta) / KM_PER_DEGREE
    # Meridians converge towards the poles
    d_lon = r * math.sin(theta) / (KM_PER_DEGREE * math.cos(math.radians(lat)))

    return Location(lat=lat + d_lat, lon=lon + d_lon)
