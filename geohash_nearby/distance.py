"""
Great-circle helpers on a spherical Earth.

Distances are in kilometres; this is the radius unit ``nearby_geohashes``
expects unless a different ``distance`` function is supplied.
"""

from __future__ import annotations

from math import atan, cos, degrees, radians, tan

from geopy.distance import EARTH_RADIUS, great_circle

from .geohash import Position

EARTH_RADIUS_KM = EARTH_RADIUS  # mean radius of the sphere geopy uses


def haversine_distance(a: Position, b: Position) -> float:
    """Compute great-circle distance in kilometres between two points."""
    return great_circle((a.lat, a.lon), (b.lat, b.lon)).km


def min_lat_distance(pos: Position, lon: float) -> float:
    """Latitude of the point on meridian ``lon`` closest to ``pos``.

    A meridian is half a great circle, so once it is a quarter turn or more
    away the closest point is the pole on the same side as ``pos``.
    """
    cos_dlon = cos(radians(pos.lon - lon))
    if cos_dlon <= 0:
        return 90.0 if pos.lat >= 0 else -90.0
    return degrees(atan(tan(radians(pos.lat)) / cos_dlon))
