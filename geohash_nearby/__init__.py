"""Geohash encoding, cell navigation and radius search."""

from .distance import EARTH_RADIUS_KM, haversine_distance, min_lat_distance
from .geohash import (
    BASE32,
    MAX_PRECISION,
    Geohash,
    Offset,
    Position,
    Rectangle,
    bit_widths,
    decode,
    encode,
)
from .proximity import min_distance_to_geohash, nearby_geohashes, nearby_next

__all__ = [
    "BASE32",
    "EARTH_RADIUS_KM",
    "MAX_PRECISION",
    "Geohash",
    "Offset",
    "Position",
    "Rectangle",
    "bit_widths",
    "decode",
    "encode",
    "haversine_distance",
    "min_distance_to_geohash",
    "min_lat_distance",
    "nearby_geohashes",
    "nearby_next",
]
