from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from .distance import haversine_distance, min_lat_distance
from .geohash import Geohash, Offset, Position, Rectangle, bit_widths, encode

logger = logging.getLogger(__name__)

DistanceFunc = Callable[[Position, Position], float]
ClosestLatitudeFunc = Callable[[Position, float], float]


def direction_of_offset(offset: Offset, radius: int) -> Offset:
    """Unit step that walks the ring counter-clockwise from ``offset``."""
    if offset.lon == radius:
        return Offset(lat=1, lon=0)
    if offset.lat == radius:
        return Offset(lat=0, lon=-1)
    if offset.lon == -radius:
        return Offset(lat=-1, lon=0)
    return Offset(lat=0, lon=1)


def rotate_direction(direction: Offset) -> Offset:
    return Offset(lat=direction.lon, lon=-direction.lat)


def nearby_next(offset: Offset, radius: int) -> Optional[Offset]:
    """Next offset on the square ring of Chebyshev radius ``radius``.

    The walk starts at ``(0, radius)`` and goes counter-clockwise. Returns
    None once the step would come back to the start.
    """
    direction = direction_of_offset(offset, radius)

    # top right, top left and bottom left corners turn the walk
    if offset.lat == radius and offset.lon == radius:
        direction = rotate_direction(direction)
    if offset.lat == radius and offset.lon == -radius:
        direction = rotate_direction(direction)
    if offset.lat == -radius and offset.lon == -radius:
        direction = rotate_direction(direction)

    offset = offset.add(direction)
    if offset.lat == 0 and offset.lon == radius:
        return None
    return offset


def ring_offsets(radius: int) -> Iterator[Offset]:
    """Yield every offset of one ring in walk order."""
    offset: Optional[Offset] = Offset(lat=0, lon=radius)
    while offset is not None:
        yield offset
        offset = nearby_next(offset, radius)


def nearest_horizontal_edge(pos: Position, lat: float, rec: Rectangle) -> Position:
    lon = pos.lon
    if lon < rec.top_left.lon:
        lon = rec.top_left.lon
    elif lon > rec.top_right.lon:
        lon = rec.top_right.lon
    return Position(lat=lat, lon=lon)


def nearest_top_edge(pos: Position, rec: Rectangle) -> Position:
    return nearest_horizontal_edge(pos, rec.top_right.lat, rec)


def nearest_bottom_edge(pos: Position, rec: Rectangle) -> Position:
    return nearest_horizontal_edge(pos, rec.bottom_right.lat, rec)


def nearest_vertical_edge(
    pos: Position,
    lon: float,
    rec: Rectangle,
    closest_latitude: ClosestLatitudeFunc = min_lat_distance,
) -> Position:
    lat = closest_latitude(pos, lon)
    if lat < rec.bottom_left.lat:
        lat = rec.bottom_left.lat
    elif lat > rec.top_left.lat:
        lat = rec.top_left.lat
    return Position(lat=lat, lon=lon)


def nearest_left_edge(
    pos: Position,
    rec: Rectangle,
    closest_latitude: ClosestLatitudeFunc = min_lat_distance,
) -> Position:
    return nearest_vertical_edge(pos, rec.top_left.lon, rec, closest_latitude)


def nearest_right_edge(
    pos: Position,
    rec: Rectangle,
    closest_latitude: ClosestLatitudeFunc = min_lat_distance,
) -> Position:
    return nearest_vertical_edge(pos, rec.top_right.lon, rec, closest_latitude)


def min_distance_to_geohash(
    origin: Position,
    geohash: Geohash,
    distance: DistanceFunc = haversine_distance,
    closest_latitude: ClosestLatitudeFunc = min_lat_distance,
) -> float:
    """Smallest distance from ``origin`` to any edge of the cell."""
    rec = geohash.rectangle()
    candidates = (
        nearest_left_edge(origin, rec, closest_latitude),
        nearest_right_edge(origin, rec, closest_latitude),
        nearest_top_edge(origin, rec),
        nearest_bottom_edge(origin, rec),
    )
    return min(distance(origin, edge) for edge in candidates)


def nearby_geohashes(
    origin: Position,
    radius: float,
    precision: int,
    *,
    distance: DistanceFunc = haversine_distance,
    closest_latitude: ClosestLatitudeFunc = min_lat_distance,
) -> list[Geohash]:
    """List every cell at ``precision`` that comes within ``radius`` of ``origin``.

    The origin cell comes first, then rings of growing Chebyshev radius in
    walk order (see :func:`nearby_next`). The search stops after the first
    ring without a single cell in range; that is a heuristic and can miss
    cells for very elongated cells near the poles. ``radius`` is in the unit
    ``distance`` returns, kilometres by default.

    Args:
        origin: centre of the search
        radius: maximum distance to a cell edge
        precision: geohash length of the returned cells
        distance: great-circle distance between two positions
        closest_latitude: latitude on a meridian closest to a position

    Returns:
        the matching cells, each one listed once
    """
    if radius < 0:
        raise ValueError(f"Radius {radius} must not be negative")

    origin_hash = encode(origin, precision)
    result = [origin_hash]
    seen = {origin_hash}

    # Beyond this ring every offset wraps onto a cell already visited.
    last_ring = max(1 << width for width in bit_widths(precision)) // 2

    for ring in range(1, last_ring + 1):
        continuing = False
        visited = 0
        for offset in ring_offsets(ring):
            visited += 1
            candidate = origin_hash.add_offset(offset)

            d = min_distance_to_geohash(origin, candidate, distance, closest_latitude)
            if d > radius:
                continue

            continuing = True
            if candidate not in seen:
                seen.add(candidate)
                result.append(candidate)

        logger.debug(
            "Ring %d around %s: visited %d cells, %d kept so far",
            ring,
            origin_hash,
            visited,
            len(result),
        )
        if not continuing:
            break

    logger.debug("Found %d geohashes within %s of %s", len(result), radius, origin)
    return result
