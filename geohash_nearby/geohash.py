from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"  # Standard Base32 characters
BASE32_MAP = {c: i for i, c in enumerate(BASE32)}

MAX_PRECISION = 12  # 60 bits, 30 per axis at most
LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


class Position(NamedTuple):
    """A latitude/longitude pair in degrees."""

    lat: float
    lon: float


class Rectangle(NamedTuple):
    """The four corners of a geohash cell."""

    bottom_left: Position
    bottom_right: Position
    top_left: Position
    top_right: Position


class Offset(NamedTuple):
    """Signed cell-grid steps relative to some origin cell."""

    lat: int
    lon: int

    def add(self, other: Offset) -> Offset:
        return Offset(self.lat + other.lat, self.lon + other.lon)


def bit_widths(precision: int) -> tuple[int, int]:
    """Split ``precision * 5`` bits into (lat_bits, lon_bits).

    Longitude takes the extra bit when the total is odd.
    """
    bit_count = precision * 5
    lat_bits = bit_count >> 1
    return lat_bits, bit_count - lat_bits


def coordinate_to_bits(value: float, lo: float, hi: float, bit_width: int) -> int:
    """Map ``value`` onto one of ``2 ** bit_width`` cells, truncating.

    The upper bound of the range lands on the last cell instead of
    overflowing the bit width.
    """
    bits = int((value - lo) * (1 << bit_width) / (hi - lo))
    return min(bits, (1 << bit_width) - 1)


def bits_to_coordinate(bits: int, lo: float, hi: float, bit_width: int) -> float:
    """Return the lower edge of the cell numbered ``bits``."""
    return bits * (hi - lo) / (1 << bit_width) + lo


def _spacing_nibble(nibble: int) -> int:
    result = nibble & 0b1
    result |= (nibble & 0b10) << 1
    result |= (nibble & 0b100) << 2
    result |= (nibble & 0b1000) << 3
    return result


def spacing(bits: int, count: int) -> int:
    """Move bit ``i`` of the low ``count`` bits to position ``2 * i``.

    >>> bin(spacing(0b101, 3))
    '0b10001'
    """
    bits &= (1 << count) - 1
    result = 0
    for index in range((count + 3) // 4):
        result |= _spacing_nibble((bits >> (4 * index)) & 0xF) << (8 * index)
    return result


def compact(bits: int, count: int) -> int:
    """Inverse of :func:`spacing`: gather every even bit into ``count`` bits."""
    result = 0
    for index in range(count):
        result |= ((bits >> (2 * index)) & 1) << index
    return result


def _check_precision(precision: int) -> None:
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"Precision must be an integer, got {precision!r}")
    if not 1 <= precision <= MAX_PRECISION:
        raise ValueError(f"Precision must be between 1 and {MAX_PRECISION}")


def _check_range(value: float, lo: float, hi: float) -> None:
    if not lo <= value <= hi:
        raise ValueError(f"Value {value} must be between {lo} and {hi}")


@dataclass(frozen=True)
class Geohash:
    """A geohash cell as raw latitude and longitude bit patterns.

    Navigation treats the bit grid as a torus on both axes: stepping past
    the last row wraps to the first one, so moving north from the north
    pole row lands on the south pole row. That is not geographically
    meaningful for latitude but keeps every step invertible.
    """

    precision: int
    lat: int  # lat bits
    lon: int  # lon bits

    def __str__(self) -> str:
        lat_bits, lon_bits = bit_widths(self.precision)
        lat = spacing(self.lat, lat_bits)
        lon = spacing(self.lon, lon_bits)

        # The first emitted bit is always a longitude bit.
        if lat_bits == lon_bits:
            value = lat | (lon << 1)
        else:
            value = (lat << 1) | lon

        chars = []
        for _ in range(self.precision):
            chars.append(BASE32[value & 0b11111])
            value >>= 5
        return "".join(reversed(chars))

    def add_offset(self, offset: Offset) -> Geohash:
        """Return the cell ``offset`` steps away, wrapping on both axes."""
        lat_bits, lon_bits = bit_widths(self.precision)
        lat_mask = (1 << lat_bits) - 1
        lon_mask = (1 << lon_bits) - 1

        return Geohash(
            precision=self.precision,
            lat=(self.lat + lat_mask + 1 + offset.lat) & lat_mask,
            lon=(self.lon + lon_mask + 1 + offset.lon) & lon_mask,
        )

    def left(self) -> Geohash:
        return self.add_offset(Offset(lat=0, lon=-1))

    def right(self) -> Geohash:
        return self.add_offset(Offset(lat=0, lon=1))

    def top(self) -> Geohash:
        return self.add_offset(Offset(lat=1, lon=0))

    def bottom(self) -> Geohash:
        return self.add_offset(Offset(lat=-1, lon=0))

    def pos(self) -> Position:
        """Return the bottom left corner of this cell."""
        lat_bits, lon_bits = bit_widths(self.precision)
        return Position(
            lat=bits_to_coordinate(self.lat, *LAT_RANGE, lat_bits),
            lon=bits_to_coordinate(self.lon, *LON_RANGE, lon_bits),
        )

    def rectangle(self) -> Rectangle:
        """Return the four corners, each derived from a neighbouring cell."""
        top = self.top()
        return Rectangle(
            bottom_left=self.pos(),
            bottom_right=self.right().pos(),
            top_left=top.pos(),
            top_right=top.right().pos(),
        )

    def cell_size(self) -> tuple[float, float]:
        """Size of this cell in degrees.

        Returns:
            (latitude_size, longitude_size)
        """
        lat_bits, lon_bits = bit_widths(self.precision)
        lat_err = (LAT_RANGE[1] - LAT_RANGE[0]) / (1 << lat_bits)
        lon_err = (LON_RANGE[1] - LON_RANGE[0]) / (1 << lon_bits)
        return lat_err, lon_err

    def center(self) -> Position:
        lat_size, lon_size = self.cell_size()
        corner = self.pos()
        return Position(corner.lat + lat_size / 2, corner.lon + lon_size / 2)

    def neighbors(self) -> dict[str, Geohash]:
        """
        Compute the 8 neighboring geohashes (N, S, E, W, NE, NW, SE, SW).
        """
        directions = {
            "n": Offset(1, 0),
            "s": Offset(-1, 0),
            "e": Offset(0, 1),
            "w": Offset(0, -1),
            "ne": Offset(1, 1),
            "se": Offset(-1, 1),
            "nw": Offset(1, -1),
            "sw": Offset(-1, -1),
        }
        return {name: self.add_offset(step) for name, step in directions.items()}


def encode(pos: Position, precision: int) -> Geohash:
    """Encode a position into the geohash cell containing it."""
    _check_precision(precision)
    _check_range(pos.lat, *LAT_RANGE)
    _check_range(pos.lon, *LON_RANGE)

    lat_bits, lon_bits = bit_widths(precision)
    return Geohash(
        precision=precision,
        lat=coordinate_to_bits(pos.lat, *LAT_RANGE, lat_bits),
        lon=coordinate_to_bits(pos.lon, *LON_RANGE, lon_bits),
    )


def decode(geohash: str) -> Geohash:
    """Parse a geohash string back into its cell."""
    _check_precision(len(geohash))
    if not all(c in BASE32_MAP for c in geohash):
        raise ValueError(f"Invalid character in geohash {geohash!r}")

    value = 0
    for char in geohash:
        value = (value << 5) | BASE32_MAP[char]

    lat_bits, lon_bits = bit_widths(len(geohash))
    if lat_bits == lon_bits:
        lat, lon = compact(value, lat_bits), compact(value >> 1, lon_bits)
    else:
        lat, lon = compact(value >> 1, lat_bits), compact(value, lon_bits)
    return Geohash(precision=len(geohash), lat=lat, lon=lon)


if __name__ == "__main__":
    cell = encode(Position(41.878738, -87.6359612), 6)  # Willis Tower

    print(f"Encoded: {cell}")
    print(f"Decoded: {decode(str(cell)).center()}")
    print(f"Rectangle: {cell.rectangle()}")
    print(f"Neighbors: { {k: str(v) for k, v in cell.neighbors().items()} }")
