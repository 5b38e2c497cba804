import pytest
from hypothesis import given, strategies as st

from geohash_nearby.geohash import (
    BASE32,
    Geohash,
    Offset,
    Position,
    Rectangle,
    bit_widths,
    bits_to_coordinate,
    compact,
    coordinate_to_bits,
    decode,
    encode,
    spacing,
)


def _geohash_for(precision):
    lat_bits, lon_bits = bit_widths(precision)
    return st.builds(
        Geohash,
        precision=st.just(precision),
        lat=st.integers(0, (1 << lat_bits) - 1),
        lon=st.integers(0, (1 << lon_bits) - 1),
    )


geohashes = st.integers(1, 12).flatmap(_geohash_for)


@pytest.mark.parametrize(
    "bits, count, expected",
    [
        (0b11, 2, 0b101),
        (0b101, 3, 0b10001),
        (0b1111111, 7, 0b1010101010101),
        (0b1111001, 7, 0b1010101000001),
        (0b11111001, 8, 0b101010101000001),
    ],
)
def test_spacing(bits, count, expected):
    assert spacing(bits, count) == expected
    assert compact(expected, count) == bits


@pytest.mark.parametrize(
    "precision, expected",
    [(1, (2, 3)), (2, (5, 5)), (5, (12, 13)), (12, (30, 30))],
)
def test_bit_widths(precision, expected):
    assert bit_widths(precision) == expected


def test_coordinate_bits_truncate_to_lower_edge():
    assert coordinate_to_bits(0.7, -90, 90, 7) == 64
    assert bits_to_coordinate(64, -90, 90, 7) == 0.0
    assert coordinate_to_bits(90, -90, 90, 7) == 127


@pytest.mark.parametrize(
    "lat, lon, precision, expected",
    [
        (48.669, 22.445, 3, "u2x"),
        (48.669, 22.445, 4, "u2xu"),
        (48.669, 22.445, 5, "u2xuy"),
        (48.669, 22.445, 6, "u2xuye"),
        (48.66746, 22.44043, 7, "u2xuyes"),
        (48.66746, 22.44043, 8, "u2xuyess"),
        (-10.669, 12.445, 3, "kq0"),
        (-10.669, 12.445, 4, "kq0g"),
        (-10.669, 12.445, 5, "kq0g7"),
        (-10.669, 12.445, 6, "kq0g71"),
        (-10.6698, 12.4457, 7, "kq0g71w"),
        (28.3218, -62.0434, 7, "dt5ch5v"),
        (-17.3218, -45.0434, 7, "6uzvrn8"),
    ],
)
def test_encode(lat, lon, precision, expected):
    assert str(encode(Position(lat, lon), precision)) == expected


def test_encode_upper_bounds_stay_on_grid():
    assert str(encode(Position(90, 180), 5)) == "zzzzz"


@pytest.mark.parametrize(
    "lat, lon, precision",
    [
        (0, 0, 0),
        (0, 0, 13),
        (91, 0, 5),
        (0, -180.5, 5),
        (0, 0, 2.5),
        (0, 0, True),
        (0, 0, False),
    ],
)
def test_encode_rejects_bad_input(lat, lon, precision):
    with pytest.raises(ValueError):
        encode(Position(lat, lon), precision)


class TestNavigation:
    def test_left_and_right(self):
        h = encode(Position(-17.3218, -45.0434), 5)
        assert str(h) == "6uzvr"
        assert str(h.left()) == "6uzvq"
        assert str(h.right()) == "7hbj2"

        assert encode(Position(-17.3218, -45.0200), 5) == h

    def test_top_and_bottom(self):
        h = encode(Position(-17.3218, -45.0434), 5)
        assert str(h.top()) == "6uzvx"
        assert str(h.bottom()) == "6uzvp"

    def test_wraps_at_south_west_corner(self):
        h = encode(Position(-89.97802734, -179.97802734), 5)
        assert str(h) == "00000"
        assert str(h.left()) == "pbpbp"
        assert str(h.right()) == "00001"
        assert str(h.top()) == "00002"
        assert str(h.bottom()) == "bpbpb"

    def test_wraps_at_north_east_corner(self):
        h = encode(Position(89.97802734, 179.97802734), 5)
        assert str(h) == "zzzzz"
        assert str(h.left()) == "zzzzy"
        assert str(h.right()) == "bpbpb"
        assert str(h.top()) == "pbpbp"
        assert str(h.bottom()) == "zzzzx"

    def test_add_offset_returns_new_value(self):
        h = encode(Position(0, 0), 5)
        moved = h.add_offset(Offset(lat=2, lon=-3))
        assert moved is not h
        assert moved == h.top().top().left().left().left()
        assert str(h) == "s0000"

    def test_neighbors(self):
        h = decode("6uzvr")
        neighbors = {k: str(v) for k, v in h.neighbors().items()}
        assert neighbors["n"] == "6uzvx"
        assert neighbors["s"] == "6uzvp"
        assert neighbors["e"] == "7hbj2"
        assert neighbors["w"] == "6uzvq"
        assert h.neighbors()["ne"] == h.top().right()
        assert h.neighbors()["sw"] == h.bottom().left()
        assert len(set(neighbors.values())) == 8

    @given(geohashes)
    def test_steps_are_cyclic_inverses(self, h):
        assert h.right().left() == h
        assert h.left().right() == h
        assert h.top().bottom() == h
        assert h.bottom().top() == h


def test_rectangle():
    h = encode(Position(0, 0), 5)
    assert str(h) == "s0000"
    assert h.rectangle() == Rectangle(
        bottom_left=Position(0, 0),
        bottom_right=Position(0, 0.0439453125),
        top_left=Position(0.0439453125, 0),
        top_right=Position(0.0439453125, 0.0439453125),
    )


def test_cell_size_and_center():
    h = encode(Position(0.7, 0.7), 3)
    assert str(h) == "s00"
    assert h.cell_size() == (1.40625, 1.40625)
    assert h.center() == Position(0.703125, 0.703125)


def test_decode():
    h = decode("u2xuyess")
    assert h == encode(Position(48.66746, 22.44043), 8)
    assert decode("kq0") == encode(Position(-10.669, 12.445), 3)


@pytest.mark.parametrize("text", ["", "u2a", "0123456789bcd"])
def test_decode_rejects_bad_input(text):
    with pytest.raises(ValueError):
        decode(text)


@given(
    st.floats(-90, 90),
    st.floats(-180, 180),
    st.integers(1, 12),
)
def test_pos_is_bottom_left_of_encoded_cell(lat, lon, precision):
    h = encode(Position(lat, lon), precision)
    lat_size, lon_size = h.cell_size()
    corner = h.pos()
    assert -1e-9 <= lat - corner.lat <= lat_size + 1e-9
    assert -1e-9 <= lon - corner.lon <= lon_size + 1e-9


@given(geohashes)
def test_string_form(h):
    text = str(h)
    assert len(text) == h.precision
    assert all(c in BASE32 for c in text)
    assert decode(text) == h
