import io
import struct

import pytest

from feng_core.errors import UnexpectedEndOfData
from feng_core.primitives import (
    COLOR_SIZE,
    QUATERNION_SIZE,
    Color4,
    Quaternion,
    Vector2,
    Vector3,
    read_color,
    read_quaternion,
    read_string,
    read_vec2,
    read_vec3,
    write_color,
    write_quaternion,
    write_vec2,
    write_vec3,
)


def test_color_round_trip_boundaries():
    for c in (Color4(0, 0, 0, 0), Color4(255, 255, 255, 255), Color4(1, 2, 3, 4)):
        buf = io.BytesIO()
        write_color(buf, c)
        assert len(buf.getvalue()) == COLOR_SIZE == 16
        buf.seek(0)
        assert read_color(buf) == c


def test_color_wire_order_is_bgra_uint32():
    buf = io.BytesIO()
    write_color(buf, Color4(blue=1, green=2, red=3, alpha=4))
    assert buf.getvalue() == struct.pack("<4I", 1, 2, 3, 4)


def test_vectors_are_little_endian_float32():
    buf = io.BytesIO()
    write_vec3(buf, Vector3(1.0, -2.5, 0.0))
    write_vec2(buf, Vector2(0.25, 8.0))
    assert buf.getvalue() == struct.pack("<3f", 1.0, -2.5, 0.0) + struct.pack("<2f", 0.25, 8.0)

    buf.seek(0)
    assert read_vec3(buf) == Vector3(1.0, -2.5, 0.0)
    assert read_vec2(buf) == Vector2(0.25, 8.0)


def test_identity_quaternion_round_trip():
    assert Quaternion() == (0.0, 0.0, 0.0, 1.0)
    buf = io.BytesIO()
    write_quaternion(buf, Quaternion())
    assert len(buf.getvalue()) == QUATERNION_SIZE
    buf.seek(0)
    assert read_quaternion(buf) == Quaternion()


def test_short_read_raises_unexpected_end():
    with pytest.raises(UnexpectedEndOfData) as exc:
        read_vec3(io.BytesIO(b"\x00" * 11))
    assert exc.value.needed == 12
    assert exc.value.available == 11
    assert isinstance(exc.value, ValueError)


def test_read_string_drops_padding():
    assert read_string(io.BytesIO(b"LOGO\x00\x00"), 6) == "LOGO"
