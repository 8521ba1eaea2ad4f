"""Fixed-width primitive codec.

All values are little-endian. Floats are IEEE-754 float32, colors are four
uint32 channels in blue, green, red, alpha order.
"""
from __future__ import annotations

import struct
from typing import BinaryIO, NamedTuple

from .errors import UnexpectedEndOfData
from .protocol import (
    COLOR_FMT,
    NAME_ENCODING,
    QUATERNION_FMT,
    U32_FMT,
    VEC2_FMT,
    VEC3_FMT,
)


class Color4(NamedTuple):
    blue: int = 0
    green: int = 0
    red: int = 0
    alpha: int = 0


class Vector2(NamedTuple):
    x: float = 0.0
    y: float = 0.0


class Vector3(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Quaternion(NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


def _tell(f: BinaryIO) -> int | None:
    try:
        return f.tell()
    except (OSError, AttributeError):
        return None


def read_exact(f: BinaryIO, n: int) -> bytes:
    """Read exactly n bytes or raise UnexpectedEndOfData."""
    offset = _tell(f)
    data = f.read(n)
    if len(data) != n:
        raise UnexpectedEndOfData(n, len(data), offset)
    return data


def _unpack(f: BinaryIO, fmt: str) -> tuple:
    return struct.unpack(fmt, read_exact(f, struct.calcsize(fmt)))


def read_u16(f: BinaryIO) -> int:
    return _unpack(f, "<H")[0]


def read_u32(f: BinaryIO) -> int:
    return _unpack(f, U32_FMT)[0]


def read_color(f: BinaryIO) -> Color4:
    return Color4(*_unpack(f, COLOR_FMT))


def read_vec2(f: BinaryIO) -> Vector2:
    return Vector2(*_unpack(f, VEC2_FMT))


def read_vec3(f: BinaryIO) -> Vector3:
    return Vector3(*_unpack(f, VEC3_FMT))


def read_quaternion(f: BinaryIO) -> Quaternion:
    return Quaternion(*_unpack(f, QUATERNION_FMT))


def read_string(f: BinaryIO, length: int) -> str:
    """Read a fixed-length string, dropping NUL padding."""
    return read_exact(f, length).split(b"\x00", 1)[0].decode(NAME_ENCODING)


def write_u16(f: BinaryIO, value: int) -> None:
    f.write(struct.pack("<H", value))


def write_u32(f: BinaryIO, value: int) -> None:
    f.write(struct.pack(U32_FMT, value))


def write_color(f: BinaryIO, value: Color4) -> None:
    f.write(struct.pack(COLOR_FMT, *value))


def write_vec2(f: BinaryIO, value: Vector2) -> None:
    f.write(struct.pack(VEC2_FMT, *value))


def write_vec3(f: BinaryIO, value: Vector3) -> None:
    f.write(struct.pack(VEC3_FMT, *value))


def write_quaternion(f: BinaryIO, value: Quaternion) -> None:
    f.write(struct.pack(QUATERNION_FMT, *value))


def write_string(f: BinaryIO, value: str) -> None:
    f.write(value.encode(NAME_ENCODING))


COLOR_SIZE = struct.calcsize(COLOR_FMT)
VEC2_SIZE = struct.calcsize(VEC2_FMT)
VEC3_SIZE = struct.calcsize(VEC3_FMT)
QUATERNION_SIZE = struct.calcsize(QUATERNION_FMT)
