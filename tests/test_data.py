from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from feng_core.data import ColoredImageData, ImageData, ObjectData
from feng_core.errors import UnexpectedEndOfData
from feng_core.primitives import COLOR_SIZE, Color4, Quaternion, Vector2, Vector3

BASE_FIELDS = dict(
    color=Color4(255, 128, 0, 255),
    pivot=Vector3(0.5, 0.5, 0.0),
    position=Vector3(-10.0, 20.25, 3.0),
    rotation=Quaternion(0.0, 0.0, 0.0, 1.0),
    size=Vector3(64.0, 64.0, 1.0),
)

SAMPLES = [
    ObjectData(),
    ObjectData(**BASE_FIELDS),
    ImageData(**BASE_FIELDS, upper_left=Vector2(0.25, 0.0), lower_right=Vector2(0.75, 1.0)),
    ColoredImageData(
        **BASE_FIELDS,
        top_left=Color4(0, 0, 0, 0),
        top_right=Color4(255, 255, 255, 255),
        bottom_right=Color4(1, 2, 3, 4),
        bottom_left=Color4(255, 0, 255, 0),
    ),
    ColoredImageData(),
]


def encode(block) -> bytes:
    buf = io.BytesIO()
    block.write(buf)
    return buf.getvalue()


def decode(cls, data: bytes):
    block = cls()
    block.read(io.BytesIO(data))
    return block


def test_encoded_sizes():
    assert ObjectData.SIZE == 68
    assert ImageData.SIZE == 84
    assert ColoredImageData.SIZE == 148


@pytest.mark.parametrize("block", SAMPLES, ids=lambda b: type(b).__name__)
def test_round_trip(block):
    data = encode(block)
    assert len(data) == type(block).SIZE
    assert decode(type(block), data) == block


def test_derived_blocks_start_with_base_layout():
    base = encode(ObjectData(**BASE_FIELDS))
    image = ImageData(**BASE_FIELDS, upper_left=Vector2(0.5, 0.5))
    colored = ColoredImageData(**BASE_FIELDS, upper_left=Vector2(0.5, 0.5), top_left=Color4(9, 9, 9, 9))

    assert encode(image)[:ObjectData.SIZE] == base
    assert encode(colored)[:ObjectData.SIZE] == base
    assert encode(colored)[:ImageData.SIZE] == encode(image)


def test_base_reader_stops_before_subtype_fields():
    colored = SAMPLES[3]
    f = io.BytesIO(encode(colored))
    base = ObjectData()
    base.read(f)

    assert f.tell() == ObjectData.SIZE
    assert base == ObjectData(**BASE_FIELDS)


def test_truncated_block_raises():
    with pytest.raises(UnexpectedEndOfData):
        decode(ColoredImageData, encode(ImageData()))


@pytest.mark.parametrize("block", SAMPLES, ids=lambda b: type(b).__name__)
def test_clone_is_equal_distinct_and_same_type(block):
    copy = block.clone()
    assert type(copy) is type(block)
    assert copy == block
    assert copy is not block

    copy.position = Vector3(9.0, 9.0, 9.0)
    copy.color = Color4(1, 1, 1, 1)
    assert block.position != Vector3(9.0, 9.0, 9.0)
    assert block.color != Color4(1, 1, 1, 1)


def test_blocks_of_different_kinds_are_not_equal():
    assert ObjectData() != ImageData()
    assert ImageData() != ColoredImageData()


@dataclass
class GlowImageData(ColoredImageData):
    SIZE: ClassVar[int] = ColoredImageData.SIZE + COLOR_SIZE

    glow: Color4 = field(default_factory=Color4)

    def _copy_from(self, other: GlowImageData) -> None:
        super()._copy_from(other)
        self.glow = other.glow

    def clone(self) -> GlowImageData:
        result = GlowImageData()
        result._copy_from(self)
        return result


def test_new_kind_extends_copy_chain():
    block = GlowImageData(
        **BASE_FIELDS,
        upper_left=Vector2(0.25, 0.25),
        top_left=Color4(1, 2, 3, 4),
        top_right=Color4(5, 6, 7, 8),
        bottom_right=Color4(9, 10, 11, 12),
        bottom_left=Color4(13, 14, 15, 16),
        glow=Color4(200, 100, 50, 255),
    )
    copy = block.clone()
    assert type(copy) is GlowImageData
    assert copy == block
    assert copy.top_left == Color4(1, 2, 3, 4)
