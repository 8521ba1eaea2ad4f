"""ObjectData blocks carried by an object's SA tag.

Every block starts with the exact layout of the block it extends: read and
write delegate to the parent class first, then handle their own fields in
declared order. A new object kind with extra attributes adds one subclass
following the same pattern.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar

from .primitives import (
    COLOR_SIZE,
    QUATERNION_SIZE,
    VEC2_SIZE,
    VEC3_SIZE,
    Color4,
    Quaternion,
    Vector2,
    Vector3,
    read_color,
    read_quaternion,
    read_vec2,
    read_vec3,
    write_color,
    write_quaternion,
    write_vec2,
    write_vec3,
)


@dataclass
class ObjectData:
    """Attributes common to every object: color, pivot, position, rotation, size."""

    SIZE: ClassVar[int] = COLOR_SIZE + 3 * VEC3_SIZE + QUATERNION_SIZE

    color: Color4 = field(default_factory=Color4)
    pivot: Vector3 = field(default_factory=Vector3)
    position: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)
    size: Vector3 = field(default_factory=Vector3)

    def _copy_from(self, other: ObjectData) -> None:
        self.color = other.color
        self.pivot = other.pivot
        self.position = other.position
        self.rotation = other.rotation
        self.size = other.size

    def clone(self) -> ObjectData:
        result = ObjectData()
        result._copy_from(self)
        return result

    def read(self, f: BinaryIO) -> None:
        self.color = read_color(f)
        self.pivot = read_vec3(f)
        self.position = read_vec3(f)
        self.rotation = read_quaternion(f)
        self.size = read_vec3(f)

    def write(self, f: BinaryIO) -> None:
        write_color(f, self.color)
        write_vec3(f, self.pivot)
        write_vec3(f, self.position)
        write_quaternion(f, self.rotation)
        write_vec3(f, self.size)


@dataclass
class ImageData(ObjectData):
    """Adds the texture coordinates of the image's corners."""

    SIZE: ClassVar[int] = ObjectData.SIZE + 2 * VEC2_SIZE

    upper_left: Vector2 = field(default_factory=Vector2)
    lower_right: Vector2 = field(default_factory=lambda: Vector2(1.0, 1.0))

    def _copy_from(self, other: ImageData) -> None:
        super()._copy_from(other)
        self.upper_left = other.upper_left
        self.lower_right = other.lower_right

    def clone(self) -> ImageData:
        result = ImageData()
        result._copy_from(self)
        return result

    def read(self, f: BinaryIO) -> None:
        super().read(f)
        self.upper_left = read_vec2(f)
        self.lower_right = read_vec2(f)

    def write(self, f: BinaryIO) -> None:
        super().write(f)
        write_vec2(f, self.upper_left)
        write_vec2(f, self.lower_right)


@dataclass
class ColoredImageData(ImageData):
    SIZE: ClassVar[int] = ImageData.SIZE + 4 * COLOR_SIZE

    top_left: Color4 = field(default_factory=Color4)
    top_right: Color4 = field(default_factory=Color4)
    bottom_right: Color4 = field(default_factory=Color4)
    bottom_left: Color4 = field(default_factory=Color4)

    def _copy_from(self, other: ColoredImageData) -> None:
        super()._copy_from(other)
        self.top_left = other.top_left
        self.top_right = other.top_right
        self.bottom_right = other.bottom_right
        self.bottom_left = other.bottom_left

    def clone(self) -> ColoredImageData:
        result = ColoredImageData()
        result._copy_from(self)
        return result

    def read(self, f: BinaryIO) -> None:
        super().read(f)
        self.top_left = read_color(f)
        self.top_right = read_color(f)
        self.bottom_right = read_color(f)
        self.bottom_left = read_color(f)

    def write(self, f: BinaryIO) -> None:
        super().write(f)
        write_color(f, self.top_left)
        write_color(f, self.top_right)
        write_color(f, self.bottom_right)
        write_color(f, self.bottom_left)
