"""Tag stream framing.

A chunk body is a run of tags: [Kind(2)] [Length(2)]? [Payload]. The length
field is omitted when the active registry declares a fixed payload size for
the kind. Kinds a registry does not know always carry an explicit length so
they can be skipped.
"""
from __future__ import annotations

import io
import struct
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, BinaryIO, Callable, Iterator, NamedTuple

from .errors import ChunkOverrun, MalformedPackage
from .primitives import read_exact, read_string, read_u32, write_string, write_u32
from .protocol import (
    DEFAULT_MAX_TAG_PAYLOAD,
    MAX_TAG_PAYLOAD,
    TAG_KIND_FMT,
    TAG_KIND_LEN,
    TAG_LENGTH_FMT,
    TAG_LENGTH_LEN,
    TAG_MESSAGE_RESPONSE_INFO,
    TAG_MESSAGE_TARGET_COUNT,
    TAG_MESSAGE_TARGET_LIST,
    TAG_OBJECT_DATA,
    TAG_OBJECT_FLAGS,
    TAG_OBJECT_GUID,
    TAG_OBJECT_NAME,
    TAG_OBJECT_NAME_HASH,
    TAG_OBJECT_PARENT,
    TAG_OBJECT_RESOURCE,
    TAG_OBJECT_SCRIPT,
    TAG_OBJECT_TYPE,
    TAG_RESOURCE_FLAGS,
    TAG_RESOURCE_ID,
    TAG_RESOURCE_NAME,
    TAG_RESOURCE_TYPE,
    TAG_RESPONSE_ID,
    TAG_RESPONSE_INT_PARAM,
    TAG_RESPONSE_STRING_PARAM,
    TAG_RESPONSE_TARGET,
)


class TagSpec(NamedTuple):
    name: str
    size: int | None
    decode: Callable[[BinaryIO, int], Any]
    encode: Callable[[BinaryIO, Any], None]


class Tag(NamedTuple):
    kind: int
    name: str | None
    length: int
    value: Any
    offset: int


class TagRegistry(Mapping):
    """Immutable kind -> TagSpec table shared by every stream that uses it."""

    def __init__(self, specs: Mapping[int, TagSpec]):
        self._specs = MappingProxyType(dict(specs))

    def __getitem__(self, kind: int) -> TagSpec:
        return self._specs[kind]

    def __iter__(self):
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __or__(self, other: Mapping[int, TagSpec]) -> "TagRegistry":
        return TagRegistry({**self._specs, **other})

    def kind_of(self, name: str) -> int:
        for kind, spec in self._specs.items():
            if spec.name == name:
                return kind
        raise KeyError(name)


class TagStream:
    """Frames one chunk's byte range into tags, strictly in file order."""

    def __init__(
        self, f: BinaryIO, size: int, registry: TagRegistry, max_payload: int = DEFAULT_MAX_TAG_PAYLOAD
    ):
        self.f = f
        self.start = f.tell()
        self.end = self.start + size
        self.registry = registry
        self.max_payload = max_payload
        self.exhausted = False
        self.stats = {"tags": 0}

    def remaining(self) -> int:
        return self.end - self.f.tell()

    def has_tag(self) -> bool:
        if not self.exhausted and self.remaining() >= TAG_KIND_LEN:
            return True
        self.exhausted = True
        return False

    def _check(self, kind: int | None, offset: int, end: int) -> None:
        if end > self.end:
            self.exhausted = True
            raise ChunkOverrun(kind, offset, end, self.end)

    def next_tag(self) -> Tag:
        offset = self.f.tell()
        self._check(None, offset, offset + TAG_KIND_LEN)
        (kind,) = struct.unpack(TAG_KIND_FMT, read_exact(self.f, TAG_KIND_LEN))

        spec = self.registry.get(kind)
        if spec is not None and spec.size is not None:
            length = spec.size
        else:
            self._check(kind, offset, self.f.tell() + TAG_LENGTH_LEN)
            (length,) = struct.unpack(TAG_LENGTH_FMT, read_exact(self.f, TAG_LENGTH_LEN))

        if length > self.max_payload:
            self.exhausted = True
            raise MalformedPackage(
                f"Tag 0x{kind:04X} at offset {offset} has {length} byte payload, limit {self.max_payload}"
            )
        self._check(kind, offset, self.f.tell() + length)
        payload = read_exact(self.f, length)

        self.stats["tags"] += 1
        if spec is None:
            return Tag(kind, None, length, payload, offset)
        return Tag(kind, spec.name, length, spec.decode(io.BytesIO(payload), length), offset)

    def __iter__(self) -> Iterator[Tag]:
        while self.has_tag():
            yield self.next_tag()


def write_tag(f: BinaryIO, registry: TagRegistry, kind: int, value: Any) -> None:
    """Encode one tag. Kinds missing from the registry are written as raw bytes."""
    spec = registry.get(kind)
    if spec is None:
        body = bytes(value)
    else:
        buf = io.BytesIO()
        spec.encode(buf, value)
        body = buf.getvalue()

    f.write(struct.pack(TAG_KIND_FMT, kind))
    if spec is not None and spec.size is not None:
        if len(body) != spec.size:
            raise ValueError(f"Tag {spec.name} encodes {len(body)} bytes, expected {spec.size}")
    else:
        if len(body) > MAX_TAG_PAYLOAD:
            raise ValueError(f"Tag 0x{kind:04X} payload of {len(body)} bytes exceeds {MAX_TAG_PAYLOAD}")
        f.write(struct.pack(TAG_LENGTH_FMT, len(body)))
    f.write(body)


# --- payload codecs ---

def _decode_u32(f: BinaryIO, length: int) -> int:
    return read_u32(f)


def _encode_u32(f: BinaryIO, value: int) -> None:
    try:
        write_u32(f, int(value))
    except struct.error as e:
        raise ValueError(f"{value!r} does not fit in a uint32 tag") from e


def _decode_string(f: BinaryIO, length: int) -> str:
    return read_string(f, length)


def _encode_string(f: BinaryIO, value: str) -> None:
    write_string(f, value)
    f.write(b"\x00")


def _decode_u32_list(f: BinaryIO, length: int) -> list[int]:
    if length % 4:
        raise MalformedPackage(f"uint32 list payload of {length} bytes is not a multiple of 4")
    return [read_u32(f) for _ in range(length // 4)]


def _encode_u32_list(f: BinaryIO, values: list[int]) -> None:
    for v in values:
        _encode_u32(f, v)


def _decode_raw(f: BinaryIO, length: int) -> bytes:
    return read_exact(f, length)


def _encode_raw(f: BinaryIO, value: bytes) -> None:
    f.write(value)


def u32_tag(name: str) -> TagSpec:
    return TagSpec(name, 4, _decode_u32, _encode_u32)


def string_tag(name: str) -> TagSpec:
    return TagSpec(name, None, _decode_string, _encode_string)


def u32_list_tag(name: str) -> TagSpec:
    return TagSpec(name, None, _decode_u32_list, _encode_u32_list)


def raw_tag(name: str) -> TagSpec:
    return TagSpec(name, None, _decode_raw, _encode_raw)


# --- vocabularies ---

MESSAGE_TAGS = TagRegistry({
    TAG_MESSAGE_TARGET_COUNT: u32_tag("MessageTargetCount"),
    TAG_MESSAGE_TARGET_LIST: u32_list_tag("MessageTargetList"),
    TAG_MESSAGE_RESPONSE_INFO: u32_tag("MessageResponseInfo"),
    TAG_RESPONSE_ID: u32_tag("ResponseId"),
    TAG_RESPONSE_INT_PARAM: u32_tag("ResponseIntParam"),
    TAG_RESPONSE_STRING_PARAM: string_tag("ResponseStringParam"),
    TAG_RESPONSE_TARGET: u32_tag("ResponseTarget"),
})

OBJECT_TAGS = TagRegistry({
    TAG_OBJECT_TYPE: u32_tag("ObjectType"),
    TAG_OBJECT_GUID: u32_tag("ObjectGuid"),
    TAG_OBJECT_NAME: string_tag("ObjectName"),
    TAG_OBJECT_NAME_HASH: u32_tag("ObjectNameHash"),
    TAG_OBJECT_FLAGS: u32_tag("ObjectFlags"),
    TAG_OBJECT_RESOURCE: u32_tag("ObjectResourceIndex"),
    TAG_OBJECT_PARENT: u32_tag("ObjectParent"),
    TAG_OBJECT_DATA: raw_tag("ObjectData"),
    TAG_OBJECT_SCRIPT: raw_tag("ObjectScript"),
}) | MESSAGE_TAGS

RESOURCE_TAGS = TagRegistry({
    TAG_RESOURCE_NAME: string_tag("ResourceName"),
    TAG_RESOURCE_ID: u32_tag("ResourceId"),
    TAG_RESOURCE_TYPE: u32_tag("ResourceType"),
    TAG_RESOURCE_FLAGS: u32_tag("ResourceFlags"),
})
