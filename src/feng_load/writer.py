"""Package writer. Emits exactly what PackageReader consumes."""
from __future__ import annotations

import io
import struct
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

from feng_core.messaging import message_response_tags
from feng_core.objects import BaseObject
from feng_core.primitives import write_string
from feng_core.protocol import (
    CHUNK_HEADER_FMT,
    CHUNK_OBJECT,
    CHUNK_PACKAGE_HEADER,
    CHUNK_PACKAGE_RESPONSES,
    CHUNK_RESOURCE_REQUESTS,
    NAME_ENCODING,
    PACKAGE_HEADER_FMT,
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
)
from feng_core.resources import resource_request_tags
from feng_core.tags import MESSAGE_TAGS, OBJECT_TAGS, RESOURCE_TAGS, TagRegistry, write_tag

from .package import Package


def write_chunk(f: BinaryIO, code: bytes, body: bytes) -> None:
    f.write(struct.pack(CHUNK_HEADER_FMT, code, len(body)))
    f.write(body)


def encode_tags(registry: TagRegistry, tags: Iterable[tuple[int, object]]) -> bytes:
    buf = io.BytesIO()
    for kind, value in tags:
        write_tag(buf, registry, kind, value)
    return buf.getvalue()


def _resource_index(package: Package, obj: BaseObject) -> int:
    req = obj.resource_request
    for i, r in enumerate(package.resource_requests):
        if r is req:
            return i
    try:
        return package.resource_requests.index(req)
    except ValueError:
        raise ValueError(f"Resource request {req.name!r} of {obj!r} is not part of the package") from None


def object_tags(package: Package, obj: BaseObject) -> Iterator[tuple[int, object]]:
    yield TAG_OBJECT_TYPE, int(obj.type)
    yield TAG_OBJECT_GUID, obj.guid
    if obj.name is not None:
        yield TAG_OBJECT_NAME, obj.name
    yield TAG_OBJECT_NAME_HASH, obj.name_hash
    yield TAG_OBJECT_FLAGS, int(obj.flags)
    if obj.resource_request is not None:
        yield TAG_OBJECT_RESOURCE, _resource_index(package, obj)
    if obj.parent is not None:
        yield TAG_OBJECT_PARENT, obj.parent.guid

    if obj.data is not None:
        buf = io.BytesIO()
        obj.data.write(buf)
        yield TAG_OBJECT_DATA, buf.getvalue()

    for script in obj.scripts:
        buf = io.BytesIO()
        script.write(buf)
        yield TAG_OBJECT_SCRIPT, buf.getvalue()

    yield from message_response_tags(obj.message_responses)


def package_response_tags(package: Package) -> Iterator[tuple[int, object]]:
    yield TAG_MESSAGE_TARGET_COUNT, len(package.message_target_lists)
    for targets in package.message_target_lists:
        yield TAG_MESSAGE_TARGET_LIST, targets
    yield from message_response_tags(package.message_responses)


def write_package(package: Package, f: BinaryIO) -> None:
    name = package.name.encode(NAME_ENCODING)
    header = io.BytesIO()
    header.write(struct.pack(PACKAGE_HEADER_FMT, package.version, len(name)))
    write_string(header, package.name)
    write_chunk(f, CHUNK_PACKAGE_HEADER, header.getvalue())

    if package.resource_requests:
        write_chunk(
            f,
            CHUNK_RESOURCE_REQUESTS,
            encode_tags(RESOURCE_TAGS, resource_request_tags(package.resource_requests)),
        )

    for obj in package.objects:
        write_chunk(f, CHUNK_OBJECT, encode_tags(OBJECT_TAGS, object_tags(package, obj)))

    if package.message_target_lists or package.message_responses:
        write_chunk(f, CHUNK_PACKAGE_RESPONSES, encode_tags(MESSAGE_TAGS, package_response_tags(package)))


def package_bytes(package: Package) -> bytes:
    buf = io.BytesIO()
    write_package(package, buf)
    return buf.getvalue()


def save_package(package: Package, path: Path) -> None:
    Path(path).write_bytes(package_bytes(package))
