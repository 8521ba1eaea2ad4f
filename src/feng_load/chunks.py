from __future__ import annotations

import io
from typing import TYPE_CHECKING, BinaryIO, NamedTuple
from warnings import warn

from feng_core.errors import MalformedPackage
from feng_core.ids import feng_hash
from feng_core.messaging import MessageResponseTagProcessor
from feng_core.objects import BaseObject, ObjectFlags, create_object
from feng_core.primitives import read_exact, read_string, read_u32
from feng_core.protocol import (
    CHUNK_OBJECT,
    CHUNK_PACKAGE_HEADER,
    CHUNK_PACKAGE_RESPONSES,
    CHUNK_RESOURCE_REQUESTS,
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
from feng_core.resources import read_resource_request_tag
from feng_core.tags import MESSAGE_TAGS, OBJECT_TAGS, RESOURCE_TAGS, Tag

if TYPE_CHECKING:
    from .package import Package, PackageReader


class FrontendChunkBlock(NamedTuple):
    code: bytes
    size: int
    offset: int

    @property
    def end(self) -> int:
        return self.offset + self.size


class FrontendChunk:
    """Reads one chunk body into the package being built."""

    code: bytes = b""

    def read(self, package: Package, block: FrontendChunkBlock, reader: PackageReader, f: BinaryIO) -> None:
        raise NotImplementedError


class PackageHeaderChunk(FrontendChunk):
    code = CHUNK_PACKAGE_HEADER

    def read(self, package, block, reader, f):
        body = io.BytesIO(read_exact(f, block.size))
        package.version = read_u32(body)
        package.name = read_string(body, read_u32(body))


class ResourceRequestsChunk(FrontendChunk):
    code = CHUNK_RESOURCE_REQUESTS

    def read(self, package, block, reader, f):
        tag_stream = reader.tag_stream(block, RESOURCE_TAGS)
        while tag_stream.has_tag():
            tag = tag_stream.next_tag()
            if not read_resource_request_tag(package.resource_requests, tag):
                reader.skip_tag(tag)


class ObjectChunk(FrontendChunk):
    """One object. The ObjectType tag must precede every other object tag."""

    code = CHUNK_OBJECT

    def read(self, package, block, reader, f):
        tag_processor = MessageResponseTagProcessor()
        tag_stream = reader.tag_stream(block, OBJECT_TAGS)
        obj: BaseObject | None = None

        while tag_stream.has_tag():
            tag = tag_stream.next_tag()
            if tag.name is None:
                reader.skip_tag(tag)
            elif tag.kind == TAG_OBJECT_TYPE:
                if obj is not None:
                    raise MalformedPackage(f"Second ObjectType tag at offset {tag.offset}")
                obj = create_object(tag.value)
            elif obj is None:
                raise MalformedPackage(f"{tag.name} at offset {tag.offset} before ObjectType")
            else:
                self.process_tag(tag_processor, package, reader, obj, tag)

        if obj is None:
            raise MalformedPackage(f"Object chunk at offset {block.offset} has no ObjectType tag")
        if obj.name is not None and obj.name_hash != feng_hash(obj.name):
            warn(f"Name hash 0x{obj.name_hash:08X} does not match object name {obj.name!r}")
        package.objects.append(obj)

    def process_tag(self, tag_processor, package, reader, obj, tag: Tag) -> None:
        if tag.kind == TAG_OBJECT_GUID:
            obj.guid = tag.value
        elif tag.kind == TAG_OBJECT_NAME:
            obj.name = tag.value
        elif tag.kind == TAG_OBJECT_NAME_HASH:
            obj.name_hash = tag.value
        elif tag.kind == TAG_OBJECT_FLAGS:
            obj.flags = ObjectFlags(tag.value)
        elif tag.kind == TAG_OBJECT_RESOURCE:
            if tag.value >= len(package.resource_requests):
                raise MalformedPackage(
                    f"Resource index {tag.value} out of range ({len(package.resource_requests)} requests)"
                )
            obj.resource_request = package.resource_requests[tag.value]
        elif tag.kind == TAG_OBJECT_PARENT:
            reader.link_parent(obj, tag.value)
        elif tag.kind == TAG_OBJECT_DATA:
            body = io.BytesIO(tag.value)
            obj.data.read(body)
            extra = tag.length - body.tell()
            if extra:
                warn(f"Ignoring {extra} trailing bytes in {type(obj.data).__name__} at offset {tag.offset}")
        elif tag.kind == TAG_OBJECT_SCRIPT:
            body = io.BytesIO(tag.value)
            script = obj.create_script()
            script.read(body)
            extra = tag.length - body.tell()
            if extra:
                warn(f"Ignoring {extra} trailing bytes in script 0x{script.id:08X} at offset {tag.offset}")
        elif not tag_processor.process_tag(obj, tag):
            reader.skip_tag(tag)


class PackageResponsesChunk(FrontendChunk):
    """Package-level message target lists and message responses."""

    code = CHUNK_PACKAGE_RESPONSES

    def read(self, package, block, reader, f):
        tag_processor = MessageResponseTagProcessor()
        tag_stream = reader.tag_stream(block, MESSAGE_TAGS)
        expected_lists = None

        while tag_stream.has_tag():
            tag = tag_stream.next_tag()
            if tag.kind == TAG_MESSAGE_TARGET_COUNT:
                expected_lists = tag.value
            elif tag.kind == TAG_MESSAGE_TARGET_LIST:
                package.message_target_lists.append(tag.value)
            elif not tag_processor.process_tag(package, tag):
                reader.skip_tag(tag)

        if expected_lists is not None and expected_lists != len(package.message_target_lists):
            warn(
                f"MessageTargetCount says {expected_lists} lists, "
                f"found {len(package.message_target_lists)}"
            )


CHUNK_HANDLERS: dict[bytes, FrontendChunk] = {
    handler.code: handler
    for handler in (PackageHeaderChunk(), ResourceRequestsChunk(), ObjectChunk(), PackageResponsesChunk())
}
