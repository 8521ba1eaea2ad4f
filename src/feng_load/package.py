from __future__ import annotations

import io
import struct
from pathlib import Path
from typing import BinaryIO
from warnings import warn

from feng_core.errors import MalformedPackage, UnexpectedEndOfData
from feng_core.ids import feng_hash
from feng_core.messaging import MessageResponse
from feng_core.objects import BaseObject
from feng_core.primitives import read_exact
from feng_core.protocol import (
    CHUNK_HEADER_FMT,
    CHUNK_HEADER_LEN,
    DEFAULT_MAX_CHUNK_SIZE,
    DEFAULT_MAX_TAG_PAYLOAD,
    PACKAGE_VERSION,
)
from feng_core.resources import ResourceRequest
from feng_core.tags import Tag, TagRegistry, TagStream

from .chunks import CHUNK_HANDLERS, FrontendChunk, FrontendChunkBlock


class Package:
    """A decoded frontend package: objects plus package-level routing data."""

    def __init__(self, name: str = "", version: int = PACKAGE_VERSION):
        self.name = name
        self.version = version
        self.objects: list[BaseObject] = []
        self.resource_requests: list[ResourceRequest] = []
        self.message_target_lists: list[list[int]] = []
        self.message_responses: list[MessageResponse] = []

    def find_object(self, guid: int) -> BaseObject | None:
        return next((o for o in self.objects if o.guid == guid), None)

    def find_object_by_name(self, name: str) -> BaseObject | None:
        h = feng_hash(name)
        return next((o for o in self.objects if o.name_hash == h), None)


class PackageReader:
    """Reads a package chunk by chunk.

    Any fatal error abandons the whole package: read() either returns a
    complete Package or raises.
    """

    def __init__(
        self,
        f: BinaryIO,
        handlers: dict[bytes, FrontendChunk] | None = None,
        max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
        max_tag_payload: int = DEFAULT_MAX_TAG_PAYLOAD,
    ):
        self.f = f
        self.handlers = CHUNK_HANDLERS if handlers is None else handlers
        self.max_chunk_size = max_chunk_size
        self.max_tag_payload = max_tag_payload
        self.pending_parents: list[tuple[BaseObject, int]] = []
        self.open_streams: list[TagStream] = []
        self.scan_stats = {
            "chunks": 0,
            "tags": 0,
            "skipped_chunks": 0,
            "skipped_tags": 0,
            "objects": 0,
        }

    def get_scan_stats(self) -> dict:
        return dict(self.scan_stats)

    def tag_stream(self, block: FrontendChunkBlock, registry: TagRegistry) -> TagStream:
        """TagStream over a chunk body, bounded by this reader's limits and counted in scan_stats."""
        tag_stream = TagStream(self.f, block.size, registry, max_payload=self.max_tag_payload)
        self.open_streams.append(tag_stream)
        return tag_stream

    def _close_streams(self) -> None:
        for tag_stream in self.open_streams:
            self.scan_stats["tags"] += tag_stream.stats["tags"]
        self.open_streams.clear()

    def skip_tag(self, tag: Tag) -> None:
        self.scan_stats["skipped_tags"] += 1

    def link_parent(self, obj: BaseObject, parent_guid: int) -> None:
        # Parents may be declared after their children; resolved after the last chunk.
        self.pending_parents.append((obj, parent_guid))

    def _next_block(self) -> FrontendChunkBlock | None:
        start_off = self.f.tell()
        header = self.f.read(CHUNK_HEADER_LEN)

        # Clean EOF
        if len(header) == 0:
            return None
        if len(header) < CHUNK_HEADER_LEN:
            raise UnexpectedEndOfData(CHUNK_HEADER_LEN, len(header), start_off)

        code, size = struct.unpack(CHUNK_HEADER_FMT, header)
        if size > self.max_chunk_size:
            raise MalformedPackage(f"Chunk {code!r} size {size} exceeds limit {self.max_chunk_size}")
        return FrontendChunkBlock(code, size, start_off + CHUNK_HEADER_LEN)

    def read(self) -> Package:
        package = Package()

        while True:
            block = self._next_block()
            if block is None:
                break

            handler = self.handlers.get(block.code)
            if handler is None:
                warn(f"Skipping unknown chunk {block.code!r} at offset {block.offset - CHUNK_HEADER_LEN}")
                read_exact(self.f, block.size)
                self.scan_stats["skipped_chunks"] += 1
                continue

            handler.read(package, block, self, self.f)
            self._close_streams()
            self.scan_stats["chunks"] += 1

            leftover = block.end - self.f.tell()
            if leftover > 0:
                warn(f"Ignoring {leftover} trailing bytes in chunk {block.code!r}")
                read_exact(self.f, leftover)

        self._resolve_parents(package)
        self.scan_stats["objects"] = len(package.objects)
        return package

    def _resolve_parents(self, package: Package) -> None:
        for obj, guid in self.pending_parents:
            parent = package.find_object(guid)
            if parent is None:
                raise MalformedPackage(f"Object {obj.name!r} references unknown parent 0x{guid:08X}")
            obj.parent = parent


def read_package(f: BinaryIO, **kwargs) -> Package:
    return PackageReader(f, **kwargs).read()


def load_package(path: Path, **kwargs) -> Package:
    with open(path, "rb") as f:
        return read_package(f, **kwargs)


def parse_package(data: bytes, **kwargs) -> Package:
    return read_package(io.BytesIO(data), **kwargs)
