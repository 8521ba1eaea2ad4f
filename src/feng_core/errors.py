"""FEng package errors.

Every fatal decode condition derives from ValueError so callers that only
guard against bad input keep working. Messages are single-line.
"""
from __future__ import annotations


class FEngError(ValueError):
    pass


class UnexpectedEndOfData(FEngError):
    """A primitive read ran past the available bytes."""

    def __init__(self, needed: int, available: int, offset: int | None = None):
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Unexpected end of data{where} (needed {needed}, got {available})")
        self.needed = needed
        self.available = available
        self.offset = offset


class ChunkOverrun(FEngError):
    """A tag would read past the end of its enclosing chunk."""

    def __init__(self, kind: int | None, offset: int, end: int, chunk_end: int):
        what = "Tag header" if kind is None else f"Tag 0x{kind:04X}"
        super().__init__(f"{what} at offset {offset} runs to {end}, past chunk end {chunk_end}")
        self.kind = kind
        self.offset = offset
        self.end = end
        self.chunk_end = chunk_end


class MalformedPackage(FEngError):
    pass


class UnsupportedObjectType(MalformedPackage):
    def __init__(self, object_type: int):
        super().__init__(f"Unsupported object type {int(object_type)}")
        self.object_type = object_type
