"""Resource requests referenced by objects (textures, fonts, movies)."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterator

from .errors import MalformedPackage
from .protocol import TAG_RESOURCE_FLAGS, TAG_RESOURCE_ID, TAG_RESOURCE_NAME, TAG_RESOURCE_TYPE
from .tags import Tag


class ResourceType(IntEnum):
    IMAGE = 1
    FONT = 2
    MODEL = 3
    MOVIE = 4
    EFFECT = 5


@dataclass
class ResourceRequest:
    name: str
    id: int = 0
    type: int = ResourceType.IMAGE
    flags: int = 0

    def clone(self) -> ResourceRequest:
        return replace(self)


def read_resource_request_tag(requests: list[ResourceRequest], tag: Tag) -> bool:
    """Apply one RsRq tag. A name tag opens a new request."""
    if tag.kind == TAG_RESOURCE_NAME:
        requests.append(ResourceRequest(tag.value))
        return True
    if tag.kind not in (TAG_RESOURCE_ID, TAG_RESOURCE_TYPE, TAG_RESOURCE_FLAGS):
        return False
    if not requests:
        raise MalformedPackage(f"{tag.name} at offset {tag.offset} before any ResourceName")

    req = requests[-1]
    if tag.kind == TAG_RESOURCE_ID:
        req.id = tag.value
    elif tag.kind == TAG_RESOURCE_TYPE:
        req.type = tag.value
    else:
        req.flags = tag.value
    return True


def resource_request_tags(requests: list[ResourceRequest]) -> Iterator[tuple[int, object]]:
    for req in requests:
        yield TAG_RESOURCE_NAME, req.name
        yield TAG_RESOURCE_ID, req.id
        yield TAG_RESOURCE_TYPE, int(req.type)
        yield TAG_RESOURCE_FLAGS, req.flags
