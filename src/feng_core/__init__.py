"""FEng Core - binary codec and object model for frontend packages."""
from .data import ColoredImageData, ImageData, ObjectData
from .errors import ChunkOverrun, FEngError, MalformedPackage, UnexpectedEndOfData, UnsupportedObjectType
from .ids import feng_hash
from .messaging import MessageResponse, MessageResponseTagProcessor, Response
from .objects import (
    BaseObject,
    ColoredImage,
    Group,
    Image,
    ObjectFlags,
    ObjectType,
    SimpleImage,
    create_object,
)
from .resources import ResourceRequest
from .scripts import Script
from .tags import MESSAGE_TAGS, OBJECT_TAGS, RESOURCE_TAGS, Tag, TagRegistry, TagStream, write_tag

__all__ = [
    "ObjectData", "ImageData", "ColoredImageData",
    "FEngError", "UnexpectedEndOfData", "ChunkOverrun", "MalformedPackage", "UnsupportedObjectType",
    "feng_hash",
    "MessageResponse", "Response", "MessageResponseTagProcessor",
    "BaseObject", "Group", "SimpleImage", "Image", "ColoredImage", "ObjectType", "ObjectFlags",
    "create_object",
    "ResourceRequest", "Script",
    "Tag", "TagRegistry", "TagStream", "write_tag", "MESSAGE_TAGS", "OBJECT_TAGS", "RESOURCE_TAGS",
]
