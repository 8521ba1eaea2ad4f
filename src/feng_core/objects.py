"""Frontend objects: an ObjectData block plus scripts, responses and links.

Each concrete kind pins the ObjectData subclass it owns and the Script
subclass it creates. Callers that only need the common capabilities work
against BaseObject (or the ScriptedObject protocol) and get Script values;
callers holding a concrete kind get the narrower script type from the same
underlying list.
"""
from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import ClassVar, Generic, Protocol, Sequence, TypeVar

from .data import ColoredImageData, ImageData, ObjectData
from .errors import UnsupportedObjectType
from .ids import feng_hash
from .messaging import MessageResponse
from .resources import ResourceRequest
from .scripts import BaseObjectScript, ColoredImageScript, ImageScript, Script

TData = TypeVar("TData", bound=ObjectData)
TScript = TypeVar("TScript", bound=Script)


class ObjectType(IntEnum):
    NONE = 0
    IMAGE = 1
    STRING = 2
    MODEL = 3
    LIST = 4
    GROUP = 5
    ANIM_IMAGE = 6
    COLORED_IMAGE = 7
    MULTI_IMAGE = 8
    SIMPLE_IMAGE = 9
    MOVIE = 10


class ObjectFlags(IntFlag):
    INVISIBLE = 0x1
    DONT_NAVIGATE = 0x2
    USES_LIBRARY_OBJECT = 0x4
    CODE_SUPPRESS_RENDERING = 0x8
    CAN_ANIMATE = 0x10
    IS_BUTTON = 0x20
    AFFECT_ALL_SCRIPTS = 0x40
    PERSPECTIVE_PROJECTION = 0x80


class ScriptedObject(Protocol):
    def get_scripts(self) -> Sequence[Script]: ...

    def create_script(self) -> Script: ...

    def find_script(self, id: int) -> Script | None: ...


class BaseObject(Generic[TData, TScript]):
    """Common object state and the deep clone protocol.

    clone() duplicates scripts, message responses, the data block and the
    resource request. The Parent chain is assumed finite: by default it is
    cloned too, once per clone() call (shared ancestors and cycles resolve to
    the same clone). Pass clone_parent=False to keep the original Parent as a
    shared back-reference.
    """

    object_type: ClassVar[ObjectType] = ObjectType.NONE
    data_type: ClassVar[type[ObjectData]] = ObjectData
    script_type: ClassVar[type[Script]] = BaseObjectScript

    def __init__(self, data: TData | None = None):
        self.scripts: list[TScript] = []
        self.message_responses: list[MessageResponse] = []
        self.data: TData | None = data
        self.type = self.object_type
        self.flags = ObjectFlags(0)
        self.resource_request: ResourceRequest | None = None
        self.name: str | None = None
        self.name_hash = 0
        self.guid = 0
        self.parent: BaseObject | None = None

        if data is None:
            self.initialize_data()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, guid=0x{self.guid:08X})"

    def initialize_data(self) -> None:
        self.data = self.data_type()

    def set_name(self, name: str) -> None:
        self.name = name
        self.name_hash = feng_hash(name)

    def set_flag(self, flag: ObjectFlags, enabled: bool) -> None:
        if enabled:
            self.flags = ObjectFlags(int(self.flags) | int(flag))
        else:
            self.flags = ObjectFlags(int(self.flags) & ~int(flag) & 0xFFFFFFFF)

    def get_scripts(self) -> Sequence[TScript]:
        """Read-only snapshot of the owned scripts. Use create_script() to add one."""
        return tuple(self.scripts)

    def create_script(self) -> TScript:
        script = self.script_type()
        self.scripts.append(script)
        return script

    def find_script(self, id: int) -> TScript | None:
        return next((s for s in self.scripts if s.id == id), None)

    def _copy_from(self, other: BaseObject, clone_parent: bool, memo: dict) -> None:
        self.scripts = [s.clone() for s in other.scripts]
        self.data = other.data.clone() if other.data is not None else None
        self.type = other.type
        self.flags = other.flags
        self.resource_request = (
            other.resource_request.clone() if other.resource_request is not None else None
        )
        self.name = other.name
        self.name_hash = other.name_hash
        self.guid = other.guid
        if clone_parent and other.parent is not None:
            self.parent = other.parent.clone(clone_parent, memo)
        else:
            self.parent = other.parent
        self.message_responses = [r.clone() for r in other.message_responses]

    def clone(self, clone_parent: bool = True, memo: dict | None = None) -> BaseObject:
        if memo is None:
            memo = {}
        if id(self) in memo:
            return memo[id(self)]

        result = type(self)()
        memo[id(self)] = result
        result._copy_from(self, clone_parent, memo)

        assert type(result.data) is type(self.data), "clone changed the data block type"
        assert all(type(a) is type(b) for a, b in zip(result.scripts, self.scripts)), \
            "clone changed a script type"
        assert (result.resource_request is None) == (self.resource_request is None)
        return result


class Group(BaseObject[ObjectData, BaseObjectScript]):
    object_type = ObjectType.GROUP


class SimpleImage(BaseObject[ObjectData, BaseObjectScript]):
    object_type = ObjectType.SIMPLE_IMAGE


class Image(BaseObject[ImageData, ImageScript]):
    object_type = ObjectType.IMAGE
    data_type = ImageData
    script_type = ImageScript


class ColoredImage(Image):
    object_type = ObjectType.COLORED_IMAGE
    data_type = ColoredImageData
    script_type = ColoredImageScript


OBJECT_TYPES: dict[int, type[BaseObject]] = {
    cls.object_type: cls for cls in (Group, SimpleImage, Image, ColoredImage)
}


def create_object(object_type: int) -> BaseObject:
    try:
        cls = OBJECT_TYPES[object_type]
    except KeyError:
        raise UnsupportedObjectType(object_type) from None
    return cls()
