"""Object scripts: timed events plus per-attribute animation tracks.

Only the script header and its events are part of the Sc tag payload.
Tracks are owned by the script and travel with it through clone().
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, NamedTuple

from .primitives import read_exact, read_u32, write_u32
from .protocol import NO_CHAIN, SCRIPT_EVENT_FMT, SCRIPT_HEADER_FMT

SCRIPT_HEADER_LEN = struct.calcsize(SCRIPT_HEADER_FMT)
SCRIPT_EVENT_LEN = struct.calcsize(SCRIPT_EVENT_FMT)


class TrackKey(NamedTuple):
    time: int
    value: tuple


class ScriptEvent(NamedTuple):
    event_id: int
    target: int
    time: int


@dataclass
class Track:
    param_type: int = 0
    interp_type: int = 0
    length: int = 0
    keys: list[TrackKey] = field(default_factory=list)

    def clone(self) -> Track:
        return Track(self.param_type, self.interp_type, self.length, list(self.keys))


def _clone_track(track: Track | None) -> Track | None:
    return track.clone() if track is not None else None


@dataclass
class ScriptTracks:
    color: Track | None = None
    pivot: Track | None = None
    position: Track | None = None
    rotation: Track | None = None
    size: Track | None = None

    def _copy_from(self, other: ScriptTracks) -> None:
        self.color = _clone_track(other.color)
        self.pivot = _clone_track(other.pivot)
        self.position = _clone_track(other.position)
        self.rotation = _clone_track(other.rotation)
        self.size = _clone_track(other.size)

    def clone(self) -> ScriptTracks:
        result = type(self)()
        result._copy_from(self)
        return result


@dataclass
class ImageScriptTracks(ScriptTracks):
    upper_left: Track | None = None
    lower_right: Track | None = None

    def _copy_from(self, other: ImageScriptTracks) -> None:
        super()._copy_from(other)
        self.upper_left = _clone_track(other.upper_left)
        self.lower_right = _clone_track(other.lower_right)


@dataclass
class ColoredImageScriptTracks(ImageScriptTracks):
    top_left: Track | None = None
    top_right: Track | None = None
    bottom_right: Track | None = None
    bottom_left: Track | None = None

    def _copy_from(self, other: ColoredImageScriptTracks) -> None:
        super()._copy_from(other)
        self.top_left = _clone_track(other.top_left)
        self.top_right = _clone_track(other.top_right)
        self.bottom_right = _clone_track(other.bottom_right)
        self.bottom_left = _clone_track(other.bottom_left)


@dataclass
class Script:
    """A named animation/event timeline, looked up by its stable id."""

    tracks_type: ClassVar[type[ScriptTracks]] = ScriptTracks

    id: int = 0
    length: int = 0
    flags: int = 0
    chain_to: int = NO_CHAIN
    events: list[ScriptEvent] = field(default_factory=list)
    tracks: ScriptTracks | None = None

    def __post_init__(self):
        if self.tracks is None:
            self.tracks = self.tracks_type()

    def _copy_from(self, other: Script) -> None:
        self.id = other.id
        self.length = other.length
        self.flags = other.flags
        self.chain_to = other.chain_to
        self.events = list(other.events)
        self.tracks = other.tracks.clone() if other.tracks is not None else None

    def clone(self) -> Script:
        result = type(self)()
        result._copy_from(self)
        return result

    def read(self, f: BinaryIO) -> None:
        self.id, self.length, self.flags, self.chain_to = struct.unpack(
            SCRIPT_HEADER_FMT, read_exact(f, SCRIPT_HEADER_LEN)
        )
        count = read_u32(f)
        self.events = [
            ScriptEvent(*struct.unpack(SCRIPT_EVENT_FMT, read_exact(f, SCRIPT_EVENT_LEN)))
            for _ in range(count)
        ]

    def write(self, f: BinaryIO) -> None:
        f.write(struct.pack(SCRIPT_HEADER_FMT, self.id, self.length, self.flags, self.chain_to))
        write_u32(f, len(self.events))
        for evt in self.events:
            f.write(struct.pack(SCRIPT_EVENT_FMT, *evt))


class BaseObjectScript(Script):
    pass


class ImageScript(Script):
    tracks_type = ImageScriptTracks


class ColoredImageScript(ImageScript):
    tracks_type = ColoredImageScriptTracks
