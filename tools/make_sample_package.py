import io
import struct
import sys
from pathlib import Path

from feng_core.data import ColoredImageData
from feng_core.messaging import MessageResponse, Response
from feng_core.objects import ColoredImage, Group, Image, ObjectFlags, SimpleImage
from feng_core.primitives import Color4, Quaternion, Vector2, Vector3
from feng_core.protocol import (
    CHUNK_PACKAGE_RESPONSES,
    TAG_MESSAGE_TARGET_COUNT,
    TAG_MESSAGE_TARGET_LIST,
)
from feng_core.resources import ResourceRequest, ResourceType
from feng_core.scripts import ScriptEvent
from feng_core.tags import MESSAGE_TAGS
from feng_load.package import Package
from feng_load.writer import encode_tags, package_bytes, write_chunk

# --- CONFIGURATION ---
PACKAGE_NAME = "MainMenu.fng"
MSG_SELECT = 0xB4EDEB6D
MSG_FADE_IN = 0x5073EF13
SCRIPT_INIT = 0x001744B3


def build_package() -> Package:
    pkg = Package(PACKAGE_NAME)

    bg = ResourceRequest("menu_backdrop", id=1, type=ResourceType.IMAGE)
    font = ResourceRequest("menu_font", id=2, type=ResourceType.FONT)
    pkg.resource_requests += [bg, font]

    root = Group()
    root.set_name("ROOT")
    root.guid = 0x1000

    backdrop = ColoredImage(ColoredImageData(
        color=Color4(255, 255, 255, 255),
        position=Vector3(0.0, 0.0, 10.0),
        size=Vector3(640.0, 480.0, 1.0),
        lower_right=Vector2(1.0, 1.0),
        top_left=Color4(0, 0, 128, 255),
        bottom_right=Color4(32, 0, 0, 255),
    ))
    backdrop.set_name("BACKDROP")
    backdrop.guid = 0x1001
    backdrop.parent = root
    backdrop.resource_request = bg

    logo = Image()
    logo.set_name("LOGO")
    logo.guid = 0x1002
    logo.parent = root
    logo.data.position = Vector3(-120.5, 64.0, 0.0)
    logo.data.rotation = Quaternion(0.0, 0.0, 0.0, 1.0)
    logo.set_flag(ObjectFlags.CAN_ANIMATE, True)
    init = logo.create_script()
    init.id = SCRIPT_INIT
    init.length = 500
    init.events.append(ScriptEvent(MSG_FADE_IN, logo.guid, 250))
    logo.message_responses.append(
        MessageResponse(MSG_SELECT, [Response(0x1, "Init", logo.guid), Response(0x2, 7)])
    )

    cursor = SimpleImage()
    cursor.set_name("CURSOR")
    cursor.guid = 0x1003
    cursor.parent = backdrop
    cursor.set_flag(ObjectFlags.INVISIBLE, True)

    pkg.objects += [root, backdrop, logo, cursor]
    pkg.message_target_lists += [[0x1001, 0x1002], [0x1003]]
    pkg.message_responses.append(MessageResponse(MSG_FADE_IN, [Response(0x3, target=0x1002)]))
    return pkg


def overrun_package_bytes(pkg: Package) -> bytes:
    """Same package, but the responses chunk ends with a target list whose length runs past the chunk."""
    pkg.message_target_lists = []
    pkg.message_responses = []
    body = bytearray(encode_tags(MESSAGE_TAGS, [
        (TAG_MESSAGE_TARGET_COUNT, 1),
        (TAG_MESSAGE_TARGET_LIST, [0x1001, 0x1002]),
    ]))
    # MC tag is 6 bytes; the ML length field follows the ML kind.
    (length,) = struct.unpack_from("<H", body, 8)
    struct.pack_into("<H", body, 8, length + 8)

    out = io.BytesIO(package_bytes(pkg))
    out.seek(0, 2)
    write_chunk(out, CHUNK_PACKAGE_RESPONSES, bytes(body))
    return out.getvalue()


if __name__ == "__main__":
    # Usage:
    #   python tools/make_sample_package.py OUT_FILE [--overrun]
    args = [a for a in sys.argv[1:] if a]
    overrun = "--overrun" in args
    args = [a for a in args if a != "--overrun"]
    if len(args) != 1:
        raise SystemExit("Usage: make_sample_package.py OUT_FILE [--overrun]")

    out = Path(args[0])
    out.parent.mkdir(parents=True, exist_ok=True)
    pkg = build_package()
    out.write_bytes(overrun_package_bytes(pkg) if overrun else package_bytes(pkg))
    print(f"GENERATED: {out}")
