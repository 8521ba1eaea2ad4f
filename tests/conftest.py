import pytest

from feng_core.data import ColoredImageData
from feng_core.messaging import MessageResponse, Response
from feng_core.objects import ColoredImage, Group, Image, ObjectFlags, SimpleImage
from feng_core.primitives import Color4, Quaternion, Vector2, Vector3
from feng_core.resources import ResourceRequest, ResourceType
from feng_core.scripts import ScriptEvent, Track, TrackKey
from feng_load.package import Package


@pytest.fixture
def sample_package() -> Package:
    pkg = Package("Test.fng")
    tex = ResourceRequest("test_texture", id=7, type=ResourceType.IMAGE, flags=2)
    pkg.resource_requests.append(tex)

    root = Group()
    root.set_name("ROOT")
    root.guid = 0x10

    panel = ColoredImage(ColoredImageData(
        color=Color4(10, 20, 30, 255),
        pivot=Vector3(0.5, 0.5, 0.0),
        position=Vector3(100.0, -50.25, 1.0),
        rotation=Quaternion(0.0, 0.0, 0.5, 0.5),
        size=Vector3(64.0, 32.0, 1.0),
        upper_left=Vector2(0.0, 0.0),
        lower_right=Vector2(0.5, 1.0),
        top_left=Color4(255, 0, 0, 255),
        top_right=Color4(0, 255, 0, 255),
        bottom_right=Color4(0, 0, 255, 255),
        bottom_left=Color4(0, 0, 0, 0),
    ))
    panel.set_name("PANEL")
    panel.guid = 0x11
    panel.parent = root
    panel.resource_request = tex
    panel.set_flag(ObjectFlags.IS_BUTTON, True)
    script = panel.create_script()
    script.id = 0x1234
    script.length = 1000
    script.events.append(ScriptEvent(0xAAAA, 0x11, 500))
    script.tracks.top_left = Track(1, 2, 1000, [TrackKey(0, (255, 0, 0, 255))])
    panel.message_responses.append(MessageResponse(0xBEEF, [Response(1, "Highlight", 0x11), Response(2, 3)]))

    icon = Image()
    icon.set_name("ICON")
    icon.guid = 0x12
    icon.parent = panel

    cursor = SimpleImage()
    cursor.set_name("CURSOR")
    cursor.guid = 0x13
    cursor.set_flag(ObjectFlags.INVISIBLE, True)

    pkg.objects += [root, panel, icon, cursor]
    pkg.message_target_lists += [[0x11, 0x12], [0x13]]
    pkg.message_responses.append(MessageResponse(0xC0DE, [Response(9, target=0x12)]))
    return pkg
