import io
import struct

import pytest

from feng_core.errors import ChunkOverrun, MalformedPackage
from feng_core.protocol import (
    TAG_MESSAGE_RESPONSE_INFO,
    TAG_MESSAGE_TARGET_COUNT,
    TAG_MESSAGE_TARGET_LIST,
    TAG_RESOURCE_ID,
    TAG_RESPONSE_ID,
    TAG_RESPONSE_STRING_PARAM,
    tag_code,
)
from feng_core.tags import MESSAGE_TAGS, OBJECT_TAGS, RESOURCE_TAGS, TagStream, write_tag

UNKNOWN_KIND = tag_code(b"Zz")


def encode(registry, *tags) -> bytes:
    buf = io.BytesIO()
    for kind, value in tags:
        write_tag(buf, registry, kind, value)
    return buf.getvalue()


def stream_over(body: bytes, registry=MESSAGE_TAGS, prefix: bytes = b"", suffix: bytes = b"") -> TagStream:
    f = io.BytesIO(prefix + body + suffix)
    f.seek(len(prefix))
    return TagStream(f, len(body), registry)


def test_implied_and_explicit_header_widths():
    assert encode(MESSAGE_TAGS, (TAG_MESSAGE_TARGET_COUNT, 3)) == struct.pack("<HI", TAG_MESSAGE_TARGET_COUNT, 3)
    assert encode(MESSAGE_TAGS, (TAG_RESPONSE_STRING_PARAM, "AB")) == (
        struct.pack("<HH", TAG_RESPONSE_STRING_PARAM, 3) + b"AB\x00"
    )


def test_tags_fill_chunk_then_exhaust():
    body = encode(
        MESSAGE_TAGS,
        (TAG_MESSAGE_TARGET_COUNT, 1),
        (TAG_MESSAGE_TARGET_LIST, [0x11, 0x12]),
        (TAG_RESPONSE_STRING_PARAM, "Init"),
    )
    ts = stream_over(body, prefix=b"\xff" * 8, suffix=b"\xee" * 8)

    seen = []
    while ts.has_tag():
        seen.append(ts.next_tag())

    assert [t.name for t in seen] == ["MessageTargetCount", "MessageTargetList", "ResponseStringParam"]
    assert [t.value for t in seen] == [1, [0x11, 0x12], "Init"]
    assert ts.exhausted
    assert not ts.has_tag()
    assert ts.f.tell() == ts.end


def test_tags_keep_file_order_and_offsets():
    body = encode(MESSAGE_TAGS, (TAG_MESSAGE_RESPONSE_INFO, 5), (TAG_RESPONSE_ID, 6))
    tags = list(stream_over(body, prefix=b"\x00" * 4))
    assert [t.kind for t in tags] == [TAG_MESSAGE_RESPONSE_INFO, TAG_RESPONSE_ID]
    assert [t.offset for t in tags] == [4, 10]


def test_explicit_length_past_chunk_end_is_overrun():
    body = bytearray(encode(MESSAGE_TAGS, (TAG_MESSAGE_TARGET_COUNT, 1), (TAG_MESSAGE_TARGET_LIST, [1, 2])))
    struct.pack_into("<H", body, 8, 16)
    ts = stream_over(bytes(body), suffix=b"\xaa" * 32)

    assert ts.next_tag().value == 1
    assert ts.has_tag()
    with pytest.raises(ChunkOverrun) as exc:
        ts.next_tag()
    assert exc.value.kind == TAG_MESSAGE_TARGET_LIST
    assert ts.f.tell() <= ts.end
    assert not ts.has_tag()


def test_implied_payload_past_chunk_end_is_overrun():
    body = struct.pack("<H", TAG_MESSAGE_TARGET_COUNT) + b"\x01\x00"
    ts = stream_over(body, suffix=b"\x00" * 8)
    with pytest.raises(ChunkOverrun):
        ts.next_tag()


def test_missing_length_field_is_overrun():
    body = struct.pack("<H", TAG_MESSAGE_TARGET_LIST) + b"\x01"
    ts = stream_over(body, suffix=b"\x00" * 8)
    assert ts.has_tag()
    with pytest.raises(ChunkOverrun):
        ts.next_tag()


def test_unknown_kind_yields_raw_payload():
    body = encode(MESSAGE_TAGS, (UNKNOWN_KIND, b"xyz"), (TAG_MESSAGE_TARGET_COUNT, 2))
    first, second = list(stream_over(body))

    assert first.name is None
    assert first.value == b"xyz"
    assert second.value == 2


def test_registry_decides_header_shape():
    # Fixed-size in the resource vocabulary, unknown (length-prefixed) elsewhere.
    fixed = encode(RESOURCE_TAGS, (TAG_RESOURCE_ID, 9))
    assert len(fixed) == 6
    assert list(stream_over(fixed, RESOURCE_TAGS))[0].value == 9

    prefixed = encode(MESSAGE_TAGS, (TAG_RESOURCE_ID, struct.pack("<I", 9)))
    assert len(prefixed) == 8
    assert list(stream_over(prefixed, MESSAGE_TAGS))[0].value == struct.pack("<I", 9)


def test_trailing_byte_does_not_start_a_tag():
    body = encode(MESSAGE_TAGS, (TAG_MESSAGE_TARGET_COUNT, 1)) + b"\x00"
    assert len(list(stream_over(body))) == 1


def test_registries_are_immutable_and_composable():
    with pytest.raises(TypeError):
        MESSAGE_TAGS[UNKNOWN_KIND] = MESSAGE_TAGS[TAG_RESPONSE_ID]
    assert TAG_RESPONSE_ID in OBJECT_TAGS
    assert TAG_RESOURCE_ID not in OBJECT_TAGS
    assert OBJECT_TAGS.kind_of("ResponseTarget") == MESSAGE_TAGS.kind_of("ResponseTarget")


def test_oversized_payload_rejected():
    with pytest.raises(ValueError):
        write_tag(io.BytesIO(), MESSAGE_TAGS, TAG_RESPONSE_STRING_PARAM, "x" * 70000)


@pytest.mark.parametrize(
    "kind, value", [(TAG_RESPONSE_ID, -1), (TAG_MESSAGE_TARGET_COUNT, 2**32), (TAG_MESSAGE_TARGET_LIST, [1, -5])]
)
def test_out_of_range_uint32_rejected(kind, value):
    with pytest.raises(ValueError, match="uint32"):
        write_tag(io.BytesIO(), MESSAGE_TAGS, kind, value)


def test_stream_counts_tags_and_enforces_payload_limit():
    body = encode(MESSAGE_TAGS, (TAG_MESSAGE_TARGET_COUNT, 1), (TAG_RESPONSE_STRING_PARAM, "HELLO"))
    tag_stream = stream_over(body)
    assert len(list(tag_stream)) == 2
    assert tag_stream.stats["tags"] == 2

    f = io.BytesIO(body)
    tag_stream = TagStream(f, len(body), MESSAGE_TAGS, max_payload=4)
    tag_stream.next_tag()
    with pytest.raises(MalformedPackage):
        tag_stream.next_tag()
    assert not tag_stream.has_tag()
