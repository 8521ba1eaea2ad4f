"""FEng package protocol constants.

Single source of truth for on-disk chunk codes, tag kinds and record layouts.
Keep this file stable. Reader and writer must remain synchronized.
"""


def tag_code(name: bytes) -> int:
    """Two ASCII characters read as a little-endian uint16."""
    return int.from_bytes(name, "little")


# Chunk header: [Code(4) | Size(4)] = 8 bytes
CHUNK_HEADER_FMT = "<4sI"
CHUNK_HEADER_LEN = 8

CHUNK_PACKAGE_HEADER = b"PkHd"
CHUNK_RESOURCE_REQUESTS = b"RsRq"
CHUNK_OBJECT = b"ObjD"
CHUNK_PACKAGE_RESPONSES = b"PkRs"

# Package header body: [Version(4) | NameLen(4) | Name]
PACKAGE_HEADER_FMT = "<II"
PACKAGE_HEADER_LEN = 8
PACKAGE_VERSION = 0x20000

# Tag header: [Kind(2)] then [Length(2)] unless the kind implies its size
TAG_KIND_FMT = "<H"
TAG_KIND_LEN = 2
TAG_LENGTH_FMT = "<H"
TAG_LENGTH_LEN = 2
MAX_TAG_PAYLOAD = 0xFFFF

# Object chunk tags
TAG_OBJECT_TYPE = tag_code(b"Ty")
TAG_OBJECT_GUID = tag_code(b"Gu")
TAG_OBJECT_NAME = tag_code(b"Nm")
TAG_OBJECT_NAME_HASH = tag_code(b"Nh")
TAG_OBJECT_FLAGS = tag_code(b"Fl")
TAG_OBJECT_RESOURCE = tag_code(b"Rq")
TAG_OBJECT_PARENT = tag_code(b"Pa")
TAG_OBJECT_DATA = tag_code(b"SA")
TAG_OBJECT_SCRIPT = tag_code(b"Sc")

# Message tags (package responses chunk and object chunks)
TAG_MESSAGE_TARGET_COUNT = tag_code(b"MC")
TAG_MESSAGE_TARGET_LIST = tag_code(b"ML")
TAG_MESSAGE_RESPONSE_INFO = tag_code(b"RI")
TAG_RESPONSE_ID = tag_code(b"Ri")
TAG_RESPONSE_INT_PARAM = tag_code(b"Rp")
TAG_RESPONSE_STRING_PARAM = tag_code(b"Rs")
TAG_RESPONSE_TARGET = tag_code(b"Rt")

# Resource request tags
TAG_RESOURCE_NAME = tag_code(b"Rn")
TAG_RESOURCE_ID = tag_code(b"Rd")
TAG_RESOURCE_TYPE = tag_code(b"Ry")
TAG_RESOURCE_FLAGS = tag_code(b"Rf")

# Primitive layouts
U32_FMT = "<I"
COLOR_FMT = "<4I"    # blue, green, red, alpha
VEC2_FMT = "<2f"
VEC3_FMT = "<3f"
QUATERNION_FMT = "<4f"  # x, y, z, w

# Script record: [Id | Length | Flags | ChainTo] [EventCount] [Event(Id | Target | Time)]*
SCRIPT_HEADER_FMT = "<IIII"
SCRIPT_EVENT_FMT = "<III"
NO_CHAIN = 0xFFFFFFFF

# Identity
NAME_HASH_SEED = 0xFFFFFFFF
NAME_ENCODING = "latin-1"

# Default safety bounds
DEFAULT_MAX_CHUNK_SIZE = 16 * 1024 * 1024  # 16 MiB
DEFAULT_MAX_TAG_PAYLOAD = MAX_TAG_PAYLOAD
