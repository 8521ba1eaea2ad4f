"""FEng Identity Functions."""
from __future__ import annotations

from .protocol import NAME_ENCODING, NAME_HASH_SEED


def feng_hash(name: str) -> int:
    """Compute the 32-bit FEng name hash (seed 0xFFFFFFFF, h = h * 33 + c)."""
    h = NAME_HASH_SEED
    for c in name.encode(NAME_ENCODING):
        h = (h * 33 + c) & 0xFFFFFFFF
    return h
