"""
partial_offers.codec — compact text encoding of offer bundles.

## Public API
- compress / decompress — versioned zlib-with-dictionary compression.
- encode / decode — bech32m with the "partial" prefix.
- encode_offer / decode_offer — bundle ↔ offer string.
"""

from __future__ import annotations

from .compression import compress, decompress
from .encoding import decode, decode_offer, encode, encode_offer

__all__ = [
    "compress",
    "decompress",
    "encode",
    "decode",
    "encode_offer",
    "decode_offer",
]
