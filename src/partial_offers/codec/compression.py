"""
Versioned bundle compression: a 2-byte big-endian version followed by a zlib stream primed
with a version-specific dictionary.

The dictionary holds template reveals that appear verbatim in offer bundles, so the bulk of an
offer's puzzle reveals compresses to back-references.

Notes:
    - A version's dictionary never changes once released; new dictionaries get new versions.
    - Unknown versions and corrupt streams raise CompressionError.
"""

from __future__ import annotations

import logging
import struct
import zlib
from types import MappingProxyType

from ..config import OfferSettings
from ..core.constants import COMPRESSION_VERSION
from ..core.errors import CompressionError
from ..core.puzzles import PARTIAL_TEMPLATE

__all__ = [
    "ZDICTS",
    "compress",
    "decompress",
]

logger = logging.getLogger(__name__)

_VERSION = struct.Struct(">H")

ZDICTS: MappingProxyType[int, bytes] = MappingProxyType(
    {
        1: PARTIAL_TEMPLATE.reveal,
    }
)


def compress(data: bytes, *, version: int = COMPRESSION_VERSION, level: int | None = None) -> bytes:
    """
    Compress serialized bundle bytes.

    Args:
        data (bytes): Serialized bundle.
        version (int): Dictionary version to use.
        level (int | None): zlib level; None reads `OfferSettings.compression_level`.

    Raises:
        CompressionError: If `version` has no dictionary.
    """
    zdict = ZDICTS.get(version)
    if zdict is None:
        raise CompressionError(f"unknown compression version {version}")
    if level is None:
        level = OfferSettings.load().compression_level
    c = zlib.compressobj(level=level, zdict=zdict)
    out = _VERSION.pack(version) + c.compress(data) + c.flush()
    logger.debug("compressed %d bytes to %d (v%d)", len(data), len(out), version)
    return out


def decompress(data: bytes) -> bytes:
    """
    Inverse of `compress`.

    Raises:
        CompressionError: On a short header, an unknown version, or a corrupt or truncated
            stream.
    """
    if len(data) < _VERSION.size:
        raise CompressionError("compressed data shorter than its version header")
    (version,) = _VERSION.unpack_from(data)
    zdict = ZDICTS.get(version)
    if zdict is None:
        raise CompressionError(f"unknown compression version {version}")
    d = zlib.decompressobj(zdict=zdict)
    try:
        out = d.decompress(data[_VERSION.size :]) + d.flush()
    except zlib.error as exc:
        raise CompressionError(f"corrupt compressed data: {exc}") from exc
    if not d.eof or d.unused_data:
        raise CompressionError("compressed stream is truncated or has trailing data")
    return out
