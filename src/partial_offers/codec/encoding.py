"""
Text encoding of offers: bech32m with the human-readable prefix "partial".

    encode_offer(bundle) = bech32m("partial", regroup_8_to_5(compress(bytes(bundle))))

Decoding checks, in order: characters and checksum, checksum variant, prefix, padding. Each
failure has its own FormatError subclass.

Examples:
    >>> from partial_offers.codec.encoding import decode, encode
    >>> decode(encode(b"hello")) == b"hello"
    True
"""

from __future__ import annotations

from chia.util.bech32m import (
    CHARSET,
    bech32_decode,
    bech32_encode,
    bech32_hrp_expand,
    bech32_polymod,
    convertbits,
)

from ..chain.coins import SpendBundle, bundle_from_bytes, bundle_to_bytes
from ..core.constants import OFFER_PREFIX
from ..core.errors import ChecksumError, PaddingError, WrongPrefixError, WrongVariantError
from .compression import compress, decompress

__all__ = [
    "encode",
    "decode",
    "encode_offer",
    "decode_offer",
]

# polymod residue of a valid bech32 (BIP-173) checksum
_BECH32_CONST = 1


def encode(data: bytes, prefix: str = OFFER_PREFIX) -> str:
    return bech32_encode(prefix, convertbits(list(data), 8, 5, pad=True))


def _has_bech32_checksum(text: str) -> bool:
    lowered = text.lower()
    pos = lowered.rfind("1")
    if pos < 1 or not all(c in CHARSET for c in lowered[pos + 1 :]):
        return False
    words = [CHARSET.find(c) for c in lowered[pos + 1 :]]
    return bech32_polymod(bech32_hrp_expand(lowered[:pos]) + words) == _BECH32_CONST


def decode(text: str, prefix: str = OFFER_PREFIX) -> bytes:
    """
    Inverse of `encode`.

    Raises:
        ChecksumError: Invalid characters, mixed case, or a bad checksum.
        WrongVariantError: A valid bech32 (not bech32m) checksum.
        WrongPrefixError: A prefix other than `prefix`.
        PaddingError: Leftover regrouping bits that are non-zero or too many.
    """
    hrp, words = bech32_decode(text, max_length=len(text))
    if hrp is None or words is None:
        if text in (text.lower(), text.upper()) and _has_bech32_checksum(text):
            raise WrongVariantError("expected a bech32m checksum, got bech32")
        raise ChecksumError("invalid bech32m string")
    if hrp != prefix:
        raise WrongPrefixError(hrp, prefix)
    try:
        data = convertbits(words, 5, 8, pad=False)
    except ValueError as exc:
        raise PaddingError("invalid padding in 5-to-8-bit regrouping") from exc
    return bytes(data)


def encode_offer(bundle: SpendBundle) -> str:
    return encode(compress(bundle_to_bytes(bundle)))


def decode_offer(text: str) -> SpendBundle:
    """
    Decode an offer string into its bundle.

    Raises:
        FormatError: Any text, compression, or bundle decoding failure (see subclasses).
    """
    return bundle_from_bytes(decompress(decode(text)))
