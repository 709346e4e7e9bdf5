"""
Protocol constants for partial offers.

Defines the hint sentinel, the offer string prefix, the condition opcodes committed in the
accept branch, and the compression format version. This module is zero-IO.

Notes:
    - The sentinel puzzle hash is a discovery convention only; the ledger does not enforce it.
    - Condition opcodes follow the ledger's condition numbering.
    - Bumping COMPRESSION_VERSION requires registering a dictionary for it in
      partial_offers.codec.compression.
"""

from __future__ import annotations

__all__ = [
    "HINT_PUZZLE_HASH",
    "OFFER_PREFIX",
    "ASSERT_BEFORE_SECONDS_ABSOLUTE",
    "RESERVE_FEE",
    "CREATE_COIN",
    "ASSERT_PUZZLE_ANNOUNCEMENT",
    "MINIMUM_FILL",
    "COMPRESSION_VERSION",
]

# Puzzle hash of the zero-value coin whose spend carries the serialized hint.
HINT_PUZZLE_HASH: bytes = bytes([1] * 32)

# Human-readable part of bech32m encoded offers.
OFFER_PREFIX: str = "partial"

# Condition opcodes.
CREATE_COIN: int = 51
RESERVE_FEE: int = 52
ASSERT_PUZZLE_ANNOUNCEMENT: int = 63
ASSERT_BEFORE_SECONDS_ABSOLUTE: int = 85

# The partial template accepts a minimum fill amount; offers never set one.
MINIMUM_FILL: int = 0

# Leading two bytes of every compressed bundle.
COMPRESSION_VERSION: int = 1
