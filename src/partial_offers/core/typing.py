"""
Lightweight typing aliases used across core models and chain types.

Provides constrained aliases for 32-byte identifiers and u64 amounts so that pydantic
models validate widths at construction time. This module contains no runtime logic.

Examples:
    >>> from pydantic import TypeAdapter
    >>> from partial_offers.core.typing import Bytes32, Amount
    >>> TypeAdapter(Bytes32).validate_python(b"\\x01" * 32) == b"\\x01" * 32
    True
    >>> TypeAdapter(Amount).validate_python(2**64 - 1)
    18446744073709551615
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

__all__ = [
    "Bytes32",
    "Amount",
    "U64_MAX",
]

U64_MAX = 2**64 - 1

# Coin ids, puzzle hashes, asset ids.
Bytes32 = Annotated[bytes, Field(min_length=32, max_length=32)]

# Coin amounts, prices, timestamps.
Amount = Annotated[int, Field(ge=0, le=U64_MAX)]
