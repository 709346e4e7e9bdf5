"""
Conversion between Python values and the script value model, and its byte serialization.

Scripts, solutions, and hints are all values of one structured model: atoms (byte strings)
and pairs, represented by the ledger's `Program` type. This module converts plain Python values
into that model and serializes/deserializes it. Hashing lives in `partial_offers.core.hashing`.

Notes:
    - Conversion rules: bytes/str/int/None become atoms (None and 0 are the empty atom),
      lists become nil-terminated chains of pairs, 2-tuples become a single pair.
    - Objects exposing `to_program()` are converted through that method, so models can be
      nested inside plain lists and tuples.
"""

from __future__ import annotations

import io
from typing import Any

from chia.types.blockchain_format.program import Program
from clvm.casts import int_from_bytes
from clvm.serialize import sexp_from_stream

__all__ = [
    "Program",
    "NIL",
    "to_program",
    "program_to_bytes",
    "program_from_bytes",
    "as_atom",
    "as_bytes32",
    "as_u64",
    "as_list",
]

NIL: Program = Program.to(None)


def to_program(value: Any) -> Program:
    """
    Convert a Python value into the script value model.

    Args:
        value (Any): Program, object with `to_program()`, bytes, str, int, None, list, or 2-tuple.

    Returns:
        Program: Converted value.

    Raises:
        TypeError: For tuples that are not pairs or pre-hashed values (see `TreeHash`).
    """
    if isinstance(value, Program):
        return value
    to_prog = getattr(value, "to_program", None)
    if callable(to_prog):
        return Program.to(to_prog())
    if isinstance(value, list):
        return Program.to([to_program(v) for v in value])
    if isinstance(value, tuple):
        if len(value) != 2:
            raise TypeError(f"only 2-tuples convert to pairs, got {len(value)} elements")
        return Program.to((to_program(value[0]), to_program(value[1])))
    if value is None or isinstance(value, (bytes, str, int)):
        return Program.to(value)
    raise TypeError(f"cannot convert {type(value).__name__} to a program")


def program_to_bytes(value: Any) -> bytes:
    """Serialize a value (converted with `to_program`) to bytes."""
    return bytes(to_program(value))


def program_from_bytes(data: bytes) -> Program:
    """
    Deserialize exactly one program from `data`.

    Raises:
        ValueError: If the bytes are truncated, malformed, or followed by trailing data.
    """
    f = io.BytesIO(bytes(data))
    prog = sexp_from_stream(f, Program.to)
    if f.tell() != len(data):
        raise ValueError(f"trailing bytes after program ({len(data) - f.tell()} left)")
    return prog


# ---------------------------------------------------------------------------
# Strict decoding helpers (used when parsing hints and solutions)
# ---------------------------------------------------------------------------


def as_atom(prog: Program) -> bytes:
    if prog.atom is None:
        raise ValueError("expected an atom, got a pair")
    return bytes(prog.atom)


def as_bytes32(prog: Program) -> bytes:
    atom = as_atom(prog)
    if len(atom) != 32:
        raise ValueError(f"expected 32 bytes, got {len(atom)}")
    return atom


def as_u64(prog: Program) -> int:
    """
    Decode a canonical non-negative integer atom that fits in 64 bits.

    Raises:
        ValueError: For pairs, negative values, non-canonical encodings, or values ≥ 2**64.
    """
    atom = as_atom(prog)
    if len(atom) > 9 or (len(atom) == 9 and atom[0] != 0):
        raise ValueError("integer wider than 64 bits")
    value = int_from_bytes(atom)
    if value < 0:
        raise ValueError("expected a non-negative integer")
    if Program.to(value).atom != atom:
        raise ValueError("non-canonical integer encoding")
    return value


def as_list(prog: Program) -> list[Program]:
    """Return the items of a nil-terminated list; raises ValueError for improper lists."""
    items: list[Program] = []
    while prog.pair is not None:
        first, rest = prog.pair
        items.append(Program.to(first))
        prog = Program.to(rest)
    if prog.atom != b"":
        raise ValueError("expected a nil-terminated list")
    return items
