"""
Tree hashing and currying for the script value model.

Provides the commitment primitives every locking-script hash is built from:

- `tree_hash` — structural hash of a program (`Program.get_tree_hash`).
- `curry` — specialize a template with fixed arguments (`Program.curry`).
- `curry_tree_hash` — the hash of the same curried program computed from the template hash and
  argument hashes alone (`curry_and_treehash`), without materializing anything.

Both paths take one argument list, so a caller describes the arguments once and derives either
the full program or its hash from it. Arguments may be pre-hashed with `TreeHash`, which only the
shortcut path accepts.

Notes:
    - `curry_tree_hash(tree_hash(mod), args) == tree_hash(curry(mod, args))` for any arguments
      that can be materialized; tests assert this for every template used by offers.

Examples:
    >>> from partial_offers.core.hashing import curry, curry_tree_hash, tree_hash
    >>> from partial_offers.core.serde import to_program
    >>> mod = to_program([1, 2, 3])
    >>> curry_tree_hash(tree_hash(mod), [5, b"x"]) == tree_hash(curry(mod, [5, b"x"]))
    True
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from chia.types.blockchain_format.program import Program
from chia.wallet.util.curry_and_treehash import (
    calculate_hash_of_quoted_mod_hash,
    curry_and_treehash,
    shatree_atom,
)
from chia_rs.sized_bytes import bytes32

from .serde import to_program

__all__ = [
    "sha256",
    "TreeHash",
    "tree_hash",
    "hash_value",
    "curry",
    "curry_tree_hash",
]


def sha256(*parts: bytes) -> bytes:
    """SHA-256 over the concatenation of `parts`."""
    h = hashlib.sha256()
    for part in parts:
        h.update(part)
    return h.digest()


@dataclass(frozen=True)
class TreeHash:
    """
    A digest that already is the tree hash of some (unmaterialized) subtree.

    Attributes:
        digest (bytes): 32-byte tree hash.

    Notes:
        Distinguishes "this value is the hash of a subtree" from "this 32-byte value is an
        atom", which hash differently.
    """

    digest: bytes

    def __post_init__(self) -> None:
        if len(self.digest) != 32:
            raise ValueError(f"TreeHash digest must be 32 bytes, got {len(self.digest)}")

    def __bytes__(self) -> bytes:
        return self.digest


def tree_hash(program: Any) -> bytes32:
    """
    Compute the tree hash of a program (or any value convertible with `to_program`).

    Returns:
        bytes32: 32-byte digest.
    """
    return to_program(program).get_tree_hash()


def hash_value(value: Any) -> bytes32:
    """Tree hash of a value, passing `TreeHash` digests through unchanged."""
    if isinstance(value, TreeHash):
        return bytes32(value.digest)
    if isinstance(value, bytes):
        return shatree_atom(value)
    return tree_hash(value)


def curry(mod: Any, args: Sequence[Any]) -> Program:
    """
    Materialize `mod` curried with `args`.

    Raises:
        TypeError: If any argument is a pre-hashed `TreeHash`.
    """
    for arg in args:
        if isinstance(arg, TreeHash):
            raise TypeError("cannot materialize a curried program from a pre-hashed argument")
    return to_program(mod).curry(*[to_program(arg) for arg in args])


def curry_tree_hash(mod_hash: bytes, args: Sequence[Any]) -> bytes32:
    """
    Hash of `curry(mod, args)` given only `tree_hash(mod)` and the arguments (or their hashes).

    Args:
        mod_hash (bytes): Tree hash of the uncurried template.
        args (Sequence[Any]): Argument values or `TreeHash` digests.

    Returns:
        bytes32: 32-byte tree hash of the curried program.
    """
    quoted_mod_hash = calculate_hash_of_quoted_mod_hash(bytes32(mod_hash))
    return curry_and_treehash(quoted_mod_hash, *[hash_value(arg) for arg in args])
