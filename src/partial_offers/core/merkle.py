"""
Merkle trees over 32-byte leaves, as committed to by the one-of-many branch selector.

Leaves are hashed as sha256(0x01 ‖ leaf) and interior nodes as sha256(0x02 ‖ left ‖ right).
A list of leaves is split recursively with the larger half on the left, so a 2-leaf tree is
exactly `node(leaf(a), leaf(b))` with the order given by the caller.

A proof is `(path, siblings)`: bit i of `path` is 1 when the proven node is the right child at
level i (counting up from the leaf), and `siblings[i]` is the sibling hash at that level.

Notes:
    - Proof lookup for a value that is not a leaf returns None; callers turn that into
      `ProofError` since their trees are fixed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .hashing import sha256
from .serde import to_program

__all__ = [
    "MerkleProof",
    "MerkleTree",
    "root_from_proof",
]

_LEAF_PREFIX = b"\x01"
_NODE_PREFIX = b"\x02"


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for one leaf.

    Attributes:
        path (int): Left/right bitmask from leaf to root.
        siblings (tuple[bytes, ...]): Sibling hashes from leaf to root.
    """

    path: int
    siblings: tuple[bytes, ...]

    def to_program(self) -> Any:
        return to_program((self.path, list(self.siblings)))


def root_from_proof(leaf: bytes, proof: MerkleProof) -> bytes:
    """Recompute the root a proof commits `leaf` to."""
    node = sha256(_LEAF_PREFIX, leaf)
    path = proof.path
    for sibling in proof.siblings:
        if path & 1:
            node = sha256(_NODE_PREFIX, sibling, node)
        else:
            node = sha256(_NODE_PREFIX, node, sibling)
        path >>= 1
    return node


@dataclass(frozen=True)
class MerkleTree:
    """
    Merkle tree built once from an ordered list of leaves.

    Attributes:
        leaves (tuple[bytes, ...]): Leaves in caller order.
        root (bytes): Root hash.

    Examples:
        >>> from partial_offers.core.merkle import MerkleTree, root_from_proof
        >>> tree = MerkleTree.build([b"\\xaa" * 32, b"\\xbb" * 32])
        >>> root_from_proof(b"\\xbb" * 32, tree.proof(b"\\xbb" * 32)) == tree.root
        True
    """

    leaves: tuple[bytes, ...]
    root: bytes
    _proofs: dict[bytes, MerkleProof] = field(repr=False, compare=False)

    @classmethod
    def build(cls, leaves: Sequence[bytes]) -> MerkleTree:
        if not leaves:
            raise ValueError("merkle tree needs at least one leaf")
        root, proofs = _build(list(leaves))
        return cls(
            leaves=tuple(leaves),
            root=root,
            _proofs={leaf: MerkleProof(path, tuple(sibs)) for leaf, (path, sibs) in proofs.items()},
        )

    def proof(self, leaf: bytes) -> MerkleProof | None:
        return self._proofs.get(leaf)


def _build(leaves: list[bytes]) -> tuple[bytes, dict[bytes, tuple[int, list[bytes]]]]:
    if len(leaves) == 1:
        return sha256(_LEAF_PREFIX, leaves[0]), {leaves[0]: (0, [])}
    mid = (len(leaves) + 1) >> 1
    left_root, left_proofs = _build(leaves[:mid])
    right_root, right_proofs = _build(leaves[mid:])
    proofs: dict[bytes, tuple[int, list[bytes]]] = {}
    for leaf, (path, sibs) in left_proofs.items():
        sibs.append(right_root)
        proofs[leaf] = (path, sibs)
    for leaf, (path, sibs) in right_proofs.items():
        path |= 1 << len(sibs)
        sibs.append(left_root)
        proofs[leaf] = (path, sibs)
    return sha256(_NODE_PREFIX, left_root, right_root), proofs
