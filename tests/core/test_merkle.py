from __future__ import annotations

import hashlib

import pytest

from partial_offers.core.merkle import MerkleProof, MerkleTree, root_from_proof

A = b"\xaa" * 32
B = b"\xbb" * 32


def _sha(*parts: bytes) -> bytes:
    return hashlib.sha256(b"".join(parts)).digest()


def test_two_leaf_root_and_proofs() -> None:
    tree = MerkleTree.build([A, B])
    assert tree.root == _sha(b"\x02", _sha(b"\x01", A), _sha(b"\x01", B))

    proof_a = tree.proof(A)
    proof_b = tree.proof(B)
    assert proof_a == MerkleProof(path=0, siblings=(_sha(b"\x01", B),))
    assert proof_b == MerkleProof(path=1, siblings=(_sha(b"\x01", A),))
    assert root_from_proof(A, proof_a) == tree.root
    assert root_from_proof(B, proof_b) == tree.root


def test_leaf_order_matters() -> None:
    assert MerkleTree.build([A, B]).root != MerkleTree.build([B, A]).root


def test_proof_for_unknown_leaf_is_none() -> None:
    assert MerkleTree.build([A, B]).proof(b"\xcc" * 32) is None


@pytest.mark.parametrize("n", [1, 3, 5, 8])
def test_every_leaf_proves_against_root(n: int) -> None:
    leaves = [bytes([i]) * 32 for i in range(1, n + 1)]
    tree = MerkleTree.build(leaves)
    for leaf in leaves:
        assert root_from_proof(leaf, tree.proof(leaf)) == tree.root


def test_empty_tree_is_rejected() -> None:
    with pytest.raises(ValueError):
        MerkleTree.build([])
