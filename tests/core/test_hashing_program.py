from __future__ import annotations

import hashlib

import pytest

from partial_offers.core.hashing import TreeHash, curry, curry_tree_hash, hash_value, tree_hash
from partial_offers.core.puzzles import PARTIAL_TEMPLATE
from partial_offers.core.serde import (
    as_list,
    as_u64,
    program_from_bytes,
    program_to_bytes,
    to_program,
)


def _sha(*parts: bytes) -> bytes:
    return hashlib.sha256(b"".join(parts)).digest()


def test_tree_hash_of_atoms_and_pairs() -> None:
    atom_a = _sha(b"\x01", b"a")
    nil = _sha(b"\x01")
    assert tree_hash(b"a") == atom_a
    assert tree_hash(None) == nil
    assert tree_hash((b"a", None)) == _sha(b"\x02", atom_a, nil)
    # a one-element list is the same pair
    assert tree_hash([b"a"]) == tree_hash((b"a", None))


def test_tree_hash_handles_long_lists() -> None:
    long_list = list(range(20_000))
    assert len(tree_hash(long_list)) == 32


@pytest.mark.parametrize(
    "args",
    [
        [],
        [0],
        [1, b"x" * 32, None],
        [[[85, 100], [52, 7]], (3, 4)],
        [to_program([b"nested", [1, 2, 3]]), 2**64 - 1],
    ],
)
def test_curry_shortcut_matches_materialized(args: list) -> None:
    mod = to_program([2, (1, b"body"), [4, 5]])
    assert curry_tree_hash(tree_hash(mod), args) == tree_hash(curry(mod, args))


def test_curry_shortcut_accepts_pre_hashed_arguments() -> None:
    mod = to_program(b"mod")
    sub = to_program([b"sub", 1, 2])
    expected = tree_hash(curry(mod, [b"a", sub]))
    assert curry_tree_hash(tree_hash(mod), [b"a", TreeHash(tree_hash(sub))]) == expected
    assert hash_value(TreeHash(tree_hash(sub))) == tree_hash(sub)


def test_curry_rejects_pre_hashed_arguments() -> None:
    with pytest.raises(TypeError):
        curry(to_program(b"mod"), [TreeHash(b"\x00" * 32)])


def test_tree_hash_wrapper_checks_width() -> None:
    with pytest.raises(ValueError):
        TreeHash(b"\x00" * 31)


def test_program_bytes_roundtrip_and_trailing_data() -> None:
    prog = to_program([1, b"two", [3, (4, 5)]])
    blob = program_to_bytes(prog)
    assert program_from_bytes(blob) == prog
    with pytest.raises(ValueError):
        program_from_bytes(blob + b"\x80")
    with pytest.raises(ValueError):
        program_from_bytes(blob[:-1])


@pytest.mark.parametrize("atom", [b"\x00\x01", b"\xff", b"\x01" + b"\x00" * 8])
def test_as_u64_rejects_non_canonical_negative_and_wide(atom: bytes) -> None:
    with pytest.raises(ValueError):
        as_u64(to_program(atom))


def test_as_u64_accepts_full_range() -> None:
    assert as_u64(to_program(0)) == 0
    assert as_u64(to_program(2**64 - 1)) == 2**64 - 1


def test_as_list_rejects_improper_lists() -> None:
    assert len(as_list(to_program([1, 2, 3]))) == 3
    with pytest.raises(ValueError):
        as_list(to_program((1, 2)))


def test_partial_template_matches_golden_hash() -> None:
    assert len(PARTIAL_TEMPLATE.reveal) == 395
    assert tree_hash(PARTIAL_TEMPLATE.program()) == PARTIAL_TEMPLATE.golden_hash
    PARTIAL_TEMPLATE.verify()
