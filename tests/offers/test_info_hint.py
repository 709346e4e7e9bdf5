from __future__ import annotations

import itertools

import pytest
from chia.types.blockchain_format.program import Program
from chia.wallet.cat_wallet.cat_utils import CAT_MOD, construct_cat_puzzle
from chia_puzzles_py.programs import P2_1_OF_N, SETTLEMENT_PAYMENT
from chia_rs.sized_bytes import bytes32

from partial_offers.core.assets import AssetDescriptor, LineageProof
from partial_offers.core.errors import AmbiguousHintError
from partial_offers.core.hashing import tree_hash
from partial_offers.core.merkle import root_from_proof
from partial_offers.core.pricing import PriceModel
from partial_offers.core.serde import program_to_bytes, to_program
from partial_offers.offers.info import Hint, OfferInfo

ASSET_ID = b"\x07" * 32
MAKER = b"\x11" * 32
LINEAGE = LineageProof(parent_parent_id=b"\x21" * 32, parent_inner_hash=b"\x22" * 32, parent_amount=7)
PRICE = PriceModel(price_precision=100_000, precision=20_000)

DESCRIPTORS = {
    "native": AssetDescriptor.native(),
    "token": AssetDescriptor.token(ASSET_ID),
    "revocable": AssetDescriptor.token(ASSET_ID, b"\x09" * 32),
}

PAIRS = [(o, r) for o, r in itertools.product(sorted(DESCRIPTORS), repeat=2) if o != r]


def _info(offered: str = "native", requested: str = "token", **kwargs) -> OfferInfo:
    fields = {
        "offered": DESCRIPTORS[offered],
        "requested": DESCRIPTORS[requested],
        "maker_receiver_hash": MAKER,
        "price": PRICE,
    }
    fields.update(kwargs)
    return OfferInfo(**fields)


def _hint_program(conditions, price=(100_000, 20_000), lineage=None):
    return to_program(
        [lineage, DESCRIPTORS["native"], DESCRIPTORS["token"], price, MAKER, conditions]
    )


@pytest.mark.parametrize("offered, requested", PAIRS)
def test_hash_shortcuts_match_materialized_programs(offered: str, requested: str) -> None:
    info = _info(offered, requested, expiration=1_700_000_000, required_fee=10)
    assert info.core_hash() == tree_hash(info.core_program())
    assert info.inner_hash() == tree_hash(info.inner_program())
    assert info.full_hash() == tree_hash(info.full_program())


def test_token_offer_hash_matches_ledger_constructions() -> None:
    info = _info("token", "native", expiration=1_700_000_000, required_fee=10)
    selector = Program.from_bytes(P2_1_OF_N).curry(info.merkle_tree().root)
    assert info.inner_hash() == selector.get_tree_hash()
    expected = construct_cat_puzzle(CAT_MOD, bytes32(ASSET_ID), selector)
    assert info.full_hash() == expected.get_tree_hash()


def test_requested_settlement_hash_matches_ledger_token_settlement() -> None:
    args = _info("native", "token").partial_args()
    settlement = construct_cat_puzzle(CAT_MOD, bytes32(ASSET_ID), Program.from_bytes(SETTLEMENT_PAYMENT))
    assert args.requested_settlement_hash == settlement.get_tree_hash()


def test_identical_terms_produce_identical_hashes() -> None:
    assert _info(expiration=5).full_hash() == _info(expiration=5).full_hash()
    assert _info(expiration=5).full_hash() != _info(expiration=6).full_hash()
    assert _info().full_hash() != _info(required_fee=0).full_hash()


def test_lineage_does_not_change_hashes() -> None:
    info = _info("token", "native")
    assert info.with_lineage_proof(LINEAGE).full_hash() == info.full_hash()


def test_conditions_order_expiry_then_fee() -> None:
    assert _info().conditions() == []
    assert _info(required_fee=3).conditions() == [[52, 3]]
    assert _info(expiration=9, required_fee=3).conditions() == [[85, 9], [52, 3]]


def test_merkle_leaves_are_core_then_maker() -> None:
    info = _info()
    tree = info.merkle_tree()
    assert tree.leaves == (info.core_hash(), MAKER)
    for leaf in tree.leaves:
        assert root_from_proof(leaf, tree.proof(leaf)) == tree.root


@pytest.mark.parametrize("expiration", [None, 1_700_000_000])
@pytest.mark.parametrize("required_fee", [None, 0, 25])
@pytest.mark.parametrize("lineage", [None, LINEAGE])
def test_hint_roundtrip(expiration, required_fee, lineage) -> None:
    info = _info("revocable", "native", expiration=expiration, required_fee=required_fee, lineage_proof=lineage)
    hint = info.to_hint()
    decoded = Hint.from_bytes(hint.to_bytes())
    assert decoded == hint
    assert OfferInfo.from_hint(decoded) == info


def test_hint_program_layout() -> None:
    hint = _info(expiration=4).to_hint()
    assert hint.to_program() == _hint_program([[85, 4]])


@pytest.mark.parametrize(
    "conditions",
    [
        [[52, 3], [85, 4]],  # reordered
        [[85, 4], [85, 5]],  # duplicate
        [[51, 4]],  # unknown opcode
        [[85, 4, 5]],  # extra argument
        [[85]],  # missing argument
        [[85, 4], [52, 3], [52, 3]],
    ],
)
def test_non_canonical_conditions_are_ambiguous(conditions) -> None:
    with pytest.raises(AmbiguousHintError):
        Hint.from_program(_hint_program(conditions))


def test_malformed_hints_are_ambiguous() -> None:
    good = _hint_program([])
    assert Hint.from_program(good).expiration is None

    bad = [
        to_program([None, DESCRIPTORS["native"], DESCRIPTORS["token"], (1, 2), MAKER]),
        _hint_program([], price=[1, 2]),
        _hint_program([], price=(0, 2)),
        _hint_program([], lineage=[b"\x01" * 32, b"\x02" * 32]),
        to_program([None, [None], DESCRIPTORS["token"], (1, 2), MAKER, []]),
        to_program([None, DESCRIPTORS["native"], DESCRIPTORS["token"], (1, 2), b"\x11" * 31, []]),
        to_program([None, [None, b"\x09" * 32], DESCRIPTORS["token"], (1, 2), MAKER, []]),
    ]
    for prog in bad:
        with pytest.raises(AmbiguousHintError):
            Hint.from_program(prog)


def test_hint_bytes_must_be_one_program() -> None:
    blob = program_to_bytes(_hint_program([]))
    with pytest.raises(AmbiguousHintError):
        Hint.from_bytes(blob + b"\x80")
    with pytest.raises(AmbiguousHintError):
        Hint.from_bytes(blob[:-1])
