"""
Offer terms, their layered commitment hashes, and the on-chain hint that carries them.

`OfferInfo` fully determines the offer coin's locking-script hash through three layers:

    core  = partial(asset_maker(offered), wrap(requested, settlement), maker, 0, conditions, price)
    inner = p2_one_of_many(merkle_root([core, maker]))
    full  = wrap(offered, inner)

The partial template's arguments are described once by `PartialArgs`; the hash path feeds them
to `curry_tree_hash` (with the asset maker pre-hashed) and the program path feeds the same list
to `curry`.

Hint program layout (carried as the puzzle reveal of the sentinel spend):

    (lineage_proof offered requested (price_precision . precision) maker_receiver_hash conditions)

where `conditions` is one of `()`, `((85 expiration))`, `((52 fee))`, or
`((85 expiration) (52 fee))`. Any other shape is rejected.

Notes:
    - Identical fields always produce identical hashes; a reconstructed offer is recognized on
      chain by recomputing `full_hash()`.
    - The minimum fill amount curried into the template is always 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from ..core.assets import (
    AssetDescriptor,
    LineageProof,
    asset_maker_hash,
    asset_maker_program,
    wrap_hash,
    wrap_program,
)
from ..core.constants import ASSERT_BEFORE_SECONDS_ABSOLUTE, MINIMUM_FILL, RESERVE_FEE
from ..core.errors import AmbiguousHintError
from ..core.hashing import TreeHash, curry, curry_tree_hash
from ..core.merkle import MerkleTree
from ..core.pricing import PriceModel
from ..core.puzzles import P2_ONE_OF_MANY, PARTIAL, SETTLEMENT_PAYMENT, puzzle_set
from ..core.serde import (
    Program,
    as_bytes32,
    as_list,
    as_u64,
    program_from_bytes,
    program_to_bytes,
    to_program,
)
from ..core.typing import Amount, Bytes32

__all__ = [
    "OfferInfo",
    "PartialArgs",
    "Hint",
]


@dataclass(frozen=True)
class PartialArgs:
    """
    Curried arguments of the partial template, in template order.

    Attributes:
        asset_maker (Any): Offered-side asset maker, as a program or a `TreeHash`.
        requested_settlement_hash (bytes): Full hash of a settlement coin of the requested asset.
        receiver_hash (bytes): Maker's receiver puzzle hash.
        minimum_fill (int): Smallest accepted requested-side amount.
        conditions (Any): Condition list prepended to the fill output.
        price (PriceModel): Exchange ratio.
    """

    asset_maker: Any
    requested_settlement_hash: bytes
    receiver_hash: bytes
    minimum_fill: int
    conditions: Any
    price: PriceModel

    def as_list(self) -> list[Any]:
        return [
            self.asset_maker,
            self.requested_settlement_hash,
            self.receiver_hash,
            self.minimum_fill,
            self.conditions,
            self.price,
        ]


class OfferInfo(BaseModel):
    """
    Immutable terms of a partial offer.

    Attributes:
        lineage_proof (LineageProof | None): Provenance of the offer coin's parent (tokens only).
        offered (AssetDescriptor): Asset locked in the offer coin.
        requested (AssetDescriptor): Asset the maker wants in return.
        maker_receiver_hash (bytes): Where fill proceeds go; also the claw-back leaf.
        expiration (int | None): Absolute timestamp before which fills must confirm.
        required_fee (int | None): Fee every fill must reserve.
        price (PriceModel): Exchange ratio.

    Examples:
        >>> from partial_offers.offers.info import OfferInfo
        >>> from partial_offers.core.assets import AssetDescriptor
        >>> from partial_offers.core.pricing import PriceModel
        >>> info = OfferInfo(
        ...     offered=AssetDescriptor.native(),
        ...     requested=AssetDescriptor.token(b"\\x07" * 32),
        ...     maker_receiver_hash=b"\\x11" * 32,
        ...     expiration=100,
        ...     price=PriceModel(price_precision=100_000, precision=20_000),
        ... )
        >>> info.conditions()
        [[85, 100]]
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    lineage_proof: LineageProof | None = None
    offered: AssetDescriptor
    requested: AssetDescriptor
    maker_receiver_hash: Bytes32
    expiration: Amount | None = None
    required_fee: Amount | None = None
    price: PriceModel

    def with_lineage_proof(self, lineage_proof: LineageProof | None) -> OfferInfo:
        return self.model_copy(update={"lineage_proof": lineage_proof})

    def conditions(self) -> list[list[int]]:
        """Accept-branch conditions: expiry assertion then fee reservation, when present."""
        return _conditions(self.expiration, self.required_fee)

    # -- partial template ---------------------------------------------------

    def partial_args(self, *, materialize: bool = False) -> PartialArgs:
        """
        Arguments for the partial template.

        Args:
            materialize (bool): Provide the asset maker as a program (for `curry`) instead of
                its hash (for `curry_tree_hash`).
        """
        ps = puzzle_set()
        if materialize:
            maker: Any = asset_maker_program(self.offered, ps)
        else:
            maker = TreeHash(asset_maker_hash(self.offered, ps))
        return PartialArgs(
            asset_maker=maker,
            requested_settlement_hash=wrap_hash(self.requested, ps.hash(SETTLEMENT_PAYMENT), ps),
            receiver_hash=self.maker_receiver_hash,
            minimum_fill=MINIMUM_FILL,
            conditions=self.conditions(),
            price=self.price,
        )

    def core_hash(self) -> bytes:
        return curry_tree_hash(puzzle_set().hash(PARTIAL), self.partial_args().as_list())

    def core_program(self) -> Program:
        return curry(puzzle_set().program(PARTIAL), self.partial_args(materialize=True).as_list())

    # -- branch selector ----------------------------------------------------

    def merkle_tree(self) -> MerkleTree:
        """Two-leaf tree `[core_hash, maker_receiver_hash]`; leaf order is fixed."""
        return MerkleTree.build([self.core_hash(), self.maker_receiver_hash])

    def inner_hash(self) -> bytes:
        return curry_tree_hash(puzzle_set().hash(P2_ONE_OF_MANY), [self.merkle_tree().root])

    def inner_program(self) -> Program:
        return curry(puzzle_set().program(P2_ONE_OF_MANY), [self.merkle_tree().root])

    # -- full locking script ------------------------------------------------

    def full_hash(self) -> bytes:
        return wrap_hash(self.offered, self.inner_hash())

    def full_program(self) -> Program:
        return wrap_program(self.offered, self.inner_program())

    # -- hint ---------------------------------------------------------------

    def to_hint(self) -> Hint:
        return Hint(
            lineage_proof=self.lineage_proof,
            offered=self.offered,
            requested=self.requested,
            price=self.price,
            maker_receiver_hash=self.maker_receiver_hash,
            expiration=self.expiration,
            required_fee=self.required_fee,
        )

    @classmethod
    def from_hint(cls, hint: Hint) -> OfferInfo:
        return cls(
            lineage_proof=hint.lineage_proof,
            offered=hint.offered,
            requested=hint.requested,
            maker_receiver_hash=hint.maker_receiver_hash,
            expiration=hint.expiration,
            required_fee=hint.required_fee,
            price=hint.price,
        )


class Hint(BaseModel):
    """
    On-chain projection of `OfferInfo`.

    Expiration and fee are explicit optional fields; only the program form encodes them as a
    condition list, rebuilt on the fly.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    lineage_proof: LineageProof | None = None
    offered: AssetDescriptor
    requested: AssetDescriptor
    price: PriceModel
    maker_receiver_hash: Bytes32
    expiration: Amount | None = None
    required_fee: Amount | None = None

    def conditions(self) -> list[list[int]]:
        return _conditions(self.expiration, self.required_fee)

    def to_program(self) -> Any:
        return to_program(
            [
                self.lineage_proof,
                self.offered,
                self.requested,
                self.price,
                self.maker_receiver_hash,
                self.conditions(),
            ]
        )

    def to_bytes(self) -> bytes:
        return program_to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Hint:
        """
        Decode a serialized hint.

        Raises:
            AmbiguousHintError: If the bytes are not exactly one well-formed hint.
        """
        try:
            prog = program_from_bytes(data)
        except ValueError as exc:
            raise AmbiguousHintError(f"hint does not parse: {exc}") from exc
        return cls.from_program(prog)

    @classmethod
    def from_program(cls, prog: Program) -> Hint:
        """
        Decode a hint program.

        Raises:
            AmbiguousHintError: On any structural deviation from the canonical layout,
                including unrecognized condition lists.
        """
        try:
            items = as_list(prog)
            if len(items) != 6:
                raise ValueError(f"expected 6 hint fields, got {len(items)}")
            lineage, offered, requested, price, maker, conditions = items
            expiration, required_fee = _parse_conditions(conditions)
            return cls(
                lineage_proof=_parse_lineage(lineage),
                offered=_parse_descriptor(offered),
                requested=_parse_descriptor(requested),
                price=_parse_price(price),
                maker_receiver_hash=as_bytes32(maker),
                expiration=expiration,
                required_fee=required_fee,
            )
        except (ValueError, ValidationError) as exc:
            raise AmbiguousHintError(f"hint is not canonical: {exc}") from exc


def _conditions(expiration: int | None, required_fee: int | None) -> list[list[int]]:
    conds: list[list[int]] = []
    if expiration is not None:
        conds.append([ASSERT_BEFORE_SECONDS_ABSOLUTE, expiration])
    if required_fee is not None:
        conds.append([RESERVE_FEE, required_fee])
    return conds


def _is_nil(prog: Program) -> bool:
    return prog.atom == b""


def _parse_lineage(prog: Program) -> LineageProof | None:
    if _is_nil(prog):
        return None
    fields = as_list(prog)
    if len(fields) != 3:
        raise ValueError("lineage proof needs 3 fields")
    return LineageProof(
        parent_parent_id=as_bytes32(fields[0]),
        parent_inner_hash=as_bytes32(fields[1]),
        parent_amount=as_u64(fields[2]),
    )


def _parse_descriptor(prog: Program) -> AssetDescriptor:
    fields = as_list(prog)
    if len(fields) != 2:
        raise ValueError("asset descriptor needs 2 fields")
    asset_id, hidden = (None if _is_nil(f) else as_bytes32(f) for f in fields)
    return AssetDescriptor(asset_id=asset_id, hidden_override_hash=hidden)


def _parse_price(prog: Program) -> PriceModel:
    if prog.pair is None:
        raise ValueError("price must be a pair")
    first, rest = prog.pair
    return PriceModel(price_precision=as_u64(Program.to(first)), precision=as_u64(Program.to(rest)))


def _parse_conditions(prog: Program) -> tuple[int | None, int | None]:
    parsed: list[tuple[int, int]] = []
    for cond in as_list(prog):
        fields = as_list(cond)
        if len(fields) != 2:
            raise ValueError("condition must have exactly one argument")
        parsed.append((as_u64(fields[0]), as_u64(fields[1])))
    opcodes = tuple(op for op, _ in parsed)
    if opcodes == ():
        return None, None
    if opcodes == (ASSERT_BEFORE_SECONDS_ABSOLUTE,):
        return parsed[0][1], None
    if opcodes == (RESERVE_FEE,):
        return None, parsed[0][1]
    if opcodes == (ASSERT_BEFORE_SECONDS_ABSOLUTE, RESERVE_FEE):
        return parsed[0][1], parsed[1][1]
    raise ValueError(f"unrecognized condition list {opcodes}")
