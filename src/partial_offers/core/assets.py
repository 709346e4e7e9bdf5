"""
Asset descriptors, lineage proofs, and the per-descriptor layer wrapping of locking scripts.

An `AssetDescriptor` tags one side of a trade as the native currency or a token (optionally
revocable). The descriptor decides how an inner locking script is wrapped into the coin's full
locking script and which asset-maker program the partial template uses to recompute full hashes
on chain.

Layer wrapping (hash and program paths share one argument list per layer):
    native:    full = inner
    token:     full = cat(cat_mod_hash, asset_id, inner)
    revocable: full = cat(cat_mod_hash, asset_id, revocation(revocation_mod_hash, hidden, hash(inner)))

Asset makers (curried into the partial template; map an inner hash to a full hash on chain):
    native:    xch_asset_maker (uncurried)
    token:     default_asset_maker(hash(cat_mod_hash), hash(asset_id))
    revocable: revocable_asset_maker(hash(cat_mod_hash), hash(revocation_mod_hash),
                                     hash(hidden), hash(asset_id))
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from .hashing import TreeHash, curry, curry_tree_hash, hash_value, tree_hash
from .puzzles import (
    CAT,
    DEFAULT_ASSET_MAKER,
    REVOCABLE_ASSET_MAKER,
    REVOCATION_LAYER,
    XCH_ASSET_MAKER,
    PuzzleSet,
    puzzle_set,
)
from .serde import Program, to_program
from .typing import Amount, Bytes32

__all__ = [
    "AssetDescriptor",
    "LineageProof",
    "asset_maker_hash",
    "asset_maker_program",
    "token_inner_hash",
    "wrap_hash",
    "wrap_program",
]


class AssetDescriptor(BaseModel):
    """
    One side of a trade.

    Attributes:
        asset_id (bytes | None): Token asset id; None means native currency.
        hidden_override_hash (bytes | None): Issuer's hidden override puzzle hash; present only
            for revocable tokens.

    Raises:
        pydantic.ValidationError: If a hidden override hash is given without an asset id.

    Examples:
        >>> from partial_offers.core.assets import AssetDescriptor
        >>> AssetDescriptor.native().is_native
        True
        >>> AssetDescriptor.token(b"\\x07" * 32, b"\\x00" * 32).is_revocable
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    asset_id: Bytes32 | None = None
    hidden_override_hash: Bytes32 | None = None

    @model_validator(mode="after")
    def _check_hidden_requires_asset(self) -> AssetDescriptor:
        if self.hidden_override_hash is not None and self.asset_id is None:
            raise ValueError("hidden_override_hash requires an asset_id")
        return self

    @classmethod
    def native(cls) -> AssetDescriptor:
        return cls()

    @classmethod
    def token(cls, asset_id: bytes, hidden_override_hash: bytes | None = None) -> AssetDescriptor:
        return cls(asset_id=asset_id, hidden_override_hash=hidden_override_hash)

    @property
    def is_native(self) -> bool:
        return self.asset_id is None

    @property
    def is_revocable(self) -> bool:
        return self.hidden_override_hash is not None

    def to_program(self) -> Any:
        return to_program([self.asset_id, self.hidden_override_hash])


class LineageProof(BaseModel):
    """
    Provenance of a token coin's parent.

    Attributes:
        parent_parent_id (bytes): Parent's parent coin id.
        parent_inner_hash (bytes): Inner puzzle hash the token layer wrapped in the parent.
        parent_amount (int): Parent coin amount.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    parent_parent_id: Bytes32
    parent_inner_hash: Bytes32
    parent_amount: Amount

    def to_program(self) -> Any:
        return to_program([self.parent_parent_id, self.parent_inner_hash, self.parent_amount])


# ---------------------------------------------------------------------------
# Argument lists (shared by the hash and program paths)
# ---------------------------------------------------------------------------


def _maker_args(ps: PuzzleSet, d: AssetDescriptor) -> tuple[str, list[Any] | None]:
    if d.asset_id is None:
        return XCH_ASSET_MAKER, None
    cat_hash_hash = hash_value(ps.hash(CAT))
    tail_hash_hash = hash_value(d.asset_id)
    if d.hidden_override_hash is None:
        return DEFAULT_ASSET_MAKER, [cat_hash_hash, tail_hash_hash]
    return REVOCABLE_ASSET_MAKER, [
        cat_hash_hash,
        hash_value(ps.hash(REVOCATION_LAYER)),
        hash_value(d.hidden_override_hash),
        tail_hash_hash,
    ]


def _revocation_args(ps: PuzzleSet, d: AssetDescriptor, inner_hash: bytes) -> list[Any]:
    return [ps.hash(REVOCATION_LAYER), d.hidden_override_hash, inner_hash]


def _cat_args(ps: PuzzleSet, d: AssetDescriptor, inner: Any) -> list[Any]:
    return [ps.hash(CAT), d.asset_id, inner]


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------


def asset_maker_hash(d: AssetDescriptor, ps: PuzzleSet | None = None) -> bytes:
    ps = ps or puzzle_set()
    name, args = _maker_args(ps, d)
    if args is None:
        return ps.hash(name)
    return curry_tree_hash(ps.hash(name), args)


def asset_maker_program(d: AssetDescriptor, ps: PuzzleSet | None = None) -> Program:
    ps = ps or puzzle_set()
    name, args = _maker_args(ps, d)
    if args is None:
        return ps.program(name)
    return curry(ps.program(name), args)


def token_inner_hash(d: AssetDescriptor, inner_hash: bytes, ps: PuzzleSet | None = None) -> bytes:
    """Hash the token layer wraps: the revocation-wrapped inner hash for revocable tokens."""
    ps = ps or puzzle_set()
    if d.hidden_override_hash is None:
        return inner_hash
    return curry_tree_hash(ps.hash(REVOCATION_LAYER), _revocation_args(ps, d, inner_hash))


def wrap_hash(d: AssetDescriptor, inner_hash: bytes, ps: PuzzleSet | None = None) -> bytes:
    """Full locking-script hash of a coin of asset `d` whose inner script hashes to `inner_hash`."""
    ps = ps or puzzle_set()
    if d.asset_id is None:
        return inner_hash
    inner = TreeHash(token_inner_hash(d, inner_hash, ps))
    return curry_tree_hash(ps.hash(CAT), _cat_args(ps, d, inner))


def wrap_program(d: AssetDescriptor, inner: Program, ps: PuzzleSet | None = None) -> Program:
    """Full locking script of a coin of asset `d` with inner script `inner`."""
    ps = ps or puzzle_set()
    if d.asset_id is None:
        return inner
    if d.hidden_override_hash is not None:
        inner = curry(ps.program(REVOCATION_LAYER), _revocation_args(ps, d, tree_hash(inner)))
    return curry(ps.program(CAT), _cat_args(ps, d, inner))
