"""
Ledger value model: coins, coin spends, and spend bundles.

The value types and their byte format are the ledger's own (`chia_rs`); this module adds the
conversions offers need between those types and the script value model.

Notes:
    - Programs inside a spend are stored as their exact serialized bytes, so a bundle read from
      bytes writes back identically.
    - The identity signature (`G2Element()`) marks a bundle that needs no authorization of its
      own.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from chia.types.coin_spend import make_spend
from chia_rs import Coin, CoinSpend, G2Element, SpendBundle

from ..core.errors import SerializationError
from ..core.serde import Program, program_from_bytes, to_program

__all__ = [
    "IDENTITY_SIGNATURE",
    "Coin",
    "CoinSpend",
    "G2Element",
    "SpendBundle",
    "new_spend",
    "spend_puzzle",
    "spend_solution",
    "bundle_to_bytes",
    "bundle_from_bytes",
    "with_spends",
    "coin_program",
]

IDENTITY_SIGNATURE: G2Element = G2Element()


def new_spend(coin: Coin, puzzle: Any, solution: Any) -> CoinSpend:
    """Build a spend from program values (anything `to_program` accepts)."""
    return make_spend(coin, to_program(puzzle), to_program(solution))


def spend_puzzle(cs: CoinSpend) -> Program:
    return program_from_bytes(bytes(cs.puzzle_reveal))


def spend_solution(cs: CoinSpend) -> Program:
    return program_from_bytes(bytes(cs.solution))


def bundle_to_bytes(bundle: SpendBundle) -> bytes:
    return bytes(bundle)


def bundle_from_bytes(data: bytes) -> SpendBundle:
    """
    Parse a serialized bundle.

    Raises:
        SerializationError: If the bytes are truncated, malformed, or have trailing data.
    """
    try:
        return SpendBundle.from_bytes(data)
    except ValueError as exc:
        raise SerializationError(f"malformed spend bundle: {exc}") from exc


def with_spends(bundle: SpendBundle, spends: Iterable[CoinSpend]) -> SpendBundle:
    """Same signature, spends appended."""
    return SpendBundle(list(bundle.coin_spends) + list(spends), bundle.aggregated_signature)


def coin_program(coin: Coin) -> Program:
    """`(parent_coin_info puzzle_hash amount)`, the form token solutions carry."""
    return to_program([coin.parent_coin_info, coin.puzzle_hash, int(coin.amount)])
