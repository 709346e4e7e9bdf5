"""
Layer drivers: token coins, group spends under supply conservation, and settlement spends.

A token coin's full locking script is the token layer (optionally over the revocation layer)
wrapped around an inner script. Token coins are spent as a group: each member's solution links
it to its neighbours in a ring so the token layer can check that the group as a whole neither
mints nor melts.

Solution shapes:
    token layer      (inner_solution lineage prev_coin_id this_coin next_coin_proof
                      prev_subtotal extra_delta)
    revocation layer (hidden inner_puzzle inner_solution)   # hidden = nil: regular path
    settlement       ((notarized_payment ...))

Notes:
    - There is no script evaluator here, so each member declares the amount its inner spend
      creates; `spend_token_group` checks conservation against those declarations.
    - prev_subtotal for member i is the sum of (amount - output_amount) over members before i.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..core.assets import AssetDescriptor, LineageProof, token_inner_hash, wrap_hash, wrap_program
from ..core.errors import ConservationError
from ..core.hashing import tree_hash
from ..core.puzzles import SETTLEMENT_PAYMENT, puzzle_set
from ..core.serde import Program, to_program
from .coins import Coin, CoinSpend, coin_program, new_spend
from .payments import NotarizedPayment

__all__ = [
    "TokenCoin",
    "TokenSpend",
    "coin_proof",
    "revocation_solution",
    "settlement_hash",
    "settlement_puzzle",
    "settlement_solution",
    "settlement_spend",
    "spend_token_group",
]

logger = logging.getLogger(__name__)


def settlement_hash() -> bytes:
    return puzzle_set().hash(SETTLEMENT_PAYMENT)


def settlement_puzzle() -> Program:
    return puzzle_set().program(SETTLEMENT_PAYMENT)


def settlement_solution(notarized_payments: Iterable[NotarizedPayment]) -> Program:
    return to_program([list(notarized_payments)])


def settlement_spend(coin: Coin, notarized_payments: Iterable[NotarizedPayment]) -> CoinSpend:
    """Spend a native settlement coin, releasing `notarized_payments`."""
    return new_spend(coin, settlement_puzzle(), settlement_solution(notarized_payments))


def revocation_solution(inner_puzzle: Any, inner_solution: Any) -> Program:
    return to_program([None, inner_puzzle, inner_solution])


def coin_proof(parent_id: bytes, inner_hash: bytes, amount: int) -> Program:
    return to_program([parent_id, inner_hash, amount])


class TokenCoin(BaseModel):
    """
    A token coin and what is needed to spend it.

    Attributes:
        coin (Coin): The coin itself.
        lineage_proof (LineageProof | None): Parent provenance (None only for issuance).
        descriptor (AssetDescriptor): Token the coin carries; must not be native.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    coin: Coin
    lineage_proof: LineageProof | None
    descriptor: AssetDescriptor

    @property
    def asset_id(self) -> bytes:
        if self.descriptor.asset_id is None:
            raise ValueError("token coin carries a native descriptor")
        return self.descriptor.asset_id


@dataclass(frozen=True)
class TokenSpend:
    """
    One member of a token group spend.

    Attributes:
        token (TokenCoin): Coin being spent.
        inner_puzzle (Program): Script below the token (and revocation) layers.
        inner_solution (Program): Solution to `inner_puzzle`.
        output_amount (int | None): Total the inner spend creates; None means the full coin
            amount.
    """

    token: TokenCoin
    inner_puzzle: Program
    inner_solution: Program
    output_amount: int | None = None

    @property
    def outputs(self) -> int:
        return self.token.coin.amount if self.output_amount is None else self.output_amount

    def inner_hash(self) -> bytes:
        return tree_hash(self.inner_puzzle)


def spend_token_group(spends: Sequence[TokenSpend]) -> list[CoinSpend]:
    """
    Spend token coins of one asset together.

    Args:
        spends (Sequence[TokenSpend]): Members in ring order.

    Returns:
        list[CoinSpend]: One spend per member, in the same order.

    Raises:
        ValueError: If `spends` is empty or an inner puzzle does not match its coin.
        ConservationError: If members carry different asset ids, or inputs and declared
            outputs differ.
    """
    if not spends:
        raise ValueError("token group spend needs at least one member")
    asset_ids = {s.token.asset_id for s in spends}
    if len(asset_ids) != 1:
        raise ConservationError("token group mixes asset ids")
    total_in = sum(s.token.coin.amount for s in spends)
    total_out = sum(s.outputs for s in spends)
    if total_in != total_out:
        raise ConservationError(f"token group is unbalanced: {total_in} in, {total_out} out")

    ps = puzzle_set()
    n = len(spends)
    out: list[CoinSpend] = []
    subtotal = 0
    for i, s in enumerate(spends):
        d = s.token.descriptor
        inner_hash = s.inner_hash()
        if wrap_hash(d, inner_hash, ps) != s.token.coin.puzzle_hash:
            raise ValueError(f"inner puzzle does not match token coin {s.token.coin.name().hex()}")
        prev = spends[(i - 1) % n].token.coin
        nxt = spends[(i + 1) % n]
        inner_solution: Any = s.inner_solution
        if d.is_revocable:
            inner_solution = revocation_solution(s.inner_puzzle, s.inner_solution)
        solution = to_program(
            [
                inner_solution,
                s.token.lineage_proof,
                prev.name(),
                coin_program(s.token.coin),
                coin_proof(
                    nxt.token.coin.parent_coin_info,
                    token_inner_hash(nxt.token.descriptor, nxt.inner_hash(), ps),
                    nxt.token.coin.amount,
                ),
                subtotal,
                0,
            ]
        )
        out.append(new_spend(s.token.coin, wrap_program(d, s.inner_puzzle, ps), solution))
        subtotal += s.token.coin.amount - s.outputs
    logger.debug("built token group spend of %d coins", n)
    return out
