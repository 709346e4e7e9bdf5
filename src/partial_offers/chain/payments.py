"""
Settlement payments and the announcements that bind two spends into one exchange.

A notarized payment is `(nonce . payments)`; the settlement template announces the tree hash of
each notarized payment it pays out, and the other side of the trade asserts that announcement.
The announcement id a spend asserts is sha256(announcing_puzzle_hash ‖ message).

Program forms:
    Payment           (puzzle_hash amount)            without memos
                      (puzzle_hash amount (memo ...)) with memos
    NotarizedPayment  (nonce . (payment ...))
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from ..core.constants import ASSERT_PUZZLE_ANNOUNCEMENT
from ..core.hashing import sha256, tree_hash
from ..core.serde import Program, to_program
from ..core.typing import Amount, Bytes32

__all__ = [
    "Payment",
    "NotarizedPayment",
    "announcement_id",
    "payment_assertion",
]


class Payment(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    puzzle_hash: Bytes32
    amount: Amount
    memos: tuple[bytes, ...] = ()

    def to_program(self) -> Any:
        if self.memos:
            return to_program([self.puzzle_hash, self.amount, list(self.memos)])
        return to_program([self.puzzle_hash, self.amount])


class NotarizedPayment(BaseModel):
    """
    Payments released by a settlement coin under one nonce.

    Attributes:
        nonce (bytes): 32-byte nonce; offers use the parent id of the coin being filled.
        payments (tuple[Payment, ...]): Payments created by the settlement spend.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    nonce: Bytes32
    payments: tuple[Payment, ...]

    @property
    def total(self) -> int:
        return sum(p.amount for p in self.payments)

    def to_program(self) -> Any:
        return to_program((self.nonce, list(self.payments)))

    def message(self) -> bytes:
        """Announcement message: tree hash of `(nonce . payments)`."""
        return tree_hash(self)


def announcement_id(puzzle_hash: bytes, message: bytes) -> bytes:
    return sha256(puzzle_hash, message)


def payment_assertion(settlement_puzzle_hash: bytes, notarized_payment: NotarizedPayment) -> Program:
    """
    Condition asserting that a settlement coin released `notarized_payment`.

    Args:
        settlement_puzzle_hash (bytes): Full locking-script hash of the announcing settlement coin
            (the settlement template wrapped in the asset's layers).
        notarized_payment (NotarizedPayment): Payment the settlement spend must announce.

    Returns:
        Program: `(ASSERT_PUZZLE_ANNOUNCEMENT announcement_id)`.
    """
    return to_program(
        [ASSERT_PUZZLE_ANNOUNCEMENT, announcement_id(settlement_puzzle_hash, notarized_payment.message())]
    )
