"""
Integer exchange-ratio arithmetic for partial offers.

`PriceModel` fixes the ratio `price_precision : precision` between the offered and the
requested asset. Both directions truncate, and every product must fit in 64 bits because the
on-chain settlement template performs the same u64 arithmetic.

Math mapping:
    quote(x)         = floor(x * price_precision / precision)   # requested → offered
    reverse_quote(y) = floor(y * precision / price_precision)   # offered → requested
    reverse_quote(quote(x)) <= x, with equality iff precision divides x * price_precision

Examples:
    >>> from partial_offers.core.pricing import PriceModel
    >>> price = PriceModel(price_precision=100_000, precision=20_000)
    >>> price.quote(5_000)
    25000
    >>> PriceModel(price_precision=2, precision=3).clamp(4)
    (3, 1)
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ArithmeticOverflow
from .serde import to_program
from .typing import U64_MAX

__all__ = [
    "PriceModel",
    "checked_mul_div",
]


def checked_mul_div(value: int, numerator: int, denominator: int) -> int:
    """
    Compute floor(value * numerator / denominator) with a u64 bound on the product.

    Raises:
        ArithmeticOverflow: If `value * numerator` exceeds 2**64 - 1.
    """
    product = value * numerator
    if product > U64_MAX:
        raise ArithmeticOverflow(f"{value} * {numerator} does not fit in 64 bits")
    return product // denominator


class PriceModel(BaseModel):
    """
    Fixed exchange ratio between the offered and requested asset.

    Attributes:
        price_precision (int): Offered-side units of the ratio (u64, > 0).
        precision (int): Requested-side units of the ratio (u64, > 0).

    Raises:
        pydantic.ValidationError: If either component is zero or exceeds u64.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    price_precision: int = Field(..., gt=0, le=U64_MAX)
    precision: int = Field(..., gt=0, le=U64_MAX)

    @classmethod
    def from_ratio(cls, offered_amount: int, requested_amount: int) -> PriceModel:
        """Price that trades exactly `offered_amount` for `requested_amount`."""
        return cls(price_precision=offered_amount, precision=requested_amount)

    def quote(self, asked_amount: int) -> int:
        """Offered amount released for `asked_amount` of the requested asset."""
        return checked_mul_div(asked_amount, self.price_precision, self.precision)

    def reverse_quote(self, offered_amount: int) -> int:
        """Requested amount that buys `offered_amount` of the offered asset."""
        return checked_mul_div(offered_amount, self.precision, self.price_precision)

    def clamp(self, asked_amount: int) -> tuple[int, int]:
        """
        Clamp `asked_amount` down to `reverse_quote(quote(asked_amount))`.

        Quoting truncates, so part of `asked_amount` may buy nothing; the clamped amount drops
        it. Callers re-quote the clamped amount before building a counter-offer.

        Returns:
            tuple[int, int]: `(clamped_amount, savings)` where savings is what the taker
            would otherwise overpay.
        """
        clamped = self.reverse_quote(self.quote(asked_amount))
        return clamped, asked_amount - clamped

    def to_program(self) -> Any:
        return to_program((self.price_precision, self.precision))
