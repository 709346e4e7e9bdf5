"""
Taker and maker planning helpers built on top of `OfferInstance`.

- `plan_take` sizes a fill: it clamps the taker's request so no requested-asset units are paid
  for nothing, re-quotes the clamped amount, and reports what the taker saves.
- `summarize` describes what is left of an offer.
- `cancellation_conditions` is the delegated program a maker's wallet signs to claw back the
  whole coin.

Examples:
    >>> from partial_offers.core.pricing import PriceModel
    >>> PriceModel(price_precision=100_000, precision=20_000).clamp(5_001)
    (5001, 0)
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from ..core.constants import CREATE_COIN
from ..core.errors import OverfillError
from ..core.pricing import PriceModel
from ..core.serde import to_program
from ..core.typing import Amount, Bytes32
from .instance import OfferInstance

__all__ = [
    "TakePlan",
    "OfferSummary",
    "plan_take",
    "summarize",
    "cancellation_conditions",
]


class TakePlan(BaseModel):
    """
    A sized fill.

    Attributes:
        take_amount (int): Requested-asset amount the taker should give (after clamping).
        output_amount (int): Offered-asset amount the taker receives.
        savings (int): Requested-asset units the clamp saved the taker.
        child_amount (int): Amount of the child offer (0 for a terminal fill).
        required_fee (int): Native fee the taker must add on top.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    take_amount: Amount
    output_amount: Amount
    savings: Amount
    child_amount: Amount
    required_fee: Amount = 0


class OfferSummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    coin_id: Bytes32
    offered_asset_id: Bytes32 | None
    requested_asset_id: Bytes32 | None
    remaining_offered: Amount
    remaining_requested: Amount
    expiration: Amount | None
    required_fee: Amount | None
    price: PriceModel
    maker_receiver_hash: Bytes32


def plan_take(instance: OfferInstance, take_amount: int) -> TakePlan:
    """
    Size a fill of `take_amount` requested-asset units.

    Raises:
        ValueError: If the amount buys nothing.
        OverfillError: If the fill would release more than the coin holds.
        ArithmeticOverflow: If quoting does not fit in 64 bits.
    """
    price = instance.info.price
    if price.quote(take_amount) > instance.coin.amount:
        raise OverfillError(
            f"{take_amount} buys {price.quote(take_amount)}, offer holds {instance.coin.amount} "
            f"(at most {instance.remaining_requested()} can be taken)"
        )
    clamped, savings = price.clamp(take_amount)
    output = price.quote(clamped)
    if output == 0:
        raise ValueError(f"{take_amount} is too small to buy anything")
    return TakePlan(
        take_amount=clamped,
        output_amount=output,
        savings=savings,
        child_amount=instance.coin.amount - output,
        required_fee=instance.info.required_fee or 0,
    )


def summarize(instance: OfferInstance) -> OfferSummary:
    info = instance.info
    return OfferSummary(
        coin_id=instance.coin.name(),
        offered_asset_id=info.offered.asset_id,
        requested_asset_id=info.requested.asset_id,
        remaining_offered=instance.coin.amount,
        remaining_requested=instance.remaining_requested(),
        expiration=info.expiration,
        required_fee=info.required_fee,
        price=info.price,
        maker_receiver_hash=info.maker_receiver_hash,
    )


def cancellation_conditions(instance: OfferInstance) -> Any:
    """Delegated program `(q . ((51 maker amount (maker))))` returning the whole coin."""
    maker = instance.info.maker_receiver_hash
    return to_program((1, [[CREATE_COIN, maker, instance.coin.amount, [maker]]]))
