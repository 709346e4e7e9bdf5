from __future__ import annotations

import pytest

from partial_offers.core.assets import AssetDescriptor
from partial_offers.core.errors import ArithmeticOverflow, OverfillError
from partial_offers.core.pricing import PriceModel
from partial_offers.core.serde import to_program
from partial_offers.offers.info import OfferInfo
from partial_offers.offers.instance import OfferInstance
from partial_offers.offers.planning import cancellation_conditions, plan_take, summarize

ASSET_ID = b"\x07" * 32
MAKER = b"\x11" * 32


def _instance(amount: int, price_precision: int, precision: int, **kwargs) -> OfferInstance:
    info = OfferInfo(
        offered=AssetDescriptor.native(),
        requested=AssetDescriptor.token(ASSET_ID),
        maker_receiver_hash=MAKER,
        price=PriceModel(price_precision=price_precision, precision=precision),
        **kwargs,
    )
    return OfferInstance.new(b"\x44" * 32, amount, info)


@pytest.mark.parametrize(
    "take, output, child",
    [
        (20_000, 100_000, 0),
        (5_000, 25_000, 75_000),
        (1, 5, 99_995),
    ],
)
def test_plan_take_exact_prices(take: int, output: int, child: int) -> None:
    plan = plan_take(_instance(100_000, 100_000, 20_000), take)
    assert (plan.take_amount, plan.output_amount, plan.savings, plan.child_amount) == (take, output, 0, child)


def test_plan_take_clamps_wasted_units() -> None:
    plan = plan_take(_instance(100, 2, 3), 4)
    assert plan.take_amount == 3
    assert plan.savings == 1
    assert plan.output_amount == 2
    assert plan.child_amount == 98


def test_plan_take_carries_required_fee() -> None:
    assert plan_take(_instance(100_000, 100_000, 20_000, required_fee=9), 10).required_fee == 9
    assert plan_take(_instance(100_000, 100_000, 20_000), 10).required_fee == 0


def test_plan_take_rejects_overfill() -> None:
    with pytest.raises(OverfillError, match="at most 20000"):
        plan_take(_instance(100_000, 100_000, 20_000), 20_001)


def test_plan_take_rejects_dust() -> None:
    with pytest.raises(ValueError, match="too small"):
        plan_take(_instance(100, 1, 10), 9)


def test_plan_take_overflow() -> None:
    with pytest.raises(ArithmeticOverflow):
        plan_take(_instance(100, 2**63, 1), 4)


def test_summarize() -> None:
    instance = _instance(75_000, 100_000, 20_000, expiration=50)
    summary = summarize(instance)
    assert summary.coin_id == instance.coin.name()
    assert summary.offered_asset_id is None
    assert summary.requested_asset_id == ASSET_ID
    assert summary.remaining_offered == 75_000
    assert summary.remaining_requested == 15_000
    assert summary.expiration == 50
    assert summary.required_fee is None


def test_cancellation_returns_whole_coin_to_maker() -> None:
    program = cancellation_conditions(_instance(75_000, 1, 1))
    assert program == to_program((1, [[51, MAKER, 75_000, [MAKER]]]))
