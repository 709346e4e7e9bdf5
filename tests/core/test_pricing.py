from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from partial_offers.core.errors import ArithmeticOverflow
from partial_offers.core.pricing import PriceModel, checked_mul_div


def test_quote_and_reverse_quote_five_to_one() -> None:
    price = PriceModel(price_precision=100_000, precision=20_000)
    assert price.quote(20_000) == 100_000
    assert price.quote(5_000) == 25_000
    assert price.reverse_quote(75_000) == 15_000


@pytest.mark.parametrize(
    "price_precision,precision",
    [(1, 1), (2, 3), (3, 2), (100_000, 20_000), (7, 1_000_003), (2**31 - 1, 97)],
)
def test_reverse_quote_never_exceeds_request(price_precision: int, precision: int) -> None:
    price = PriceModel(price_precision=price_precision, precision=precision)
    rng = random.Random(price_precision * 31 + precision)
    amounts = [0, 1, 2, precision, price_precision] + [rng.randrange(2**32) for _ in range(200)]
    for amount in amounts:
        back = price.reverse_quote(price.quote(amount))
        assert back <= amount
        assert (back == amount) == ((amount * price_precision) % precision == 0)


def test_clamp_reports_savings() -> None:
    price = PriceModel(price_precision=2, precision=3)
    assert price.clamp(4) == (3, 1)
    assert price.clamp(3) == (3, 0)
    # the clamped amount buys the same as the original request
    assert price.quote(3) == price.quote(4)


def test_quote_overflow_is_reported() -> None:
    price = PriceModel(price_precision=2, precision=1)
    with pytest.raises(ArithmeticOverflow):
        price.quote(2**63)
    assert price.quote(2**63 - 1) == 2**64 - 2


def test_checked_mul_div_bound_is_inclusive() -> None:
    assert checked_mul_div(2**64 - 1, 1, 1) == 2**64 - 1
    with pytest.raises(ArithmeticOverflow):
        checked_mul_div(2**32, 2**32, 1)


@pytest.mark.parametrize("field", ["price_precision", "precision"])
@pytest.mark.parametrize("value", [0, -1, 2**64])
def test_price_model_rejects_out_of_range(field: str, value: int) -> None:
    kwargs = {"price_precision": 1, "precision": 1}
    kwargs[field] = value
    with pytest.raises(ValidationError):
        PriceModel(**kwargs)


def test_from_ratio_trades_exact_amounts() -> None:
    price = PriceModel.from_ratio(100_000, 20_000)
    assert price.quote(20_000) == 100_000
    assert price.reverse_quote(100_000) == 20_000
