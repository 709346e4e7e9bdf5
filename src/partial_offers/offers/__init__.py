"""
partial_offers.offers — offer terms and the lifecycle of one offer coin.

## Public API
- OfferInfo, Hint — terms, commitment hashes, and their on-chain projection.
- OfferInstance, Branch, AcceptResult — new / from_bundle / to_bundle / accept / claw_back / child.
- CounterOffer — the taker's side of a fill.
- plan_take, summarize, cancellation_conditions — sizing, viewing, and cancelling.

## Examples
```python
from partial_offers.offers import OfferInstance
offer = OfferInstance.from_bundle(bundle)  # doctest: +SKIP
result = offer.accept(counter_offer)  # doctest: +SKIP
result.child  # remaining offer, or None after a terminal fill
```
"""

from __future__ import annotations

from .counter import CounterOffer, OfferedCoins, RequestedPayments
from .info import Hint, OfferInfo, PartialArgs
from .instance import AcceptResult, Branch, OfferInstance
from .planning import OfferSummary, TakePlan, cancellation_conditions, plan_take, summarize

__all__ = [
    "OfferInfo",
    "Hint",
    "PartialArgs",
    "OfferInstance",
    "Branch",
    "AcceptResult",
    "CounterOffer",
    "OfferedCoins",
    "RequestedPayments",
    "TakePlan",
    "OfferSummary",
    "plan_take",
    "summarize",
    "cancellation_conditions",
]
