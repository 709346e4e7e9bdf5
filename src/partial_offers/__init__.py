"""
partial_offers — incrementally fillable offers on a coin ledger.

A maker locks an asset in one coin that any number of takers can fill piece by piece at a fixed
exchange ratio, until it is exhausted or the maker claws it back.

## Public API
- OfferSettings, configure_logging — runtime configuration.
- AssetDescriptor, PriceModel — trade sides and exchange ratio.
- OfferInfo, OfferInstance, CounterOffer — terms, offer coin lifecycle, taker side.
- encode_offer / decode_offer — offer strings.

## Examples
```python
from partial_offers import OfferInstance, decode_offer, encode_offer
offer = OfferInstance.from_bundle(decode_offer(text))  # doctest: +SKIP
encode_offer(offer.to_bundle())  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import OfferSettings, configure_logging
from .codec import decode_offer, encode_offer
from .core.assets import AssetDescriptor, LineageProof
from .core.pricing import PriceModel
from .offers import (
    AcceptResult,
    Branch,
    CounterOffer,
    OfferInfo,
    OfferInstance,
    plan_take,
    summarize,
)

__all__ = [
    "OfferSettings",
    "configure_logging",
    "AssetDescriptor",
    "LineageProof",
    "PriceModel",
    "OfferInfo",
    "OfferInstance",
    "Branch",
    "AcceptResult",
    "CounterOffer",
    "plan_take",
    "summarize",
    "encode_offer",
    "decode_offer",
]
