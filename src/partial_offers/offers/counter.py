"""
Taker-side description of a counter-offer.

A counter-offer is an ordinary settlement offer built by the taker's wallet: a bundle of the
taker's own spends, the settlement coins those spends create (what the taker gives), and the
notarized payments the taker expects in return (what the taker asks for).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..chain.coins import IDENTITY_SIGNATURE, Coin, SpendBundle
from ..chain.layers import TokenCoin
from ..chain.payments import NotarizedPayment
from ..core.assets import AssetDescriptor

__all__ = [
    "OfferedCoins",
    "RequestedPayments",
    "CounterOffer",
]


class OfferedCoins(BaseModel):
    """Settlement coins the taker gives, keyed by asset id for tokens."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    native: tuple[Coin, ...] = ()
    tokens: dict[bytes, tuple[TokenCoin, ...]] = Field(default_factory=dict)


class RequestedPayments(BaseModel):
    """Notarized payments the taker asks for, keyed by asset id for tokens."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    native: tuple[NotarizedPayment, ...] = ()
    tokens: dict[bytes, tuple[NotarizedPayment, ...]] = Field(default_factory=dict)


class CounterOffer(BaseModel):
    """
    A taker's offer, ready to be combined with an offer coin's fill spend.

    Attributes:
        bundle (SpendBundle): Taker's signed spends.
        offered (OfferedCoins): Settlement coins created by `bundle`.
        requested (RequestedPayments): Payments the taker must receive.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    bundle: SpendBundle = Field(default_factory=lambda: SpendBundle([], IDENTITY_SIGNATURE))
    offered: OfferedCoins = Field(default_factory=OfferedCoins)
    requested: RequestedPayments = Field(default_factory=RequestedPayments)

    def find_tokens(self, descriptor: AssetDescriptor) -> tuple[TokenCoin, ...]:
        """Offered token coins of `descriptor`'s asset (empty for native descriptors)."""
        if descriptor.asset_id is None:
            return ()
        return self.offered.tokens.get(descriptor.asset_id, ())

    def first_native(self) -> Coin | None:
        return self.offered.native[0] if self.offered.native else None

    def requested_for(self, descriptor: AssetDescriptor) -> tuple[NotarizedPayment, ...]:
        if descriptor.asset_id is None:
            return self.requested.native
        return self.requested.tokens.get(descriptor.asset_id, ())
