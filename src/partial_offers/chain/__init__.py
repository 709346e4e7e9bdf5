"""
partial_offers.chain — ledger value model and layer drivers.

## Public API
- Coin, CoinSpend, SpendBundle — ledger values (chia_rs) and bundle bytes.
- Payment, NotarizedPayment — settlement payments and the announcements that bind them.
- TokenCoin, TokenSpend, spend_token_group — token coins spent under supply conservation.
"""

from __future__ import annotations

from .coins import (
    IDENTITY_SIGNATURE,
    Coin,
    CoinSpend,
    G2Element,
    SpendBundle,
    bundle_from_bytes,
    bundle_to_bytes,
    new_spend,
)
from .layers import TokenCoin, TokenSpend, settlement_spend, spend_token_group
from .payments import NotarizedPayment, Payment, announcement_id, payment_assertion

__all__ = [
    "IDENTITY_SIGNATURE",
    "Coin",
    "CoinSpend",
    "SpendBundle",
    "G2Element",
    "new_spend",
    "bundle_to_bytes",
    "bundle_from_bytes",
    "Payment",
    "NotarizedPayment",
    "announcement_id",
    "payment_assertion",
    "TokenCoin",
    "TokenSpend",
    "settlement_spend",
    "spend_token_group",
]
