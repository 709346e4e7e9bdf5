"""
Wallet/signing collaborator interface and signature aggregation.

Key management and signing live outside this package. A wallet is reached through the `Signer`
protocol; signatures from several parties are combined with BLS aggregation (`AugSchemeMPL`).

Notes:
    - Offer-coin spends need no signature of their own; their bundles carry the identity
      signature, which aggregation drops.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from chia_rs import AugSchemeMPL, G1Element, G2Element

from ..chain.coins import IDENTITY_SIGNATURE, CoinSpend

__all__ = [
    "Signer",
    "aggregate_signatures",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class Signer(Protocol):
    """Wallet signing service."""

    def sign(self, spends: Sequence[CoinSpend]) -> G2Element:
        """Aggregated signature authorizing `spends`."""
        ...

    def derive(self, index: int) -> tuple[bytes, G1Element]:
        """Receiver puzzle hash and public key at derivation `index`."""
        ...


def aggregate_signatures(signatures: Iterable[G2Element]) -> G2Element:
    """
    Combine bundle signatures.

    Identity signatures are dropped; a single remaining signature is returned unchanged.
    """
    real = [sig for sig in signatures if sig != IDENTITY_SIGNATURE]
    if not real:
        return IDENTITY_SIGNATURE
    if len(real) == 1:
        return real[0]
    logger.debug("aggregating %d signatures", len(real))
    return AugSchemeMPL.aggregate(real)
