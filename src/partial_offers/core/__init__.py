"""
partial_offers.core — zero-IO primitives for partial offers.

## Contracts
- Serde/Hashing — script value model, tree hash, curry and shortcut curry hash.
- Merkle — fixed-order trees and inclusion proofs for the branch selector.
- Puzzles — verified, immutable template registry.
- Pricing — u64 exchange-ratio arithmetic (quote, reverse quote, clamp).
- Assets — asset descriptors, lineage proofs, per-descriptor layer wrapping.
- Constants/Errors/Typing — protocol constants, error taxonomy, constrained aliases.

## Notes
- No file or network IO except `puzzles.load_puzzle_set`, which reads a manifest on request.
- Higher layers (chain, offers, codec, services) depend on core; core never imports them.

## Examples
```python
from partial_offers.core.pricing import PriceModel
price = PriceModel(price_precision=100_000, precision=20_000)
price.quote(20_000)  # 100000
```
"""

from __future__ import annotations

from .assets import AssetDescriptor, LineageProof
from .pricing import PriceModel

__all__ = [
    "AssetDescriptor",
    "LineageProof",
    "PriceModel",
]
