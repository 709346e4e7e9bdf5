"""
partial_offers.services — collaborator interfaces (ledger client, wallet signer).

## Import DAG discipline
- Protocols only; transports and key management are supplied by the caller.
"""

from __future__ import annotations

from .ledger import LedgerClient, PushResult, is_active, submit
from .wallet import Signer, aggregate_signatures

__all__ = [
    "LedgerClient",
    "PushResult",
    "submit",
    "is_active",
    "Signer",
    "aggregate_signatures",
]
