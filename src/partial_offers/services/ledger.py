"""
Ledger client collaborator interface and submission outcome classification.

Broadcasting, confirmation polling, and transport live outside this package behind the
`LedgerClient` protocol. This module only turns a client's answers into results and errors.

Classification:
    - status SUCCESS or PENDING        → returned to the caller
    - a double-spend style error, or
      any watched coin reported spent  → ConsensusRace (refetch and rebuild, do not resubmit)
    - anything else                    → SubmissionError
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from ..chain.coins import SpendBundle
from ..core.errors import ConsensusRace, SubmissionError

if TYPE_CHECKING:
    from ..offers.instance import OfferInstance

__all__ = [
    "PushResult",
    "LedgerClient",
    "RACE_ERRORS",
    "submit",
    "is_active",
]

logger = logging.getLogger(__name__)

ACCEPTED_STATUSES = frozenset({"SUCCESS", "PENDING"})

# Ledger error names meaning a targeted coin is already gone.
RACE_ERRORS = frozenset({"DOUBLE_SPEND", "DOUBLE_SPEND_IN_FORK", "UNKNOWN_UNSPENT"})


class PushResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    status: str
    error: str | None = None


@runtime_checkable
class LedgerClient(Protocol):
    """Ledger node access."""

    def push_tx(self, bundle: SpendBundle) -> PushResult:
        """Submit a bundle and report the ledger's verdict."""
        ...

    def unspent(self, coin_ids: Sequence[bytes]) -> dict[bytes, bool]:
        """Map each known coin id to True while unspent; unknown coins are omitted."""
        ...


def submit(client: LedgerClient, bundle: SpendBundle, watched_coin_ids: Iterable[bytes] = ()) -> str:
    """
    Submit `bundle` and classify the outcome.

    Args:
        client (LedgerClient): Ledger access.
        bundle (SpendBundle): Finished bundle.
        watched_coin_ids (Iterable[bytes]): Coins whose prior spend means a lost race
            (typically the offer coin being filled).

    Returns:
        str: The accepted status.

    Raises:
        ConsensusRace: A targeted coin was already spent.
        SubmissionError: Any other rejection.
    """
    result = client.push_tx(bundle)
    if result.status in ACCEPTED_STATUSES:
        logger.info("bundle accepted with status %s", result.status)
        return result.status

    watched = list(watched_coin_ids)
    if result.error in RACE_ERRORS:
        logger.warning("bundle lost a race: %s", result.error)
        raise ConsensusRace(
            f"ledger rejected bundle: {result.error}",
            coin_ids=watched,
            status=result.status,
            error=result.error,
        )
    if watched:
        states = client.unspent(watched)
        spent = [cid for cid in watched if states.get(cid) is False]
        if spent:
            logger.warning("bundle lost a race: %d watched coins already spent", len(spent))
            raise ConsensusRace(
                f"{len(spent)} watched coins already spent",
                coin_ids=spent,
                status=result.status,
                error=result.error,
            )
    logger.warning("bundle rejected: status=%s error=%s", result.status, result.error)
    raise SubmissionError(
        f"ledger rejected bundle: status={result.status} error={result.error}",
        status=result.status,
        error=result.error,
    )


def is_active(client: LedgerClient, instance: OfferInstance) -> bool:
    """True unless the offer coin or a coin spent by its pending spends is known to be spent."""
    coin_ids = [cs.coin.name() for cs in instance.pending_spends]
    coin_ids.append(instance.coin.name())
    states = client.unspent(coin_ids)
    return all(states.get(cid, True) for cid in coin_ids)
