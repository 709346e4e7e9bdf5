"""
Exception types raised across partial offer construction, reconstruction, and encoding.

Provides typed exceptions for every failure the core can report:
- FormatError (and subclasses) for offer string and bundle byte decoding.
- HintError (Missing/Conflicting/Ambiguous) for bundle reconstruction.
- IncompatibleAssetInfo when a counter-offer lacks the requested asset or fee coin.
- ArithmeticOverflow when u64 pricing arithmetic does not fit.
- ProofError when a merkle proof is absent for a leaf of a known tree.
- ConservationError when a token group spend does not conserve supply.
- TemplateError when a script template is missing or fails its golden hash.
- SubmissionError / ConsensusRace for classified ledger submission failures.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Nothing in the core retries or recovers from these errors; they propagate to the caller.
    - ConsensusRace is the only retryable failure: the caller should refetch coin state and
      rebuild the accept spend instead of resubmitting the identical bundle.

Examples:
    Distinguish a lost race from other submission failures.

    >>> from partial_offers.core.errors import ConsensusRace, SubmissionError
    >>> try:
    ...     raise ConsensusRace("coin already spent", coin_ids=[b"\\x00" * 32])
    ... except SubmissionError as e:
    ...     retryable = isinstance(e, ConsensusRace)
    >>> retryable
    True
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "PartialOfferError",
    "FormatError",
    "WrongVariantError",
    "WrongPrefixError",
    "PaddingError",
    "ChecksumError",
    "CompressionError",
    "SerializationError",
    "HintError",
    "MissingHintError",
    "ConflictingHintError",
    "AmbiguousHintError",
    "IncompatibleAssetInfo",
    "OverfillError",
    "ArithmeticOverflow",
    "ProofError",
    "ConservationError",
    "TemplateError",
    "SubmissionError",
    "ConsensusRace",
]


class PartialOfferError(Exception):
    """Base class for all partial offer failures."""


# ============================================================================
# Codec
# ============================================================================


class FormatError(PartialOfferError, ValueError):
    """Encoded offer text or bundle bytes are malformed."""


class WrongVariantError(FormatError):
    """Checksum is valid bech32 but not the bech32m variant."""


class WrongPrefixError(FormatError):
    """Human-readable part is not the expected prefix."""

    def __init__(self, prefix: str, expected: str) -> None:
        super().__init__(f"invalid prefix {prefix!r}, expected {expected!r}")
        self.prefix = prefix
        self.expected = expected


class PaddingError(FormatError):
    """Non-zero or over-long padding left over from 5-to-8-bit regrouping."""


class ChecksumError(FormatError):
    """Bech32 string has invalid characters, mixed case, or a bad checksum."""


class CompressionError(FormatError):
    """Unknown compression version or corrupt compressed payload."""


class SerializationError(FormatError):
    """Bundle bytes are truncated or carry trailing data."""


# ============================================================================
# Bundle reconstruction
# ============================================================================


class HintError(PartialOfferError, ValueError):
    """The offer could not be reconstructed from its hint spend."""


class MissingHintError(HintError):
    """No hint spend found in the bundle."""


class ConflictingHintError(HintError):
    """More than one hint spend found in the bundle."""


class AmbiguousHintError(HintError):
    """Hint payload does not decode to exactly one set of offer terms."""


# ============================================================================
# Fill / pricing
# ============================================================================


class IncompatibleAssetInfo(PartialOfferError, ValueError):
    """Counter-offer lacks the requested asset, the fee coin, or the requested payments."""


class OverfillError(PartialOfferError, ValueError):
    """Requested fill would take more than the offer coin holds."""


class ArithmeticOverflow(PartialOfferError, ArithmeticError):
    """u64 arithmetic result cannot be represented."""


class ProofError(PartialOfferError, RuntimeError):
    """Merkle proof absent for a leaf of a known tree."""


class ConservationError(PartialOfferError, ValueError):
    """Token group spend inputs and outputs differ for an asset id."""


class TemplateError(PartialOfferError, RuntimeError):
    """Script template missing from the registry or failing its golden hash."""


# ============================================================================
# Submission
# ============================================================================


class SubmissionError(PartialOfferError, RuntimeError):
    """Ledger rejected a submitted bundle."""

    def __init__(self, message: str, *, status: str | None = None, error: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.error = error


class ConsensusRace(SubmissionError):
    """
    A targeted coin was already spent when the bundle reached the ledger.

    Attributes:
        coin_ids (list[bytes]): Coins observed spent (possibly empty when the ledger only
            reported a double spend without naming coins).

    Notes:
        Retryable by refetching the current coin state and computing a new accept spend.
    """

    def __init__(
        self,
        message: str,
        *,
        coin_ids: Iterable[bytes] = (),
        status: str | None = None,
        error: str | None = None,
    ) -> None:
        super().__init__(message, status=status, error=error)
        self.coin_ids = list(coin_ids)
