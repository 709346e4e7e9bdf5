"""
One offer coin bound to its terms, and everything that can happen to it.

Lifecycle: an instance is created by the maker (`new`), serialized into a bundle that carries a
hint spend (`to_bundle`), reconstructed by takers (`from_bundle`), and finally spent either by a
fill (`accept`, producing at most one `child`) or by the maker (`claw_back`).

Both spend paths go through `branch_spend`: the two leaves of the one-of-many selector are the
two variants of `Branch`, and each variant only chooses which leaf is proven and what is
revealed under it. Wrapping in the revocation and token layers is shared.

Fill solution (revealed under the FILL leaf):
    (coin_proof other_asset_amount create_coin_rest)
    coin_proof       = (parent_coin_info inner_hash amount)
    create_coin_rest = (puzzle_hash amount) or nil

Notes:
    - Nothing here checks expiration; it is a condition the ledger enforces.
    - `accept` does not clamp; a request whose quote exceeds the coin amount builds an invalid
      spend (and a ConservationError for token offers). Size requests with
      `partial_offers.offers.planning.plan_take`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chia_rs.sized_bytes import bytes32
from chia_rs.sized_ints import uint64

from ..chain.coins import IDENTITY_SIGNATURE, Coin, CoinSpend, G2Element, SpendBundle, new_spend
from ..chain.layers import (
    TokenCoin,
    TokenSpend,
    coin_proof,
    settlement_hash,
    settlement_puzzle,
    settlement_solution,
    settlement_spend,
    spend_token_group,
)
from ..chain.payments import NotarizedPayment, Payment, payment_assertion
from ..core.assets import LineageProof, token_inner_hash, wrap_hash
from ..core.constants import HINT_PUZZLE_HASH
from ..core.errors import (
    ConflictingHintError,
    IncompatibleAssetInfo,
    MissingHintError,
    ProofError,
)
from ..core.hashing import tree_hash
from ..core.serde import NIL, Program, to_program
from ..services.wallet import Signer, aggregate_signatures
from .counter import CounterOffer
from .info import Hint, OfferInfo

__all__ = [
    "Branch",
    "AcceptResult",
    "OfferInstance",
]

logger = logging.getLogger(__name__)


class Branch(Enum):
    """Leaf of the one-of-many selector revealed by a spend."""

    FILL = "fill"
    CLAW_BACK = "claw_back"


@dataclass(frozen=True)
class AcceptResult:
    """
    Outcome of `OfferInstance.accept`.

    Attributes:
        bundle (SpendBundle): Offer spends and counter-offer spends, ready to submit.
        child (OfferInstance | None): Remaining offer after a partial fill.
        output_amount (int): Offered-asset amount released to the taker.
        taker_amount (int): Requested-asset amount paid to the maker.
        maker_payment (NotarizedPayment): Payment the requested-asset settlement releases to
            the maker.
        assertions (tuple[Program, ...]): Announcement assertions tying the two settlements
            together: the maker payment first, then each payment the taker requested.
    """

    bundle: SpendBundle
    child: OfferInstance | None
    output_amount: int
    taker_amount: int
    maker_payment: NotarizedPayment
    assertions: tuple[Program, ...] = ()


@dataclass
class OfferInstance:
    """
    A concrete offer coin.

    Attributes:
        coin (Coin): The offer coin.
        info (OfferInfo): Its terms; `info.full_hash()` equals `coin.puzzle_hash`.
        pending_spends (list[CoinSpend]): Spends that must travel with the offer (for example
            the maker's spend creating the coin), in order.
        pending_signature (G2Element): Aggregated signature over `pending_spends`.
    """

    coin: Coin
    info: OfferInfo
    pending_spends: list[CoinSpend] = field(default_factory=list)
    pending_signature: G2Element = IDENTITY_SIGNATURE

    # -- construction -------------------------------------------------------

    @classmethod
    def new(cls, parent_id: bytes, amount: int, info: OfferInfo) -> OfferInstance:
        coin = Coin(bytes32(parent_id), info.full_hash(), uint64(amount))
        logger.info("new offer coin %s (%d)", coin.name().hex(), amount)
        return cls(coin=coin, info=info)

    @classmethod
    def from_bundle(cls, bundle: SpendBundle) -> OfferInstance:
        """
        Reconstruct an offer from a bundle carrying exactly one hint spend.

        Raises:
            MissingHintError: No spend of a coin with the sentinel puzzle hash.
            ConflictingHintError: More than one such spend.
            AmbiguousHintError: The hint does not decode to one set of terms.
        """
        hint_spend: CoinSpend | None = None
        rest: list[CoinSpend] = []
        for cs in bundle.coin_spends:
            if cs.coin.puzzle_hash == HINT_PUZZLE_HASH:
                if hint_spend is not None:
                    raise ConflictingHintError("bundle carries more than one hint spend")
                hint_spend = cs
            else:
                rest.append(cs)
        if hint_spend is None:
            raise MissingHintError("bundle carries no hint spend")

        info = OfferInfo.from_hint(Hint.from_bytes(bytes(hint_spend.puzzle_reveal)))
        coin = Coin(hint_spend.coin.parent_coin_info, info.full_hash(), hint_spend.coin.amount)
        logger.debug("reconstructed offer coin %s from %d spends", coin.name().hex(), len(bundle.coin_spends))
        return cls(
            coin=coin,
            info=info,
            pending_spends=rest,
            pending_signature=bundle.aggregated_signature,
        )

    def to_bundle(self) -> SpendBundle:
        """Pending spends followed by the hint spend. The instance itself is left unchanged."""
        hint_coin = Coin(self.coin.parent_coin_info, bytes32(HINT_PUZZLE_HASH), self.coin.amount)
        hint_spend = new_spend(hint_coin, self.info.to_hint().to_program(), NIL)
        return SpendBundle([*self.pending_spends, hint_spend], self.pending_signature)

    def child(self, new_amount: int) -> OfferInstance:
        """Offer left behind by a partial fill: same terms, this coin as parent."""
        lineage = None
        if self.info.lineage_proof is not None:
            lineage = LineageProof(
                parent_parent_id=self.coin.parent_coin_info,
                parent_inner_hash=token_inner_hash(self.info.offered, self.info.inner_hash()),
                parent_amount=self.coin.amount,
            )
        coin = Coin(self.coin.name(), self.coin.puzzle_hash, uint64(new_amount))
        return OfferInstance(coin=coin, info=self.info.with_lineage_proof(lineage))

    def remaining_requested(self) -> int:
        """Requested-asset amount that would buy out the whole coin."""
        return self.info.price.reverse_quote(self.coin.amount)

    # -- spends -------------------------------------------------------------

    def branch_spend(
        self, branch: Branch, puzzle: Any, solution: Any, *, output_amount: int | None = None
    ) -> CoinSpend:
        """
        Spend the offer coin through one leaf of the selector.

        Args:
            branch (Branch): Leaf to reveal.
            puzzle (Any): Program revealed under the leaf; must hash to it.
            solution (Any): Solution to `puzzle`.
            output_amount (int | None): Total the revealed spend creates (token offers only;
                None means the full coin amount).

        Raises:
            ValueError: If `puzzle` does not hash to the chosen leaf.
            ProofError: If the leaf has no proof in the offer's tree.
        """
        tree = self.info.merkle_tree()
        leaf = tree.leaves[0] if branch is Branch.FILL else self.info.maker_receiver_hash
        if tree_hash(puzzle) != leaf:
            raise ValueError(f"{branch.value} puzzle does not hash to its leaf")
        proof = tree.proof(leaf)
        if proof is None:
            raise ProofError(f"no merkle proof for the {branch.value} leaf")

        inner_puzzle = self.info.inner_program()
        inner_solution = to_program([proof, puzzle, solution])
        offered = self.info.offered
        if offered.is_native:
            return new_spend(self.coin, inner_puzzle, inner_solution)
        token = TokenCoin(coin=self.coin, lineage_proof=self.info.lineage_proof, descriptor=offered)
        (spend,) = spend_token_group([TokenSpend(token, inner_puzzle, inner_solution, output_amount)])
        return spend

    def fill_spend(self, other_amount: int, create_coin: Payment | None = None) -> CoinSpend:
        """
        FILL-branch spend for `other_amount` of the requested asset.

        The template releases `quote(other_amount)` and recreates the remainder at the same
        inner hash; `create_coin` is an extra output it creates (the settlement coin).
        """
        info = self.info
        released = info.price.quote(other_amount)
        solution = to_program(
            [
                coin_proof(self.coin.parent_coin_info, info.inner_hash(), self.coin.amount),
                other_amount,
                None if create_coin is None else [create_coin.puzzle_hash, create_coin.amount],
            ]
        )
        outputs = max(self.coin.amount - released, 0)
        if create_coin is not None:
            outputs += create_coin.amount
        return self.branch_spend(Branch.FILL, info.core_program(), solution, output_amount=outputs)

    def notarized_payment(self, amount: int) -> NotarizedPayment:
        """Payment of `amount` to the maker that the fill spend asserts was announced."""
        maker = self.info.maker_receiver_hash
        return NotarizedPayment(
            nonce=self.coin.parent_coin_info,
            payments=(Payment(puzzle_hash=maker, amount=amount, memos=(maker,)),),
        )

    def claw_back(self, puzzle: Any, solution: Any, signer: Signer | None = None) -> CoinSpend:
        """
        Maker's spend of the offer coin through the CLAW_BACK leaf.

        `puzzle` must hash to `info.maker_receiver_hash`. The spend is also appended to
        `pending_spends`; when `signer` is given, its signature over the spend is aggregated
        into `pending_signature`.
        """
        spend = self.branch_spend(Branch.CLAW_BACK, puzzle, solution)
        self.pending_spends.append(spend)
        if signer is not None:
            self.pending_signature = aggregate_signatures([self.pending_signature, signer.sign([spend])])
        logger.info("clawed back offer coin %s", self.coin.name().hex())
        return spend

    def accept(self, counter: CounterOffer) -> AcceptResult:
        """
        Fill the offer against a taker's counter-offer.

        Args:
            counter (CounterOffer): Taker's settlement offer.

        Returns:
            AcceptResult: Combined bundle (pending spends, counter-offer spends, then the
            spends built here, under the aggregate of both signatures) and the child offer,
            if any.

        Raises:
            IncompatibleAssetInfo: The counter-offer lacks the requested asset, the fee coin,
                or payments matching the quote.
            ArithmeticOverflow: Quoting does not fit in 64 bits.
        """
        info = self.info
        settlement = settlement_hash()
        fee = info.required_fee or 0
        spends: list[CoinSpend] = []

        # requested side: what the taker gives
        if info.requested.is_native:
            given = counter.first_native()
            if given is None:
                raise IncompatibleAssetInfo("counter-offer gives no native coin")
            if given.amount < fee:
                raise IncompatibleAssetInfo(f"native coin {given.amount} cannot cover the fee {fee}")
            taker_amount = given.amount - fee
            output_amount = info.price.quote(taker_amount)
            payment = self.notarized_payment(taker_amount)
            spends.append(self.fill_spend(taker_amount, Payment(puzzle_hash=settlement, amount=output_amount)))
            spends.append(settlement_spend(given, [payment]))
        else:
            tokens = counter.find_tokens(info.requested)
            if not tokens:
                raise IncompatibleAssetInfo("counter-offer gives none of the requested token")
            taker_token = tokens[0]
            taker_amount = taker_token.coin.amount
            output_amount = info.price.quote(taker_amount)
            payment = self.notarized_payment(taker_amount)
            spends.append(self.fill_spend(taker_amount, Payment(puzzle_hash=settlement, amount=output_amount)))
            spends.extend(
                spend_token_group(
                    [TokenSpend(taker_token, settlement_puzzle(), settlement_solution([payment]), taker_amount)]
                )
            )
            if fee > 0:
                fee_coin = counter.first_native()
                if fee_coin is None:
                    raise IncompatibleAssetInfo("counter-offer gives no native coin for the fee")
                spends.append(settlement_spend(fee_coin, []))

        # offered side: what the taker receives
        requested_payments = counter.requested_for(info.offered)
        if not any(np.payments for np in requested_payments):
            raise IncompatibleAssetInfo("counter-offer requests no payments of the offered asset")
        paid_out = sum(np.total for np in requested_payments)
        if paid_out != output_amount:
            raise IncompatibleAssetInfo(f"requested payments total {paid_out}, quote is {output_amount}")
        offered_settlement = wrap_hash(info.offered, settlement)
        settle_coin = Coin(self.coin.name(), bytes32(offered_settlement), uint64(paid_out))
        if info.offered.is_native:
            spends.append(settlement_spend(settle_coin, requested_payments))
        else:
            lineage = LineageProof(
                parent_parent_id=self.coin.parent_coin_info,
                parent_inner_hash=token_inner_hash(info.offered, info.inner_hash()),
                parent_amount=self.coin.amount,
            )
            token = TokenCoin(coin=settle_coin, lineage_proof=lineage, descriptor=info.offered)
            spends.extend(
                spend_token_group(
                    [TokenSpend(token, settlement_puzzle(), settlement_solution(requested_payments), paid_out)]
                )
            )

        # the fill spend asserts the maker payment; the taker's spends assert their own payments
        assertions = (
            payment_assertion(wrap_hash(info.requested, settlement), payment),
            *(payment_assertion(offered_settlement, np) for np in requested_payments),
        )
        bundle = SpendBundle(
            [*self.pending_spends, *counter.bundle.coin_spends, *spends],
            aggregate_signatures([self.pending_signature, counter.bundle.aggregated_signature]),
        )
        child = None
        if output_amount < self.coin.amount:
            child = self.child(self.coin.amount - output_amount)
        logger.info(
            "accepted offer coin %s: %d in, %d out, child=%s",
            self.coin.name().hex(),
            taker_amount,
            output_amount,
            None if child is None else child.coin.amount,
        )
        return AcceptResult(
            bundle=bundle,
            child=child,
            output_amount=output_amount,
            taker_amount=taker_amount,
            maker_payment=payment,
            assertions=assertions,
        )
