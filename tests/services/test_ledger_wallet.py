from __future__ import annotations

from collections.abc import Sequence

import pytest
from chia_rs import AugSchemeMPL, G2Element
from chia_rs.sized_bytes import bytes32
from chia_rs.sized_ints import uint64

from partial_offers.chain.coins import IDENTITY_SIGNATURE, Coin, SpendBundle, new_spend
from partial_offers.core.assets import AssetDescriptor
from partial_offers.core.errors import ConsensusRace, SubmissionError
from partial_offers.core.pricing import PriceModel
from partial_offers.core.serde import to_program
from partial_offers.offers.info import OfferInfo
from partial_offers.offers.instance import OfferInstance
from partial_offers.services.ledger import LedgerClient, PushResult, is_active, submit
from partial_offers.services.wallet import Signer, aggregate_signatures

COIN_ID = b"\x0a" * 32


class _FakeLedger:
    def __init__(self, result: PushResult, states: dict[bytes, bool] | None = None) -> None:
        self.result = result
        self.states = states or {}
        self.pushed: list[SpendBundle] = []
        self.queried: list[list[bytes]] = []

    def push_tx(self, bundle: SpendBundle) -> PushResult:
        self.pushed.append(bundle)
        return self.result

    def unspent(self, coin_ids: Sequence[bytes]) -> dict[bytes, bool]:
        self.queried.append(list(coin_ids))
        return {cid: self.states[cid] for cid in coin_ids if cid in self.states}


class _FakeSigner:
    def __init__(self, tag: int = 1) -> None:
        self.sk = AugSchemeMPL.key_gen(bytes([tag]) * 32)

    def sign(self, spends):
        return AugSchemeMPL.aggregate([AugSchemeMPL.sign(self.sk, bytes(cs)) for cs in spends])

    def derive(self, index):
        return bytes([index]) * 32, self.sk.get_g1()


def _empty_bundle() -> SpendBundle:
    return SpendBundle([], IDENTITY_SIGNATURE)


def _instance() -> OfferInstance:
    info = OfferInfo(
        offered=AssetDescriptor.native(),
        requested=AssetDescriptor.token(b"\x07" * 32),
        maker_receiver_hash=b"\x11" * 32,
        price=PriceModel(price_precision=1, precision=1),
    )
    return OfferInstance.new(b"\x44" * 32, 10, info)


def test_fakes_satisfy_protocols() -> None:
    assert isinstance(_FakeLedger(PushResult(status="SUCCESS")), LedgerClient)
    assert isinstance(_FakeSigner(), Signer)


@pytest.mark.parametrize("status", ["SUCCESS", "PENDING"])
def test_submit_accepts(status: str) -> None:
    ledger = _FakeLedger(PushResult(status=status))
    bundle = _empty_bundle()
    assert submit(ledger, bundle, [COIN_ID]) == status
    assert ledger.pushed == [bundle]
    assert ledger.queried == []


@pytest.mark.parametrize("error", ["DOUBLE_SPEND", "DOUBLE_SPEND_IN_FORK", "UNKNOWN_UNSPENT"])
def test_double_spend_errors_are_races(error: str) -> None:
    ledger = _FakeLedger(PushResult(status="FAILED", error=error))
    with pytest.raises(ConsensusRace) as excinfo:
        submit(ledger, _empty_bundle(), [COIN_ID])
    assert excinfo.value.error == error
    assert excinfo.value.coin_ids == [COIN_ID]


def test_spent_watched_coin_is_a_race() -> None:
    other = b"\x0b" * 32
    ledger = _FakeLedger(PushResult(status="FAILED", error="MEMPOOL_CONFLICT"), {COIN_ID: False, other: True})
    with pytest.raises(ConsensusRace) as excinfo:
        submit(ledger, _empty_bundle(), [COIN_ID, other])
    assert excinfo.value.coin_ids == [COIN_ID]
    assert ledger.queried == [[COIN_ID, other]]


def test_other_rejections_are_submission_errors() -> None:
    ledger = _FakeLedger(PushResult(status="FAILED", error="BAD_AGGREGATE_SIGNATURE"), {COIN_ID: True})
    with pytest.raises(SubmissionError) as excinfo:
        submit(ledger, _empty_bundle(), [COIN_ID])
    assert not isinstance(excinfo.value, ConsensusRace)
    assert excinfo.value.status == "FAILED"
    assert excinfo.value.error == "BAD_AGGREGATE_SIGNATURE"

    with pytest.raises(SubmissionError):
        submit(_FakeLedger(PushResult(status="FAILED")), _empty_bundle())


def test_is_active() -> None:
    instance = _instance()
    assert is_active(_FakeLedger(PushResult(status="SUCCESS")), instance)
    assert not is_active(_FakeLedger(PushResult(status="SUCCESS"), {instance.coin.name(): False}), instance)


def test_is_active_checks_pending_spends() -> None:
    instance = _instance()
    maker_coin = Coin(bytes32(b"\x01" * 32), bytes32(b"\x02" * 32), uint64(10))
    instance.pending_spends.append(new_spend(maker_coin, to_program(1), to_program([])))
    ledger = _FakeLedger(PushResult(status="SUCCESS"), {maker_coin.name(): False, instance.coin.name(): True})
    assert not is_active(ledger, instance)


def _signature(tag: int) -> G2Element:
    return AugSchemeMPL.sign(AugSchemeMPL.key_gen(bytes([tag]) * 32), b"message")


def test_aggregate_signatures_drops_identities() -> None:
    a = _signature(1)
    assert aggregate_signatures([]) == IDENTITY_SIGNATURE
    assert aggregate_signatures([IDENTITY_SIGNATURE, IDENTITY_SIGNATURE]) == IDENTITY_SIGNATURE
    assert aggregate_signatures([IDENTITY_SIGNATURE, a]) == a


def test_aggregate_signatures_combines_several() -> None:
    a, b = _signature(1), _signature(2)
    combined = aggregate_signatures([a, IDENTITY_SIGNATURE, b])
    assert combined == AugSchemeMPL.aggregate([a, b])
    assert combined == a + b
