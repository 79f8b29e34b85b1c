from __future__ import annotations

import pytest

from bookfix.adapters.ledger import CompositePaymentLedger, RemotePaymentLedger
from bookfix.adapters.memory import InMemoryPaymentLedger
from bookfix.domain.errors import TransientUnavailableError
from tests.support.bookings import FakePrimary, make_payment


def test_composite_prefers_earlier_parts() -> None:
    local = InMemoryPaymentLedger([make_payment("BK1", payment_id="local")])
    primary = FakePrimary(payments=[make_payment("BK1", payment_id="remote")])
    ledger = CompositePaymentLedger(parts=(local, RemotePaymentLedger(primary)))

    match = ledger.find_matching("BK1")

    assert match is not None
    assert match.id == "local"
    assert primary.calls == []


def test_composite_falls_through_to_remote() -> None:
    primary = FakePrimary(payments=[make_payment("BK2", payment_id="remote")])
    ledger = CompositePaymentLedger(
        parts=(InMemoryPaymentLedger(), RemotePaymentLedger(primary)),
    )

    match = ledger.find_matching("BK2")

    assert match is not None
    assert match.id == "remote"
    assert [payment.id for payment in ledger.all()] == ["remote"]


def test_composite_skips_unavailable_parts(caplog: pytest.LogCaptureFixture) -> None:
    local = InMemoryPaymentLedger([make_payment("BK1", payment_id="local")])
    primary = FakePrimary(unavailable=True)
    ledger = CompositePaymentLedger(parts=(RemotePaymentLedger(primary), local))

    with caplog.at_level("WARNING"):
        payments = ledger.all()
        match = ledger.find_matching("BK1")

    assert [payment.id for payment in payments] == ["local"]
    assert match is not None
    assert "Skipping unavailable payment ledger RemotePaymentLedger" in caplog.text


def test_remote_ledger_propagates_unavailability() -> None:
    ledger = RemotePaymentLedger(FakePrimary(unavailable=True))

    with pytest.raises(TransientUnavailableError):
        ledger.all()
