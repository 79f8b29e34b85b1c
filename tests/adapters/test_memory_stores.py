from __future__ import annotations

from bookfix.adapters.memory import InMemoryBookingMirror, InMemoryPaymentLedger
from bookfix.domain.model import BookingStatus
from tests.support.bookings import make_booking, make_payment


def test_mirror_returns_copies() -> None:
    mirror = InMemoryBookingMirror([make_booking("BK1")])

    fetched = mirror.get("BK1")
    assert fetched is not None
    fetched.status = BookingStatus.CANCELLED

    stored = mirror.get("BK1")
    assert stored is not None
    assert stored.status is BookingStatus.CONFIRMED


def test_mirror_upsert_keeps_one_entry_per_booking() -> None:
    mirror = InMemoryBookingMirror()
    mirror.upsert(make_booking("BK1", internal_id="int-1"))
    mirror.upsert(make_booking("BK1", internal_id="int-1", status=BookingStatus.CANCELLED))

    assert len(mirror.all()) == 1
    assert mirror.all()[0].status is BookingStatus.CANCELLED


def test_ledger_import_skips_known_ids() -> None:
    ledger = InMemoryPaymentLedger([make_payment("BK1", payment_id="pay-1")])

    added = ledger.import_payments(
        [make_payment("BK1", payment_id="pay-1"), make_payment("BK2", payment_id="pay-2")]
    )

    assert added == 1
    assert [payment.id for payment in ledger.all()] == ["pay-1", "pay-2"]
