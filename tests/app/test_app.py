from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from bookfix import app
from bookfix.adapters.ledger import CompositePaymentLedger
from bookfix.adapters.memory import InMemoryBookingMirror, InMemoryPaymentLedger
from bookfix.adapters.sqlalchemy import SqlAlchemyBookingMirror, shutdown
from bookfix.domain.cancellation import CancellationPath
from bookfix.domain.model import BookingStatus, ResolutionSource
from tests.support.bookings import FakePrimary, FixedClock, make_booking, make_payment

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def services(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
) -> app.BookingServices:
    return app.build_services(mirror=mirror, local_ledger=ledger, offline=True, clock=clock)


@pytest.fixture
def managed_database() -> Iterator[None]:
    shutdown()
    try:
        yield
    finally:
        shutdown()


def test_offline_services_use_local_ledger_only(services: app.BookingServices) -> None:
    assert services.primary is None
    assert services.ledger is services.local_ledger


def test_missing_api_url_falls_back_to_offline(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
) -> None:
    services = app.build_services(mirror=mirror, local_ledger=ledger)

    assert services.primary is None


def test_injected_primary_joins_payment_ledger(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
) -> None:
    services = app.build_services(mirror=mirror, local_ledger=ledger, primary=FakePrimary())

    assert isinstance(services.ledger, CompositePaymentLedger)


def test_default_stores_are_sqlalchemy_backed(
    managed_database: None,
    clock: FixedClock,
) -> None:
    _ = managed_database
    services = app.build_services(offline=True, clock=clock)

    services.mirror.upsert(make_booking("BK1"))

    assert isinstance(services.mirror, SqlAlchemyBookingMirror)
    assert [booking.booking_id for booking in services.mirror.all()] == ["BK1"]


def test_resolve_and_cancel_through_services(
    services: app.BookingServices,
    ledger: InMemoryPaymentLedger,
    mirror: InMemoryBookingMirror,
) -> None:
    ledger.import_payments([make_payment("BK999", amount=1500)])

    resolution = app.resolve_booking("BK999", services=services)
    result = app.cancel_booking("BK999", reason="Trip cancelled", services=services)

    assert resolution.source is ResolutionSource.SYNTHESIZED
    assert result.path is CancellationPath.LOCAL
    assert result.refund_amount == 1200
    stored = mirror.get("BK999")
    assert stored is not None
    assert stored.status is BookingStatus.CANCELLED
    assert stored.cancellation_info is not None
    assert stored.cancellation_info.reason == "Trip cancelled"


def test_list_all_bookings_reads_mirror_when_offline(
    services: app.BookingServices,
    mirror: InMemoryBookingMirror,
) -> None:
    mirror.upsert(make_booking("BK1", status=BookingStatus.CANCELLED))
    mirror.upsert(make_booking("BK2", internal_id="int-2"))

    listing = app.list_all_bookings(status=BookingStatus.CONFIRMED, services=services)

    assert [booking.booking_id for booking in listing.bookings] == ["BK2"]


def test_import_payments_from_history_file(
    services: app.BookingServices,
    ledger: InMemoryPaymentLedger,
    tmp_path: Path,
) -> None:
    path = tmp_path / "history.json"
    path.write_text(
        json.dumps(
            {
                "payments": [
                    {"_id": "pay-1", "bookingId": "BK1", "amount": 1500},
                    {"_id": "pay-2", "booking": {"_id": "int-2", "bookingId": "BK2"}},
                ]
            }
        ),
        encoding="utf-8",
    )

    assert app.import_payments(path, services=services) == 2
    assert app.import_payments(path, services=services) == 0
    assert app.related_booking_ids(services=services) == ["BK1", "BK2"]
    assert len(ledger.all()) == 2


def test_import_payments_accepts_exported_snapshot(
    services: app.BookingServices,
    tmp_path: Path,
) -> None:
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps({"localBookings": [], "localPayments": [{"_id": "pay-9", "bookingId": "BK9"}]}),
        encoding="utf-8",
    )

    assert app.import_payments(path, services=services) == 1


def test_import_payments_rejects_unexpected_shape(
    services: app.BookingServices,
    tmp_path: Path,
) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"rows": []}), encoding="utf-8")

    with pytest.raises(ValueError, match="Expected a list of payments"):
        app.import_payments(path, services=services)


def test_import_payments_writes_nothing_when_an_entry_is_invalid(
    services: app.BookingServices,
    ledger: InMemoryPaymentLedger,
    tmp_path: Path,
) -> None:
    path = tmp_path / "partial.json"
    path.write_text(
        json.dumps([{"_id": "pay-1", "bookingId": "BK1"}, {"_id": "pay-2", "amount": "lots"}]),
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        app.import_payments(path, services=services)

    assert ledger.all() == []
