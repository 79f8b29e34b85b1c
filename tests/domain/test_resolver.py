from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from bookfix.adapters.documents import payment_from_document
from bookfix.adapters.memory import InMemoryBookingMirror, InMemoryPaymentLedger
from bookfix.domain.errors import BookingNotFoundError
from bookfix.domain.model import BookingSnapshot, BookingStatus, ResolutionSource
from bookfix.domain.reconciliation import (
    BookingResolver,
    RepairWriter,
    build_resolver,
    list_bookings,
)
from tests.support.bookings import FakePrimary, FixedClock, make_booking, make_payment


def _resolver(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
    primary: FakePrimary | None = None,
) -> BookingResolver:
    return build_resolver(
        mirror=mirror,
        ledger=ledger,
        writer=RepairWriter(mirror),
        primary=primary,
        clock=clock,
    )


def test_primary_hit_wins_over_local_sources(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
) -> None:
    remote = make_booking("BK1", total_amount=1200)
    mirror.upsert(make_booking("BK1", total_amount=10))
    primary = FakePrimary(bookings={"BK1": remote})

    resolution = _resolver(mirror, ledger, clock, primary).resolve("BK1")

    assert resolution.found
    assert resolution.source is ResolutionSource.PRIMARY
    assert resolution.booking is not None
    assert resolution.booking.pricing.total_amount == 1200


def test_unavailable_primary_falls_back_to_mirror(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
    caplog: pytest.LogCaptureFixture,
) -> None:
    mirror.upsert(make_booking("BK1"))
    primary = FakePrimary(unavailable=True)

    with caplog.at_level(logging.WARNING):
        resolution = _resolver(mirror, ledger, clock, primary).resolve("BK1")

    assert resolution.source is ResolutionSource.MIRROR
    assert "Primary unavailable" in caplog.text


def test_mirror_lookup_accepts_internal_id(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
) -> None:
    mirror.upsert(make_booking("BK1", internal_id="int-1"))

    resolution = _resolver(mirror, ledger, clock).resolve("int-1")

    assert resolution.booking is not None
    assert resolution.booking.booking_id == "BK1"


def test_synthesized_booking_is_repaired_into_mirror(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    ledger = InMemoryPaymentLedger([make_payment("BK999", amount=1500)])

    resolution = _resolver(mirror, ledger, clock).resolve("BK999")

    assert resolution.source is ResolutionSource.SYNTHESIZED
    stored = mirror.get("BK999")
    assert stored is not None
    assert stored.pricing.total_amount == 1500


def test_resolution_is_idempotent_after_repair(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    ledger = InMemoryPaymentLedger([make_payment("BK999")])
    resolver = _resolver(mirror, ledger, clock)

    first = resolver.resolve("BK999")
    clock.advance(timedelta(minutes=5))
    second = resolver.resolve("BK999")

    assert first.source is ResolutionSource.SYNTHESIZED
    assert second.source is ResolutionSource.MIRROR
    assert second.booking == first.booking
    assert len(mirror.all()) == 1


def test_payment_matched_on_snapshot_is_repaired_under_requested_id(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    snapshot = BookingSnapshot(id="int-555", booking_id="BK555")
    ledger = InMemoryPaymentLedger([make_payment("BK_OTHER", snapshot=snapshot)])
    resolver = _resolver(mirror, ledger, clock)

    first = resolver.resolve("BK555")
    second = resolver.resolve("BK555")

    assert first.source is ResolutionSource.SYNTHESIZED
    assert first.booking is not None
    assert first.booking.booking_id == "BK555"
    assert first.booking.id == "int-555"
    assert second.source is ResolutionSource.MIRROR
    assert second.booking == first.booking
    assert len(mirror.all()) == 1


def test_mirror_entry_wins_over_correlatable_payment(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    stored = make_booking("BK999", internal_id="int-999", total_amount=640)
    mirror.upsert(stored)
    ledger = InMemoryPaymentLedger([make_payment("BK999", amount=1500)])

    resolution = _resolver(mirror, ledger, clock).resolve("BK999")

    assert resolution.source is ResolutionSource.MIRROR
    assert resolution.booking == stored
    assert mirror.all() == [stored]


def test_fuzzy_neighbours_never_resolve(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    mirror.upsert(make_booking("BK1234567899", internal_id=None))
    ledger = InMemoryPaymentLedger([make_payment("BK1234567899")])

    resolution = _resolver(mirror, ledger, clock).resolve("BK1234567890")

    assert not resolution.found
    assert resolution.source is ResolutionSource.NONE
    assert len(mirror.all()) == 1


def test_invalid_format_id_still_resolves_when_stored(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
) -> None:
    mirror.upsert(make_booking("ABC123", internal_id=None))

    assert _resolver(mirror, ledger, clock).resolve("ABC123").found


def test_require_raises_not_found(
    mirror: InMemoryBookingMirror,
    ledger: InMemoryPaymentLedger,
    clock: FixedClock,
) -> None:
    with pytest.raises(BookingNotFoundError) as excinfo:
        _resolver(mirror, ledger, clock).require("BK404")

    assert excinfo.value.booking_id == "BK404"
    assert "Booking not found: BK404" in str(excinfo.value)


def test_list_bookings_prefers_primary(mirror: InMemoryBookingMirror) -> None:
    primary = FakePrimary(bookings={"BK1": make_booking("BK1")})

    listing = list_bookings(mirror=mirror, primary=primary)

    assert listing.source is ResolutionSource.PRIMARY
    assert [booking.booking_id for booking in listing.bookings] == ["BK1"]


def test_list_bookings_falls_back_to_mirror_newest_first(mirror: InMemoryBookingMirror) -> None:
    older = make_booking("BK1", internal_id="a")
    newer = make_booking("BK2", internal_id="b", created_at=older.created_at + timedelta(hours=1))
    cancelled = make_booking("BK3", internal_id="c", status=BookingStatus.CANCELLED)
    for booking in (older, newer, cancelled):
        mirror.upsert(booking)

    listing = list_bookings(
        mirror=mirror,
        primary=FakePrimary(unavailable=True),
        status=BookingStatus.CONFIRMED,
    )

    assert listing.source is ResolutionSource.MIRROR
    assert [booking.booking_id for booking in listing.bookings] == ["BK2", "BK1"]


def test_mirror_listing_orders_repaired_booking_with_offset_less_payment_time(
    mirror: InMemoryBookingMirror,
    clock: FixedClock,
) -> None:
    mirror.upsert(make_booking("BK1"))
    payment = payment_from_document(
        {"_id": "pay-2", "bookingId": "BK2", "amount": 500, "createdAt": "2025-05-01T10:00:00"}
    )
    _resolver(mirror, InMemoryPaymentLedger([payment]), clock).resolve("BK2")

    listing = list_bookings(mirror=mirror)

    assert [booking.booking_id for booking in listing.bookings] == ["BK1", "BK2"]
