"""Operator diagnostics for individual booking ids."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from bookfix.domain.errors import BookingNotFoundError, ConfirmationRequiredError
from bookfix.domain.model import (
    Booking,
    BookingStatus,
    CheckInInfo,
    Location,
    OperatorInfo,
    PassengerInfo,
    PaymentInfo,
    PaymentStatus,
    Pricing,
    RouteInfo,
    SeatInfo,
)
from bookfix.domain.reconciliation import (
    find_payment,
    find_similar,
    known_booking_ids,
    synthesize,
)
from bookfix.domain.time_windows import utcnow

if TYPE_CHECKING:
    from bookfix.domain.cancellation import CancellationEngine, CancellationResult
    from bookfix.domain.model import Payment
    from bookfix.domain.ports import BookingMirror, DocumentCodec, PaymentLedger
    from bookfix.domain.reconciliation import RepairWriter
    from bookfix.domain.time_windows import Clock

log = getLogger(__name__)

BOOKING_ID_PATTERN = re.compile(r"^BK\d+$")
DIAGNOSTIC_CANCEL_REASON = "Cancelled via diagnostic tool"


def is_valid_booking_id(booking_id: str) -> bool:
    """Advisory format check; ids failing it may still resolve."""

    return BOOKING_ID_PATTERN.match(booking_id) is not None


@dataclass(slots=True, kw_only=True)
class DiagnosticReport:
    booking_id: str
    found_in_bookings: bool
    found_in_payments: bool
    valid_format: bool
    similar_ids: list[str] = field(default_factory=list[str])
    booking: Booking | None = None
    payment: Payment | None = None


@dataclass(slots=True, kw_only=True)
class StorageStatus:
    bookings: int
    payments: int


@dataclass(slots=True, kw_only=True)
class SessionIdentity:
    """Who ran the diagnostics; tokens are deliberately not part of it."""

    operator: str | None = None
    primary_url: str | None = None


@dataclass(slots=True, kw_only=True)
class DiagnosticsService:
    mirror: BookingMirror
    ledger: PaymentLedger
    writer: RepairWriter
    engine: CancellationEngine
    codec: DocumentCodec
    session: SessionIdentity = field(default_factory=SessionIdentity)
    clock: Clock = utcnow

    def investigate(self, booking_id: str) -> DiagnosticReport:
        log.info("Starting investigation for booking id %s", booking_id)
        bookings = self.mirror.all()
        payments = self.ledger.all()

        booking = next((item for item in bookings if item.matches(booking_id)), None)
        payment = find_payment(booking_id, payments)
        report = DiagnosticReport(
            booking_id=booking_id,
            found_in_bookings=booking is not None,
            found_in_payments=payment is not None,
            valid_format=is_valid_booking_id(booking_id),
            similar_ids=find_similar(booking_id, known_booking_ids(bookings, payments)),
            booking=booking,
            payment=payment,
        )
        log.info(
            "Investigation of %s: mirror=%s, ledger=%s, valid_format=%s, similar=%s",
            booking_id,
            report.found_in_bookings,
            report.found_in_payments,
            report.valid_format,
            len(report.similar_ids),
        )
        return report

    def repair(self, booking_id: str) -> Booking:
        """Force synthesis of ``booking_id`` from the Ledger, overwriting the Mirror."""

        log.info("Attempting to repair booking %s", booking_id)
        payment = self.ledger.find_matching(booking_id)
        if payment is None:
            log.error("Cannot repair %s: no payment record references it", booking_id)
            raise BookingNotFoundError(booking_id)
        booking = synthesize(booking_id, payment, now=self.clock())
        self.writer.repair(booking)
        log.info("Repaired booking %s from payment %s", booking_id, payment.id)
        return booking

    def cancel(
        self,
        booking_id: str,
        *,
        reason: str = DIAGNOSTIC_CANCEL_REASON,
    ) -> CancellationResult:
        log.info("Operator cancellation requested for %s", booking_id)
        return self.engine.cancel(booking_id, reason=reason)

    def clear(self, *, confirm: bool) -> int:
        """Drop every Mirror entry; refused unless ``confirm`` is set."""

        if not confirm:
            raise ConfirmationRequiredError("Clearing the booking mirror requires confirmation")
        removed = self.mirror.clear()
        log.warning("Cleared %s booking(s) from the mirror", removed)
        return removed

    def export(self) -> dict[str, object]:
        """Snapshot the Mirror and the Ledger as a single JSON-ready document."""

        document: dict[str, object] = {
            "localBookings": [self.codec.dump_booking(item) for item in self.mirror.all()],
            "localPayments": [self.codec.dump_payment(item) for item in self.ledger.all()],
            "session": {
                "operator": self.session.operator,
                "primaryUrl": self.session.primary_url,
            },
            "timestamp": self.clock().isoformat(),
        }
        log.info("Exported diagnostics snapshot")
        return document

    def storage_status(self) -> StorageStatus:
        return StorageStatus(bookings=len(self.mirror.all()), payments=len(self.ledger.all()))

    def related_booking_ids(self) -> list[str]:
        """Booking ids referenced by Ledger payments, in ledger order."""

        related: list[str] = []
        for payment in self.ledger.all():
            booking_id = payment.referenced_booking_id
            if booking_id and booking_id not in related:
                related.append(booking_id)
        return related

    def create_test_booking(self) -> Booking:
        """Seed a confirmed booking departing tomorrow, for drills."""

        now = self.clock()
        millis = int(now.timestamp() * 1000)
        booking = Booking(
            booking_id=f"BK{millis}",
            id=f"test-{millis}",
            user_id="test-user",
            route_id="test-route",
            schedule_id="test-schedule",
            travel_date=(now + timedelta(days=1)).date(),
            departure_time="08:00",
            passenger_info=PassengerInfo(
                name="Test Passenger",
                phone="+94771234567",
                email="test@example.com",
                id_type="nic",
                id_number="123456789V",
                passenger_type="regular",
            ),
            seat_info=SeatInfo(seat_number="A12", seat_type="window"),
            pricing=Pricing(
                base_price=500,
                taxes=50,
                discounts=0,
                total_amount=550,
                currency="LKR",
            ),
            payment_info=PaymentInfo(
                payment_id="test-payment",
                method="card",
                status=PaymentStatus.COMPLETED,
                paid_at=now,
                transaction_id="test-txn",
            ),
            status=BookingStatus.CONFIRMED,
            check_in_info=CheckInInfo(checked_in=False),
            route_info=RouteInfo(
                name="Test Route - Colombo to Kandy",
                start_location=Location(name="Colombo", address="Colombo Central"),
                end_location=Location(name="Kandy", address="Kandy Station"),
                operator_info=OperatorInfo(
                    company_name="Sri Express",
                    contact_number="+94 11 234 5678",
                ),
            ),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.mirror.upsert(booking)
        log.info("Created test booking %s", booking.booking_id)
        return booking
