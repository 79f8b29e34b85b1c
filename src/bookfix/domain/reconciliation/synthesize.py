"""Booking synthesis from payment evidence.

``synthesize`` is the single place where the optional fields of a ledger entry
are turned into the concrete values a canonical booking needs. It is pure: it
reads the payment and the supplied clock value, and never touches a store.

Precedence per field:
- ``booking_id`` is always the id being resolved
- values from the payment itself (amount, currency, timestamps)
- values from the partial booking snapshot embedded in the payment
- the placeholder defaults below

Pricing, payment info, status, check-in and ``is_active`` always come from the
payment; a recovered booking is live and confirmed whatever the ledger says.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Final

from bookfix.domain.model import (
    Booking,
    BookingSnapshot,
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

if TYPE_CHECKING:
    from datetime import datetime

    from bookfix.domain.model import Payment

UNKNOWN_USER_ID: Final = "unknown"
UNKNOWN_PAYMENT_ID: Final = "unknown"
RECOVERED_ROUTE_ID: Final = "recovered-route"
RECOVERED_SCHEDULE_ID: Final = "recovered-schedule"
RECOVERED_TRANSACTION_ID: Final = "recovered"
DEFAULT_DEPARTURE_TIME: Final = "08:00"
DEFAULT_CURRENCY: Final = "LKR"
DEFAULT_PAYMENT_METHOD: Final = "card"
DEFAULT_TRAVEL_OFFSET: Final = timedelta(hours=24)


def placeholder_passenger() -> PassengerInfo:
    return PassengerInfo(
        name="Recovered Passenger",
        phone="+94771234567",
        email="recovered@example.com",
        id_type="nic",
        id_number="RECOVERED",
        passenger_type="regular",
    )


def placeholder_seat() -> SeatInfo:
    return SeatInfo(seat_number="A12", seat_type="window", preferences=[])


def placeholder_route() -> RouteInfo:
    return RouteInfo(
        name="Recovered Route",
        start_location=Location(name="Colombo", address="Colombo Central Station"),
        end_location=Location(name="Kandy", address="Kandy Railway Station"),
        operator_info=OperatorInfo(company_name="Sri Express", contact_number="+94 11 234 5678"),
    )


def synthesize(booking_id: str, payment: Payment, *, now: datetime) -> Booking:
    """Build a canonical booking for ``booking_id`` from ``payment``."""

    snapshot = payment.booking or BookingSnapshot()
    amount = payment.amount or 0
    paid_at = payment.created_at or now

    return Booking(
        booking_id=booking_id,
        id=snapshot.id or booking_id,
        user_id=payment.user_id or snapshot.user_id or UNKNOWN_USER_ID,
        route_id=snapshot.route_id or RECOVERED_ROUTE_ID,
        schedule_id=snapshot.schedule_id or RECOVERED_SCHEDULE_ID,
        travel_date=snapshot.travel_date or (now + DEFAULT_TRAVEL_OFFSET).date(),
        departure_time=snapshot.departure_time or DEFAULT_DEPARTURE_TIME,
        passenger_info=snapshot.passenger_info or placeholder_passenger(),
        seat_info=snapshot.seat_info or placeholder_seat(),
        pricing=Pricing(
            base_price=amount,
            taxes=0,
            discounts=0,
            total_amount=amount,
            currency=payment.currency or DEFAULT_CURRENCY,
        ),
        payment_info=PaymentInfo(
            payment_id=payment.id or UNKNOWN_PAYMENT_ID,
            method=payment.method or DEFAULT_PAYMENT_METHOD,
            status=PaymentStatus.COMPLETED,
            paid_at=paid_at,
            transaction_id=payment.transaction_id or RECOVERED_TRANSACTION_ID,
        ),
        status=BookingStatus.CONFIRMED,
        check_in_info=CheckInInfo(checked_in=False),
        route_info=snapshot.route_info or placeholder_route(),
        is_active=True,
        created_at=paid_at,
        updated_at=now,
    )
