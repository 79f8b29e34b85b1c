"""Payment ledger entries used as evidence for booking synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, datetime

    from .booking import PassengerInfo, RouteInfo, SeatInfo
    from .enums import PaymentStatus


@dataclass(slots=True, kw_only=True)
class BookingSnapshot:
    """Partial booking copy embedded in a payment at purchase time."""

    id: str | None = None
    booking_id: str | None = None
    user_id: str | None = None
    route_id: str | None = None
    schedule_id: str | None = None
    travel_date: date | None = None
    departure_time: str | None = None
    passenger_info: PassengerInfo | None = None
    seat_info: SeatInfo | None = None
    route_info: RouteInfo | None = None


@dataclass(slots=True, kw_only=True)
class Payment:
    """Ledger entry; every field is optional because ledgers are incomplete."""

    id: str | None = None
    booking_id: str | None = None
    booking: BookingSnapshot | None = None
    amount: float | None = None
    currency: str | None = None
    method: str | None = None
    status: PaymentStatus | str | None = None
    transaction_id: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None

    @property
    def referenced_booking_id(self) -> str | None:
        """Booking id this payment points at, preferring the direct reference."""

        if self.booking_id:
            return self.booking_id
        if self.booking is not None and self.booking.booking_id:
            return self.booking.booking_id
        return None
