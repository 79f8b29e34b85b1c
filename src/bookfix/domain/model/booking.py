"""Canonical booking aggregate and its value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bookfix.domain.errors import WrongStatusError

from .enums import BookingStatus, PaymentStatus, RefundStatus

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(slots=True, kw_only=True)
class PassengerInfo:
    name: str
    phone: str
    email: str
    id_type: str
    id_number: str
    passenger_type: str


@dataclass(slots=True, kw_only=True)
class SeatInfo:
    seat_number: str
    seat_type: str
    preferences: list[str] = field(default_factory=list[str])


@dataclass(slots=True, kw_only=True)
class Pricing:
    """Price breakdown as recorded; the components are not required to add up."""

    base_price: float
    taxes: float
    discounts: float
    total_amount: float
    currency: str


@dataclass(slots=True, kw_only=True)
class PaymentInfo:
    payment_id: str
    method: str
    status: PaymentStatus | str
    paid_at: datetime | None = None
    transaction_id: str | None = None


@dataclass(slots=True, kw_only=True)
class CancellationInfo:
    reason: str
    cancelled_at: datetime
    refund_amount: float
    refund_status: RefundStatus | str


@dataclass(slots=True, kw_only=True)
class CheckInInfo:
    checked_in: bool = False
    check_in_time: datetime | None = None
    check_in_location: str | None = None


@dataclass(slots=True, kw_only=True)
class Location:
    name: str
    address: str


@dataclass(slots=True, kw_only=True)
class OperatorInfo:
    company_name: str
    contact_number: str


@dataclass(slots=True, kw_only=True)
class RouteInfo:
    """Denormalized route copy kept for display."""

    name: str
    start_location: Location
    end_location: Location
    operator_info: OperatorInfo


@dataclass(slots=True, kw_only=True)
class Booking:
    """Canonical booking record.

    ``booking_id`` is the public identifier (``BK...``); ``id`` is the internal
    key assigned by the Primary service and may equal ``booking_id``.
    """

    booking_id: str
    id: str | None = None
    user_id: str | None = None
    route_id: str
    schedule_id: str
    travel_date: date
    departure_time: str
    passenger_info: PassengerInfo
    seat_info: SeatInfo
    pricing: Pricing
    payment_info: PaymentInfo
    status: BookingStatus
    cancellation_info: CancellationInfo | None = None
    check_in_info: CheckInInfo = field(default_factory=CheckInInfo)
    route_info: RouteInfo | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    @property
    def keys(self) -> tuple[str, ...]:
        """Identifiers this booking answers to, public id first."""

        if self.id is None or self.id == self.booking_id:
            return (self.booking_id,)
        return (self.booking_id, self.id)

    @property
    def remote_key(self) -> str:
        """Key addressing this booking on the Primary service."""

        return self.id or self.booking_id

    def matches(self, identifier: str) -> bool:
        return identifier in self.keys

    def cancel(
        self,
        *,
        reason: str,
        cancelled_at: datetime,
        refund_amount: float,
        refund_status: RefundStatus = RefundStatus.PENDING,
    ) -> None:
        """Move a confirmed booking to ``cancelled``; every other state is refused."""

        if self.status is not BookingStatus.CONFIRMED:
            raise WrongStatusError(self.booking_id, self.status)
        self.status = BookingStatus.CANCELLED
        self.cancellation_info = CancellationInfo(
            reason=reason,
            cancelled_at=cancelled_at,
            refund_amount=refund_amount,
            refund_status=refund_status,
        )
        self.updated_at = cancelled_at
