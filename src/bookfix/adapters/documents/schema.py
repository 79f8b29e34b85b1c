"""Pydantic models describing booking and payment JSON documents.

The same camelCase shape is served by the Primary API and stored in the local
Mirror/Ledger collections.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from bookfix.domain.model import BookingStatus
from bookfix.domain.time_windows import DEPARTURE_TIME_PATTERN


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    """Read offset-less timestamps as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _date_part(value: object) -> object:
    """Accept full ISO timestamps where only the calendar date matters."""

    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, datetime):
        return value.date()
    return value


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PassengerInfoDocument(DocumentModel):
    name: str
    phone: str
    email: str
    id_type: str = Field(alias="idType")
    id_number: str = Field(alias="idNumber")
    passenger_type: str = Field(default="regular", alias="passengerType")


class SeatInfoDocument(DocumentModel):
    seat_number: str = Field(alias="seatNumber")
    seat_type: str = Field(alias="seatType")
    preferences: list[str] = Field(default_factory=list)


class PricingDocument(DocumentModel):
    base_price: float = Field(default=0, alias="basePrice")
    taxes: float = 0
    discounts: float = 0
    total_amount: float = Field(default=0, alias="totalAmount")
    currency: str = "LKR"


class PaymentInfoDocument(DocumentModel):
    payment_id: str = Field(alias="paymentId")
    method: str
    status: str
    paid_at: datetime | None = Field(default=None, alias="paidAt")
    transaction_id: str | None = Field(default=None, alias="transactionId")

    _normalize_paid_at = field_validator("paid_at", mode="after")(_as_utc)


class CancellationInfoDocument(DocumentModel):
    reason: str
    cancelled_at: datetime = Field(alias="cancelledAt")
    refund_amount: float = Field(default=0, alias="refundAmount")
    refund_status: str = Field(default="pending", alias="refundStatus")

    _normalize_cancelled_at = field_validator("cancelled_at", mode="after")(_as_utc)


class CheckInInfoDocument(DocumentModel):
    checked_in: bool = Field(default=False, alias="checkedIn")
    check_in_time: datetime | None = Field(default=None, alias="checkInTime")
    check_in_location: str | None = Field(default=None, alias="checkInLocation")

    _normalize_check_in_time = field_validator("check_in_time", mode="after")(_as_utc)


class LocationDocument(DocumentModel):
    name: str
    address: str = ""


class OperatorInfoDocument(DocumentModel):
    company_name: str = Field(alias="companyName")
    contact_number: str = Field(alias="contactNumber")


class RouteInfoDocument(DocumentModel):
    name: str
    start_location: LocationDocument = Field(alias="startLocation")
    end_location: LocationDocument = Field(alias="endLocation")
    operator_info: OperatorInfoDocument = Field(alias="operatorInfo")


class BookingDocument(DocumentModel):
    id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
    )
    booking_id: str = Field(alias="bookingId")
    user_id: str | None = Field(default=None, alias="userId")
    route_id: str = Field(alias="routeId")
    schedule_id: str = Field(alias="scheduleId")
    travel_date: date = Field(alias="travelDate")
    departure_time: str = Field(alias="departureTime", pattern=DEPARTURE_TIME_PATTERN)
    passenger_info: PassengerInfoDocument = Field(alias="passengerInfo")
    seat_info: SeatInfoDocument = Field(alias="seatInfo")
    pricing: PricingDocument
    payment_info: PaymentInfoDocument = Field(alias="paymentInfo")
    status: BookingStatus
    cancellation_info: CancellationInfoDocument | None = Field(
        default=None, alias="cancellationInfo"
    )
    check_in_info: CheckInInfoDocument = Field(
        default_factory=CheckInInfoDocument, alias="checkInInfo"
    )
    route_info: RouteInfoDocument | None = Field(default=None, alias="routeInfo")
    is_active: bool = Field(default=True, alias="isActive")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    _normalize_id = field_validator("id", "user_id", mode="before")(_blank_to_none)
    _normalize_travel_date = field_validator("travel_date", mode="before")(_date_part)
    _normalize_timestamps = field_validator("created_at", "updated_at", mode="after")(_as_utc)


class BookingSnapshotDocument(DocumentModel):
    """Partial booking embedded in a payment; everything is optional."""

    id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
    )
    booking_id: str | None = Field(default=None, alias="bookingId")
    user_id: str | None = Field(default=None, alias="userId")
    route_id: str | None = Field(default=None, alias="routeId")
    schedule_id: str | None = Field(default=None, alias="scheduleId")
    travel_date: date | None = Field(default=None, alias="travelDate")
    departure_time: str | None = Field(
        default=None, alias="departureTime", pattern=DEPARTURE_TIME_PATTERN
    )
    passenger_info: PassengerInfoDocument | None = Field(default=None, alias="passengerInfo")
    seat_info: SeatInfoDocument | None = Field(default=None, alias="seatInfo")
    route_info: RouteInfoDocument | None = Field(default=None, alias="routeInfo")

    _normalize_text = field_validator(
        "id", "booking_id", "user_id", "route_id", "schedule_id", "departure_time", mode="before"
    )(_blank_to_none)
    _normalize_travel_date = field_validator("travel_date", mode="before")(_date_part)


class PaymentDocument(DocumentModel):
    id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
    )
    booking_id: str | None = Field(default=None, alias="bookingId")
    booking: BookingSnapshotDocument | None = None
    amount: float | None = None
    currency: str | None = None
    method: str | None = None
    status: str | None = None
    transaction_id: str | None = Field(default=None, alias="transactionId")
    user_id: str | None = Field(default=None, alias="userId")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    _normalize_text = field_validator(
        "id", "booking_id", "currency", "method", "transaction_id", "user_id", mode="before"
    )(_blank_to_none)
    _normalize_created_at = field_validator("created_at", mode="after")(_as_utc)

    @field_validator("booking", mode="before")
    @classmethod
    def _ignore_non_mapping_booking(cls, value: Any) -> Any:  # noqa: ANN401
        # Unpopulated references arrive as the bare internal id.
        if isinstance(value, str):
            return {"_id": value} if value.strip() else None
        return value


class BookingResponse(DocumentModel):
    booking: BookingDocument | None = None


class BookingListResponse(DocumentModel):
    bookings: list[BookingDocument] = Field(default_factory=list)


class RefundInfoDocument(DocumentModel):
    refund_amount: float | None = Field(default=None, alias="refundAmount")


class CancelResponse(DocumentModel):
    refund_info: RefundInfoDocument | None = Field(default=None, alias="refundInfo")
    booking: BookingDocument | None = None


class PaymentHistoryResponse(DocumentModel):
    payments: list[PaymentDocument] = Field(default_factory=list)
