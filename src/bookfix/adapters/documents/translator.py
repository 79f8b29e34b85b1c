"""Translate booking/payment JSON documents to domain records and back."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bookfix.domain.model import (
    Booking,
    BookingSnapshot,
    CancellationInfo,
    CheckInInfo,
    Location,
    OperatorInfo,
    PassengerInfo,
    Payment,
    PaymentInfo,
    PaymentStatus,
    Pricing,
    RefundStatus,
    RouteInfo,
    SeatInfo,
)

from .schema import (
    BookingDocument,
    BookingSnapshotDocument,
    CancellationInfoDocument,
    CheckInInfoDocument,
    LocationDocument,
    OperatorInfoDocument,
    PassengerInfoDocument,
    PaymentDocument,
    PaymentInfoDocument,
    PricingDocument,
    RouteInfoDocument,
    SeatInfoDocument,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from pydantic import BaseModel

type BookingDocumentInput = BookingDocument | dict[str, Any]
type PaymentDocumentInput = PaymentDocument | dict[str, Any]


def _known[E: StrEnum](enum: type[E], value: str) -> E | str:
    # Unknown statuses are kept verbatim rather than rejected.
    try:
        return enum(value)
    except ValueError:
        return value


def _dump(document: BaseModel) -> dict[str, object]:
    return document.model_dump(by_alias=True, mode="json", exclude_none=True)


# --- document -> domain ---------------------------------------------------------


def booking_from_document(document: BookingDocumentInput) -> Booking:
    doc = (
        document
        if isinstance(document, BookingDocument)
        else BookingDocument.model_validate(document)
    )
    return Booking(
        booking_id=doc.booking_id,
        id=doc.id,
        user_id=doc.user_id,
        route_id=doc.route_id,
        schedule_id=doc.schedule_id,
        travel_date=doc.travel_date,
        departure_time=doc.departure_time,
        passenger_info=_passenger(doc.passenger_info),
        seat_info=_seat(doc.seat_info),
        pricing=Pricing(
            base_price=doc.pricing.base_price,
            taxes=doc.pricing.taxes,
            discounts=doc.pricing.discounts,
            total_amount=doc.pricing.total_amount,
            currency=doc.pricing.currency,
        ),
        payment_info=PaymentInfo(
            payment_id=doc.payment_info.payment_id,
            method=doc.payment_info.method,
            status=_known(PaymentStatus, doc.payment_info.status),
            paid_at=doc.payment_info.paid_at,
            transaction_id=doc.payment_info.transaction_id,
        ),
        status=doc.status,
        cancellation_info=_cancellation(doc.cancellation_info),
        check_in_info=CheckInInfo(
            checked_in=doc.check_in_info.checked_in,
            check_in_time=doc.check_in_info.check_in_time,
            check_in_location=doc.check_in_info.check_in_location,
        ),
        route_info=_route(doc.route_info),
        is_active=doc.is_active,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


def payment_from_document(document: PaymentDocumentInput) -> Payment:
    doc = (
        document
        if isinstance(document, PaymentDocument)
        else PaymentDocument.model_validate(document)
    )
    return Payment(
        id=doc.id,
        booking_id=doc.booking_id,
        booking=_snapshot(doc.booking),
        amount=doc.amount,
        currency=doc.currency,
        method=doc.method,
        status=_known(PaymentStatus, doc.status) if doc.status else None,
        transaction_id=doc.transaction_id,
        user_id=doc.user_id,
        created_at=doc.created_at,
    )


def _passenger(doc: PassengerInfoDocument) -> PassengerInfo:
    return PassengerInfo(
        name=doc.name,
        phone=doc.phone,
        email=doc.email,
        id_type=doc.id_type,
        id_number=doc.id_number,
        passenger_type=doc.passenger_type,
    )


def _seat(doc: SeatInfoDocument) -> SeatInfo:
    return SeatInfo(
        seat_number=doc.seat_number,
        seat_type=doc.seat_type,
        preferences=list(doc.preferences),
    )


def _route(doc: RouteInfoDocument | None) -> RouteInfo | None:
    if doc is None:
        return None
    return RouteInfo(
        name=doc.name,
        start_location=Location(name=doc.start_location.name, address=doc.start_location.address),
        end_location=Location(name=doc.end_location.name, address=doc.end_location.address),
        operator_info=OperatorInfo(
            company_name=doc.operator_info.company_name,
            contact_number=doc.operator_info.contact_number,
        ),
    )


def _cancellation(doc: CancellationInfoDocument | None) -> CancellationInfo | None:
    if doc is None:
        return None
    return CancellationInfo(
        reason=doc.reason,
        cancelled_at=doc.cancelled_at,
        refund_amount=doc.refund_amount,
        refund_status=_known(RefundStatus, doc.refund_status),
    )


def _snapshot(doc: BookingSnapshotDocument | None) -> BookingSnapshot | None:
    if doc is None:
        return None
    return BookingSnapshot(
        id=doc.id,
        booking_id=doc.booking_id,
        user_id=doc.user_id,
        route_id=doc.route_id,
        schedule_id=doc.schedule_id,
        travel_date=doc.travel_date,
        departure_time=doc.departure_time,
        passenger_info=_passenger(doc.passenger_info) if doc.passenger_info else None,
        seat_info=_seat(doc.seat_info) if doc.seat_info else None,
        route_info=_route(doc.route_info),
    )


# --- domain -> document ---------------------------------------------------------


def booking_to_document(booking: Booking) -> BookingDocument:
    return BookingDocument(
        id=booking.id,
        booking_id=booking.booking_id,
        user_id=booking.user_id,
        route_id=booking.route_id,
        schedule_id=booking.schedule_id,
        travel_date=booking.travel_date,
        departure_time=booking.departure_time,
        passenger_info=_passenger_document(booking.passenger_info),
        seat_info=_seat_document(booking.seat_info),
        pricing=PricingDocument(
            base_price=booking.pricing.base_price,
            taxes=booking.pricing.taxes,
            discounts=booking.pricing.discounts,
            total_amount=booking.pricing.total_amount,
            currency=booking.pricing.currency,
        ),
        payment_info=PaymentInfoDocument(
            payment_id=booking.payment_info.payment_id,
            method=booking.payment_info.method,
            status=str(booking.payment_info.status),
            paid_at=booking.payment_info.paid_at,
            transaction_id=booking.payment_info.transaction_id,
        ),
        status=booking.status,
        cancellation_info=_cancellation_document(booking.cancellation_info),
        check_in_info=CheckInInfoDocument(
            checked_in=booking.check_in_info.checked_in,
            check_in_time=booking.check_in_info.check_in_time,
            check_in_location=booking.check_in_info.check_in_location,
        ),
        route_info=_route_document(booking.route_info),
        is_active=booking.is_active,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def payment_to_document(payment: Payment) -> PaymentDocument:
    snapshot = payment.booking
    return PaymentDocument(
        id=payment.id,
        booking_id=payment.booking_id,
        booking=_snapshot_document(snapshot) if snapshot is not None else None,
        amount=payment.amount,
        currency=payment.currency,
        method=payment.method,
        status=str(payment.status) if payment.status is not None else None,
        transaction_id=payment.transaction_id,
        user_id=payment.user_id,
        created_at=payment.created_at,
    )


def dump_booking(booking: Booking) -> dict[str, object]:
    """Camel-cased JSON document for ``booking`` (internal id under ``_id``)."""

    return _dump(booking_to_document(booking))


def dump_payment(payment: Payment) -> dict[str, object]:
    return _dump(payment_to_document(payment))


def _passenger_document(info: PassengerInfo) -> PassengerInfoDocument:
    return PassengerInfoDocument(
        name=info.name,
        phone=info.phone,
        email=info.email,
        id_type=info.id_type,
        id_number=info.id_number,
        passenger_type=info.passenger_type,
    )


def _seat_document(info: SeatInfo) -> SeatInfoDocument:
    return SeatInfoDocument(
        seat_number=info.seat_number,
        seat_type=info.seat_type,
        preferences=list(info.preferences),
    )


def _route_document(info: RouteInfo | None) -> RouteInfoDocument | None:
    if info is None:
        return None
    return RouteInfoDocument(
        name=info.name,
        start_location=LocationDocument(
            name=info.start_location.name, address=info.start_location.address
        ),
        end_location=LocationDocument(
            name=info.end_location.name, address=info.end_location.address
        ),
        operator_info=OperatorInfoDocument(
            company_name=info.operator_info.company_name,
            contact_number=info.operator_info.contact_number,
        ),
    )


def _cancellation_document(info: CancellationInfo | None) -> CancellationInfoDocument | None:
    if info is None:
        return None
    return CancellationInfoDocument(
        reason=info.reason,
        cancelled_at=info.cancelled_at,
        refund_amount=info.refund_amount,
        refund_status=str(info.refund_status),
    )


def _snapshot_document(snapshot: BookingSnapshot) -> BookingSnapshotDocument:
    return BookingSnapshotDocument(
        id=snapshot.id,
        booking_id=snapshot.booking_id,
        user_id=snapshot.user_id,
        route_id=snapshot.route_id,
        schedule_id=snapshot.schedule_id,
        travel_date=snapshot.travel_date,
        departure_time=snapshot.departure_time,
        passenger_info=(
            _passenger_document(snapshot.passenger_info) if snapshot.passenger_info else None
        ),
        seat_info=_seat_document(snapshot.seat_info) if snapshot.seat_info else None,
        route_info=_route_document(snapshot.route_info),
    )
