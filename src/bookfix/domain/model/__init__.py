"""Booking domain model (pure, dependency-light)."""

from __future__ import annotations

from .booking import (
    Booking,
    CancellationInfo,
    CheckInInfo,
    Location,
    OperatorInfo,
    PassengerInfo,
    PaymentInfo,
    Pricing,
    RouteInfo,
    SeatInfo,
)
from .enums import BookingStatus, PaymentStatus, RefundStatus, ResolutionSource
from .payment import BookingSnapshot, Payment
from .resolution import Resolution

__all__ = [
    "Booking",
    "BookingSnapshot",
    "BookingStatus",
    "CancellationInfo",
    "CheckInInfo",
    "Location",
    "OperatorInfo",
    "PassengerInfo",
    "Payment",
    "PaymentInfo",
    "PaymentStatus",
    "Pricing",
    "RefundStatus",
    "Resolution",
    "ResolutionSource",
    "RouteInfo",
    "SeatInfo",
]
