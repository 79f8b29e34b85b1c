"""Domain port definitions for adapters."""

from __future__ import annotations

from .codec import DocumentCodec
from .persistence import BookingMirror, PaymentLedger, WritablePaymentLedger
from .remote import CancellationReceipt, PrimaryBookingService

__all__ = [
    "BookingMirror",
    "CancellationReceipt",
    "DocumentCodec",
    "PaymentLedger",
    "PrimaryBookingService",
    "WritablePaymentLedger",
]
