"""Booking/payment JSON documents shared by the Primary API and local stores."""

from __future__ import annotations

from .codec import JsonDocumentCodec
from .translator import (
    booking_from_document,
    booking_to_document,
    dump_booking,
    dump_payment,
    payment_from_document,
    payment_to_document,
)

__all__ = [
    "JsonDocumentCodec",
    "booking_from_document",
    "booking_to_document",
    "dump_booking",
    "dump_payment",
    "payment_from_document",
    "payment_to_document",
]
