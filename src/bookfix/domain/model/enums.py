"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


class PaymentStatus(StrEnum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"


class RefundStatus(StrEnum):
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class ResolutionSource(StrEnum):
    """Provenance of a resolved booking."""

    PRIMARY = "primary"
    MIRROR = "mirror"
    SYNTHESIZED = "synthesized"
    NONE = "none"
