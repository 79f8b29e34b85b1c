"""Primary booking API adapter."""

from __future__ import annotations

from .client import (
    PrimaryBookingClient,
    PrimaryUnavailableError,
    should_cache_payment_history,
)

__all__ = [
    "PrimaryBookingClient",
    "PrimaryUnavailableError",
    "should_cache_payment_history",
]
