"""Booking reconciliation core.

Layered flow for one booking id:
1) ask the Primary service
2) fall back to the local Mirror
3) correlate a payment in the Ledger and synthesize a booking from it
4) repair the Mirror with the synthesized booking
"""

from __future__ import annotations

from .correlate import find_payment, find_similar, known_booking_ids, payment_matches
from .repair import RepairWriter
from .resolve import (
    BookingListing,
    BookingResolver,
    LedgerSynthesis,
    MirrorLookup,
    PrimaryLookup,
    ResolutionStrategy,
    build_resolver,
    list_bookings,
)
from .synthesize import synthesize

__all__ = [
    "BookingListing",
    "BookingResolver",
    "LedgerSynthesis",
    "MirrorLookup",
    "PrimaryLookup",
    "RepairWriter",
    "ResolutionStrategy",
    "build_resolver",
    "find_payment",
    "find_similar",
    "known_booking_ids",
    "list_bookings",
    "payment_matches",
    "synthesize",
]
