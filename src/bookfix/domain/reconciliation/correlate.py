"""Payment correlation for booking ids.

Two distinct lookups live here:
- ``find_payment`` is an exact match and may drive synthesis
- ``find_similar`` is a fuzzy neighbour search meant for operators only; nothing
  in the resolution or repair path consumes it
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bookfix.domain.model import Booking, Payment

SIMILARITY_PREFIX_LENGTH = 10


def payment_matches(payment: Payment, booking_id: str) -> bool:
    if payment.booking_id == booking_id:
        return True
    snapshot = payment.booking
    if snapshot is None:
        return False
    return booking_id in (snapshot.booking_id, snapshot.id)


def find_payment(booking_id: str, payments: Iterable[Payment]) -> Payment | None:
    """Return the first payment referencing ``booking_id``, in ledger order."""

    for payment in payments:
        if payment_matches(payment, booking_id):
            return payment
    return None


def find_similar(booking_id: str, known_ids: Iterable[str]) -> list[str]:
    """Return known ids containing the first ten characters of ``booking_id``."""

    prefix = booking_id[:SIMILARITY_PREFIX_LENGTH]
    if not prefix:
        return []
    similar: list[str] = []
    for known_id in known_ids:
        if prefix in known_id and known_id not in similar:
            similar.append(known_id)
    return similar


def known_booking_ids(bookings: Iterable[Booking], payments: Iterable[Payment]) -> list[str]:
    """Collect the booking ids referenced by the Mirror and the Ledger."""

    known: list[str] = [booking.booking_id or booking.id or "" for booking in bookings]
    known.extend(payment.referenced_booking_id or "" for payment in payments)
    return [value for value in known if value]
