"""In-memory Mirror and Ledger stores.

Records are copied on the way in and out so callers never share state with the
store, matching what the persistent adapters do through serialization.
"""

from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING

from bookfix.domain.reconciliation import find_payment

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bookfix.domain.model import Booking, Payment


class InMemoryBookingMirror:
    def __init__(self, bookings: Iterable[Booking] = ()) -> None:
        self._bookings: list[Booking] = []
        for booking in bookings:
            self.upsert(booking)

    def get(self, booking_id: str) -> Booking | None:
        for booking in self._bookings:
            if booking.matches(booking_id):
                return deepcopy(booking)
        return None

    def all(self) -> list[Booking]:
        return deepcopy(self._bookings)

    def upsert(self, booking: Booking) -> None:
        keys = booking.keys
        self._bookings = [
            item for item in self._bookings if not any(item.matches(key) for key in keys)
        ]
        self._bookings.append(deepcopy(booking))

    def remove_by_id(self, booking_id: str) -> int:
        before = len(self._bookings)
        self._bookings = [item for item in self._bookings if not item.matches(booking_id)]
        return before - len(self._bookings)

    def clear(self) -> int:
        removed = len(self._bookings)
        self._bookings = []
        return removed


class InMemoryPaymentLedger:
    def __init__(self, payments: Iterable[Payment] = ()) -> None:
        self._payments = [deepcopy(payment) for payment in payments]

    def all(self) -> list[Payment]:
        return deepcopy(self._payments)

    def find_matching(self, booking_id: str) -> Payment | None:
        payment = find_payment(booking_id, self._payments)
        return deepcopy(payment) if payment is not None else None

    def import_payments(self, payments: Iterable[Payment]) -> int:
        known = {payment.id for payment in self._payments if payment.id is not None}
        added = 0
        for payment in payments:
            if payment.id is not None and payment.id in known:
                continue
            self._payments.append(deepcopy(payment))
            if payment.id is not None:
                known.add(payment.id)
            added += 1
        return added
