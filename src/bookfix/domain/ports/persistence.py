"""Ports for the local booking Mirror and the payment Ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bookfix.domain.model import Booking, Payment


@runtime_checkable
class BookingMirror(Protocol):
    """Local durable cache of bookings, one live entry per booking id."""

    def get(self, booking_id: str) -> Booking | None:
        """Return the entry whose ``booking_id`` or ``id`` equals ``booking_id``."""
        ...

    def all(self) -> list[Booking]: ...

    def upsert(self, booking: Booking) -> None:
        """Replace any entry sharing a key with ``booking``, or append it."""
        ...

    def remove_by_id(self, booking_id: str) -> int:
        """Remove entries answering to ``booking_id``; return how many went."""
        ...

    def clear(self) -> int: ...


@runtime_checkable
class PaymentLedger(Protocol):
    """Read-only payment history used as evidence for synthesis."""

    def all(self) -> list[Payment]: ...

    def find_matching(self, booking_id: str) -> Payment | None: ...


@runtime_checkable
class WritablePaymentLedger(PaymentLedger, Protocol):
    """Local Ledger that also accepts imported payment history."""

    def import_payments(self, payments: Iterable[Payment]) -> int:
        """Append ``payments`` not already present by id; return how many were added."""
        ...
