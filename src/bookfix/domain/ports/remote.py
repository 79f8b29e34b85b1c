"""Port for the authoritative remote booking service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bookfix.domain.model import Booking, BookingStatus, Payment


@dataclass(slots=True, kw_only=True)
class CancellationReceipt:
    """What the Primary service reported after a successful cancellation."""

    refund_amount: float | None = None
    booking: Booking | None = None


@runtime_checkable
class PrimaryBookingService(Protocol):
    """Remote booking API.

    Implementations return ``None`` for an absent booking and raise
    ``TransientUnavailableError`` for transport or server failures.
    """

    def fetch_booking(self, booking_id: str) -> Booking | None: ...

    def cancel_booking(self, remote_key: str, *, reason: str) -> CancellationReceipt: ...

    def list_bookings(self, *, status: BookingStatus | None = None) -> list[Booking]: ...

    def fetch_payment_history(self) -> list[Payment]: ...
