"""Error taxonomy shared by the resolution, repair and cancellation services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import BookingStatus


class BookfixError(RuntimeError):
    """Base class for failures surfaced to callers."""


class BookingNotFoundError(BookfixError):
    """Raised when a booking id is absent from every source."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking not found: {booking_id}")
        self.booking_id = booking_id


class TransientUnavailableError(BookfixError):
    """Raised by adapters when a remote source cannot answer right now.

    Callers recover by falling through to the next source; it is never the final
    outcome of a resolution or cancellation.
    """


class InvalidTransitionError(BookfixError):
    """Raised when a cancellation guard rejects the requested transition."""

    def __init__(self, booking_id: str, message: str) -> None:
        super().__init__(message)
        self.booking_id = booking_id


class WrongStatusError(InvalidTransitionError):
    def __init__(self, booking_id: str, status: BookingStatus) -> None:
        if status == "cancelled":
            detail = f"booking {booking_id} is already cancelled"
        else:
            detail = f"booking {booking_id} has status {status}"
        super().__init__(booking_id, f"cannot cancel: wrong status ({detail})")
        self.status = status


class TooCloseToDepartureError(InvalidTransitionError):
    def __init__(self, booking_id: str, *, hours_remaining: float, minimum_hours: float) -> None:
        super().__init__(
            booking_id,
            "cannot cancel: too close to departure "
            f"({hours_remaining:.1f} hours left, minimum {minimum_hours:g} required)",
        )
        self.hours_remaining = hours_remaining
        self.minimum_hours = minimum_hours


class ConfirmationRequiredError(BookfixError):
    """Raised when a destructive operator action is requested without confirmation."""


class InvalidDepartureError(InvalidTransitionError):
    """Raised when a booking's departure time cannot be read."""

    def __init__(self, booking_id: str, departure_time: str) -> None:
        super().__init__(
            booking_id,
            f"cannot cancel: unreadable departure time {departure_time!r}",
        )
        self.departure_time = departure_time
