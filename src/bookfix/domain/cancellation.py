"""Cancellation state machine for bookings.

Only ``confirmed -> cancelled`` is performed here. Guards run in order and the
first failure aborts before anything is mutated:
1) the booking resolves
2) its status is ``confirmed``
3) at least ``minimum_notice`` is left before departure

The Primary service is asked first and its answer (refund included) is trusted
as-is. Only when it is missing or fails does the local fallback policy apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, timedelta
from decimal import ROUND_FLOOR, Decimal
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from bookfix.domain.errors import (
    InvalidDepartureError,
    TooCloseToDepartureError,
    TransientUnavailableError,
    WrongStatusError,
)
from bookfix.domain.model import BookingStatus, RefundStatus
from bookfix.domain.time_windows import DepartureWindow, utcnow

if TYPE_CHECKING:
    from datetime import tzinfo

    from bookfix.domain.model import Booking
    from bookfix.domain.ports import PrimaryBookingService
    from bookfix.domain.reconciliation import BookingResolver, RepairWriter
    from bookfix.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_MINIMUM_NOTICE = timedelta(hours=2)
DEFAULT_LOCAL_REFUND_RATE = Decimal("0.8")
DEFAULT_CANCELLATION_REASON = "User requested cancellation"


@dataclass(frozen=True, slots=True)
class CancellationPolicy:
    """Single source of truth for the cancellation thresholds."""

    minimum_notice: timedelta = DEFAULT_MINIMUM_NOTICE
    local_refund_rate: Decimal = DEFAULT_LOCAL_REFUND_RATE
    departure_timezone: tzinfo = UTC

    def local_refund(self, total_amount: float) -> int:
        """Refund granted by the local fallback: ``floor(total * rate)``."""

        refund = Decimal(str(total_amount)) * self.local_refund_rate
        return int(refund.to_integral_value(rounding=ROUND_FLOOR))


class CancellationPath(StrEnum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(slots=True, kw_only=True)
class CancellationResult:
    booking_id: str
    path: CancellationPath
    refund_amount: float | None
    refund_status: RefundStatus | None = None
    booking: Booking | None = None


@dataclass(slots=True)
class CancellationEngine:
    resolver: BookingResolver
    writer: RepairWriter
    primary: PrimaryBookingService | None = None
    policy: CancellationPolicy = field(default_factory=CancellationPolicy)
    clock: Clock = utcnow

    def check(self, booking: Booking) -> None:
        """Raise ``InvalidTransitionError`` when ``booking`` cannot be cancelled now."""

        if booking.status is not BookingStatus.CONFIRMED:
            raise WrongStatusError(booking.booking_id, booking.status)

        try:
            window = DepartureWindow.for_itinerary(
                booking.travel_date,
                booking.departure_time,
                timezone=self.policy.departure_timezone,
            )
        except ValueError as exc:
            raise InvalidDepartureError(booking.booking_id, booking.departure_time) from exc
        if not window.allows(self.policy.minimum_notice, clock=self.clock):
            raise TooCloseToDepartureError(
                booking.booking_id,
                hours_remaining=window.hours_remaining(clock=self.clock),
                minimum_hours=self.policy.minimum_notice / timedelta(hours=1),
            )

    def cancel(
        self,
        booking_id: str,
        *,
        reason: str = DEFAULT_CANCELLATION_REASON,
    ) -> CancellationResult:
        booking = self.resolver.require(booking_id)
        self.check(booking)

        remote = self._cancel_remotely(booking, reason=reason)
        if remote is not None:
            return remote
        return self._cancel_locally(booking, reason=reason)

    def _cancel_remotely(self, booking: Booking, *, reason: str) -> CancellationResult | None:
        if self.primary is None:
            return None
        try:
            receipt = self.primary.cancel_booking(booking.remote_key, reason=reason)
        except TransientUnavailableError as exc:
            log.warning(
                "Remote cancellation failed for %s, applying local policy: %s",
                booking.booking_id,
                exc,
            )
            return None
        log.info(
            "Booking %s cancelled via Primary, refund %s",
            booking.booking_id,
            receipt.refund_amount,
        )
        return CancellationResult(
            booking_id=booking.booking_id,
            path=CancellationPath.REMOTE,
            refund_amount=receipt.refund_amount,
            booking=receipt.booking,
        )

    def _cancel_locally(self, booking: Booking, *, reason: str) -> CancellationResult:
        refund_amount = self.policy.local_refund(booking.pricing.total_amount)
        booking.cancel(
            reason=reason,
            cancelled_at=self.clock(),
            refund_amount=refund_amount,
            refund_status=RefundStatus.PENDING,
        )
        self.writer.repair(booking)
        log.info(
            "Booking %s cancelled locally, refund %s pending",
            booking.booking_id,
            refund_amount,
        )
        return CancellationResult(
            booking_id=booking.booking_id,
            path=CancellationPath.LOCAL,
            refund_amount=refund_amount,
            refund_status=RefundStatus.PENDING,
            booking=booking,
        )
