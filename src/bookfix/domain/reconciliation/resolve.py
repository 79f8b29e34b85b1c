"""Booking resolution over an ordered chain of sources.

Responsibilities of this stage:
- consult each source once, in order, stopping at the first hit
- treat an unavailable remote source as "not found here"
- sequence synthesize -> repair -> return for ledger-derived bookings

Out of scope for this stage:
- fuzzy matching (diagnostics only)
- state transitions (see ``bookfix.domain.cancellation``)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from bookfix.domain.errors import BookingNotFoundError, TransientUnavailableError
from bookfix.domain.model import Resolution, ResolutionSource
from bookfix.domain.time_windows import utcnow

from .synthesize import synthesize

if TYPE_CHECKING:
    from bookfix.domain.model import Booking, BookingStatus
    from bookfix.domain.ports import BookingMirror, PaymentLedger, PrimaryBookingService
    from bookfix.domain.time_windows import Clock

    from .repair import RepairWriter

log = getLogger(__name__)


class ResolutionStrategy(Protocol):
    """One source in the resolution chain."""

    def __call__(self, booking_id: str) -> Resolution: ...


@dataclass(slots=True)
class PrimaryLookup:
    primary: PrimaryBookingService

    def __call__(self, booking_id: str) -> Resolution:
        try:
            booking = self.primary.fetch_booking(booking_id)
        except TransientUnavailableError as exc:
            log.warning("Primary unavailable for %s, falling back: %s", booking_id, exc)
            return Resolution.miss()
        if booking is None:
            return Resolution.miss()
        return Resolution.hit(booking, ResolutionSource.PRIMARY)


@dataclass(slots=True)
class MirrorLookup:
    mirror: BookingMirror

    def __call__(self, booking_id: str) -> Resolution:
        booking = self.mirror.get(booking_id)
        if booking is None:
            return Resolution.miss()
        return Resolution.hit(booking, ResolutionSource.MIRROR)


@dataclass(slots=True)
class LedgerSynthesis:
    """Synthesize a booking from an exactly-correlated payment; never persists."""

    ledger: PaymentLedger
    clock: Clock = utcnow

    def __call__(self, booking_id: str) -> Resolution:
        try:
            payment = self.ledger.find_matching(booking_id)
        except TransientUnavailableError as exc:
            log.warning("Payment ledger unavailable for %s: %s", booking_id, exc)
            return Resolution.miss()
        if payment is None:
            return Resolution.miss()
        booking = synthesize(booking_id, payment, now=self.clock())
        log.info("Synthesized booking %s from payment %s", booking_id, payment.id)
        return Resolution.hit(booking, ResolutionSource.SYNTHESIZED)


@dataclass(slots=True)
class BookingResolver:
    """Resolve booking ids through ``strategies``, repairing synthesized hits."""

    strategies: tuple[ResolutionStrategy, ...]
    writer: RepairWriter

    def resolve(self, booking_id: str) -> Resolution:
        for strategy in self.strategies:
            resolution = strategy(booking_id)
            if not resolution.found or resolution.booking is None:
                continue
            if resolution.source is ResolutionSource.SYNTHESIZED:
                self.writer.repair(resolution.booking)
            log.debug("Resolved %s from %s", booking_id, resolution.source)
            return resolution
        log.info("Booking %s not found in any source", booking_id)
        return Resolution.miss()

    def require(self, booking_id: str) -> Booking:
        resolution = self.resolve(booking_id)
        if resolution.booking is None:
            raise BookingNotFoundError(booking_id)
        return resolution.booking


def build_resolver(
    *,
    mirror: BookingMirror,
    ledger: PaymentLedger,
    writer: RepairWriter,
    primary: PrimaryBookingService | None = None,
    clock: Clock = utcnow,
) -> BookingResolver:
    """Compose the standard Primary -> Mirror -> Ledger chain."""

    strategies: list[ResolutionStrategy] = []
    if primary is not None:
        strategies.append(PrimaryLookup(primary))
    strategies.append(MirrorLookup(mirror))
    strategies.append(LedgerSynthesis(ledger, clock=clock))
    return BookingResolver(strategies=tuple(strategies), writer=writer)


@dataclass(slots=True)
class BookingListing:
    bookings: list[Booking] = field(default_factory=list["Booking"])
    source: ResolutionSource = ResolutionSource.NONE


def list_bookings(
    *,
    mirror: BookingMirror,
    primary: PrimaryBookingService | None = None,
    status: BookingStatus | None = None,
) -> BookingListing:
    """List bookings from Primary, falling back to the Mirror, newest first."""

    if primary is not None:
        try:
            bookings = primary.list_bookings(status=status)
        except TransientUnavailableError as exc:
            log.warning("Primary unavailable for booking list, using mirror: %s", exc)
        else:
            return BookingListing(bookings=bookings, source=ResolutionSource.PRIMARY)

    bookings = [
        booking for booking in mirror.all() if status is None or booking.status is status
    ]
    bookings.sort(key=lambda booking: booking.created_at, reverse=True)
    return BookingListing(bookings=bookings, source=ResolutionSource.MIRROR)
