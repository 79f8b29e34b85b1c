"""Repair-persist writer for the booking Mirror."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bookfix.domain.model import Booking
    from bookfix.domain.ports import BookingMirror

log = getLogger(__name__)


@dataclass(slots=True)
class RepairWriter:
    """Write a booking into the Mirror so exactly one entry answers to its keys."""

    mirror: BookingMirror

    def repair(self, booking: Booking) -> bool:
        """Replace every entry sharing a key with ``booking``, then insert it.

        Returns whether an existing entry was overwritten. Overwriting is the
        expected outcome of a repeated repair and is not reported as an error.
        """

        removed = 0
        for key in booking.keys:
            removed += self.mirror.remove_by_id(key)
        self.mirror.upsert(booking)
        if removed:
            log.info(
                "Overwrote %s mirror entr%s for booking %s",
                removed,
                "y" if removed == 1 else "ies",
                booking.booking_id,
            )
        else:
            log.info("Stored booking %s in mirror", booking.booking_id)
        return removed > 0
