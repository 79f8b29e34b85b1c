"""Result wrapper returned by booking resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import ResolutionSource

if TYPE_CHECKING:
    from .booking import Booking


@dataclass(slots=True, frozen=True, kw_only=True)
class Resolution:
    found: bool
    booking: Booking | None = None
    source: ResolutionSource = ResolutionSource.NONE

    def __post_init__(self) -> None:
        if self.found != (self.booking is not None):
            raise ValueError("A resolution carries a booking exactly when it is found")
        if self.found and self.source is ResolutionSource.NONE:
            raise ValueError("A found resolution must name its source")

    @classmethod
    def hit(cls, booking: Booking, source: ResolutionSource) -> Resolution:
        return cls(found=True, booking=booking, source=source)

    @classmethod
    def miss(cls) -> Resolution:
        return cls(found=False)
