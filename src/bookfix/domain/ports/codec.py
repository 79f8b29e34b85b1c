"""Port for turning domain records into plain JSON documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bookfix.domain.model import Booking, Payment


class DocumentCodec(Protocol):
    def dump_booking(self, booking: Booking) -> dict[str, object]: ...

    def dump_payment(self, payment: Payment) -> dict[str, object]: ...
