"""JSON document codec used for exports and the local document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .translator import dump_booking, dump_payment

if TYPE_CHECKING:
    from bookfix.domain.model import Booking, Payment


class JsonDocumentCodec:
    """Adapter satisfying ``DocumentCodec`` with the camel-cased document shape."""

    def dump_booking(self, booking: Booking) -> dict[str, object]:
        return dump_booking(booking)

    def dump_payment(self, payment: Payment) -> dict[str, object]:
        return dump_payment(payment)
