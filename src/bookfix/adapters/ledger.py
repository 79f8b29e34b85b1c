"""Payment ledgers composed from local and remote payment history."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from bookfix.domain.errors import TransientUnavailableError
from bookfix.domain.reconciliation import find_payment

if TYPE_CHECKING:
    from bookfix.domain.model import Payment
    from bookfix.domain.ports import PaymentLedger, PrimaryBookingService

log = getLogger(__name__)


@dataclass(slots=True)
class RemotePaymentLedger:
    """Payment history served by the Primary API; raises when it is unavailable."""

    primary: PrimaryBookingService

    def all(self) -> list[Payment]:
        return self.primary.fetch_payment_history()

    def find_matching(self, booking_id: str) -> Payment | None:
        return find_payment(booking_id, self.all())


@dataclass(slots=True)
class CompositePaymentLedger:
    """Concatenate ledgers in order; unavailable parts are skipped."""

    parts: tuple[PaymentLedger, ...]

    def all(self) -> list[Payment]:
        payments: list[Payment] = []
        for part in self.parts:
            try:
                payments.extend(part.all())
            except TransientUnavailableError as exc:
                log.warning("Skipping unavailable payment ledger %s: %s", type(part).__name__, exc)
        return payments

    def find_matching(self, booking_id: str) -> Payment | None:
        # Later parts are not queried once an earlier one matches.
        for part in self.parts:
            try:
                payment = part.find_matching(booking_id)
            except TransientUnavailableError as exc:
                log.warning("Skipping unavailable payment ledger %s: %s", type(part).__name__, exc)
                continue
            if payment is not None:
                return payment
        return None
