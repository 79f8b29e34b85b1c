"""Mirror and Ledger implementations backed by the local document table."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from pydantic import ValidationError
from sqlalchemy import delete, insert, select

from bookfix.adapters.documents import (
    booking_from_document,
    dump_booking,
    dump_payment,
    payment_from_document,
)
from bookfix.domain.reconciliation import find_payment
from bookfix.domain.time_windows import utcnow

from .mappings import local_document_table

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy.orm import Session

    from bookfix.domain.model import Booking, Payment
    from bookfix.domain.time_windows import Clock

log = getLogger(__name__)

LOCAL_BOOKINGS_KEY = "localBookings"
LOCAL_PAYMENTS_KEY = "localPayments"

type Document = dict[str, Any]


class SqlAlchemyDocumentStore:
    """Named JSON arrays of documents, one row per collection."""

    def __init__(self, session_factory: Callable[[], Session], *, clock: Clock = utcnow) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def read(self, key: str) -> list[Document]:
        stmt = select(local_document_table.c.payload).where(local_document_table.c.key == key)
        with self._session_factory() as session:
            payload = session.execute(stmt).scalar_one_or_none()
        if payload is None:
            return []
        if not isinstance(payload, list):
            log.warning("Ignoring malformed %s collection (%s)", key, type(payload).__name__)
            return []
        documents = cast(list[object], payload)
        return [cast(Document, item) for item in documents if isinstance(item, dict)]

    def write(self, key: str, documents: Iterable[Document]) -> None:
        rows = list(documents)
        with self._session_factory() as session, session.begin():
            session.execute(delete(local_document_table).where(local_document_table.c.key == key))
            session.execute(
                insert(local_document_table).values(key=key, payload=rows, updated_at=self._clock())
            )


def _document_keys(document: Document) -> set[str]:
    return {
        value
        for value in (document.get("bookingId"), document.get("_id"), document.get("id"))
        if isinstance(value, str) and value
    }


class SqlAlchemyBookingMirror:
    """Booking Mirror stored under ``localBookings``.

    Entries that fail validation are kept as-is in storage but are invisible to
    reads, so a single corrupt document never hides the rest of the Mirror.
    """

    def __init__(self, store: SqlAlchemyDocumentStore) -> None:
        self._store = store

    def get(self, booking_id: str) -> Booking | None:
        for document in self._store.read(LOCAL_BOOKINGS_KEY):
            if booking_id in _document_keys(document):
                booking = self._translate(document)
                if booking is not None:
                    return booking
        return None

    def all(self) -> list[Booking]:
        bookings: list[Booking] = []
        for document in self._store.read(LOCAL_BOOKINGS_KEY):
            booking = self._translate(document)
            if booking is not None:
                bookings.append(booking)
        return bookings

    def upsert(self, booking: Booking) -> None:
        keys = set(booking.keys)
        documents = [
            document
            for document in self._store.read(LOCAL_BOOKINGS_KEY)
            if not keys & _document_keys(document)
        ]
        documents.append(dump_booking(booking))
        self._store.write(LOCAL_BOOKINGS_KEY, documents)

    def remove_by_id(self, booking_id: str) -> int:
        documents = self._store.read(LOCAL_BOOKINGS_KEY)
        kept = [document for document in documents if booking_id not in _document_keys(document)]
        removed = len(documents) - len(kept)
        if removed:
            self._store.write(LOCAL_BOOKINGS_KEY, kept)
        return removed

    def clear(self) -> int:
        removed = len(self._store.read(LOCAL_BOOKINGS_KEY))
        self._store.write(LOCAL_BOOKINGS_KEY, [])
        return removed

    @staticmethod
    def _translate(document: Document) -> Booking | None:
        try:
            return booking_from_document(document)
        except ValidationError as exc:
            log.warning(
                "Skipping invalid mirror entry %s: %s",
                document.get("bookingId") or document.get("_id"),
                exc.error_count(),
            )
            return None


class SqlAlchemyPaymentLedger:
    """Payment Ledger stored under ``localPayments``."""

    def __init__(self, store: SqlAlchemyDocumentStore) -> None:
        self._store = store

    def all(self) -> list[Payment]:
        payments: list[Payment] = []
        for document in self._store.read(LOCAL_PAYMENTS_KEY):
            try:
                payments.append(payment_from_document(document))
            except ValidationError as exc:
                log.warning(
                    "Skipping invalid ledger entry %s: %s",
                    document.get("_id"),
                    exc.error_count(),
                )
        return payments

    def find_matching(self, booking_id: str) -> Payment | None:
        return find_payment(booking_id, self.all())

    def import_payments(self, payments: Iterable[Payment]) -> int:
        """Append payments, skipping ids already present."""

        incoming = list(payments)
        stored = self._store.read(LOCAL_PAYMENTS_KEY)
        seen = {document.get("_id") for document in stored if document.get("_id")}
        added = 0
        for payment in incoming:
            if payment.id is not None and payment.id in seen:
                log.info("Payment %s already in ledger, skipping", payment.id)
                continue
            stored.append(dump_payment(payment))
            if payment.id is not None:
                seen.add(payment.id)
            added += 1
        if added:
            self._store.write(LOCAL_PAYMENTS_KEY, stored)
        log.info("Imported %s payment(s) into the local ledger", added)
        return added
