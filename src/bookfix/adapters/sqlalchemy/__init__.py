"""SQLAlchemy adapter package for the local Mirror and Ledger."""

from __future__ import annotations

from .engine import StartupError, is_started, session_factory, shutdown, startup
from .mappings import create_all_tables, local_document_table, metadata
from .repositories import (
    LOCAL_BOOKINGS_KEY,
    LOCAL_PAYMENTS_KEY,
    SqlAlchemyBookingMirror,
    SqlAlchemyDocumentStore,
    SqlAlchemyPaymentLedger,
)

__all__ = [
    "LOCAL_BOOKINGS_KEY",
    "LOCAL_PAYMENTS_KEY",
    "SqlAlchemyBookingMirror",
    "SqlAlchemyDocumentStore",
    "SqlAlchemyPaymentLedger",
    "StartupError",
    "create_all_tables",
    "is_started",
    "local_document_table",
    "metadata",
    "session_factory",
    "shutdown",
    "startup",
]
