"""Application orchestration entry points."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from bookfix.adapters.documents import JsonDocumentCodec, payment_from_document
from bookfix.adapters.ledger import CompositePaymentLedger, RemotePaymentLedger
from bookfix.adapters.primary import PrimaryBookingClient, should_cache_payment_history
from bookfix.adapters.sqlalchemy import (
    SqlAlchemyBookingMirror,
    SqlAlchemyDocumentStore,
    SqlAlchemyPaymentLedger,
    is_started,
    session_factory,
    startup,
)
from bookfix.config import (
    MissingConfigurationError,
    get_cancellation_policy,
    get_primary_config,
    optional_env_var,
)
from bookfix.domain.cancellation import CancellationEngine
from bookfix.domain.diagnostics import DiagnosticsService, SessionIdentity
from bookfix.domain.reconciliation import RepairWriter, build_resolver, list_bookings
from bookfix.domain.time_windows import utcnow

if TYPE_CHECKING:
    from pathlib import Path

    from bookfix.domain.cancellation import CancellationPolicy, CancellationResult
    from bookfix.domain.diagnostics import DiagnosticReport, StorageStatus
    from bookfix.domain.model import Booking, BookingStatus, Payment, Resolution
    from bookfix.domain.ports import (
        BookingMirror,
        PaymentLedger,
        PrimaryBookingService,
        WritablePaymentLedger,
    )
    from bookfix.domain.reconciliation import BookingListing, BookingResolver
    from bookfix.domain.time_windows import Clock

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class BookingServices:
    """Wired stores and services for one process."""

    mirror: BookingMirror
    local_ledger: WritablePaymentLedger
    ledger: PaymentLedger
    primary: PrimaryBookingService | None
    writer: RepairWriter
    resolver: BookingResolver
    engine: CancellationEngine
    diagnostics: DiagnosticsService


def _default_primary() -> tuple[PrimaryBookingService | None, str | None]:
    try:
        config = get_primary_config(history_cache_predicate=should_cache_payment_history)
    except MissingConfigurationError:
        log.info("BOOKFIX_API_URL not set; running against local stores only")
        return None, None
    return PrimaryBookingClient(config=config), config.base_url


def build_services(
    *,
    mirror: BookingMirror | None = None,
    local_ledger: WritablePaymentLedger | None = None,
    primary: PrimaryBookingService | None = None,
    offline: bool = False,
    policy: CancellationPolicy | None = None,
    clock: Clock = utcnow,
    operator: str | None = None,
) -> BookingServices:
    """Compose the default adapters, filling in whatever the caller did not inject."""

    if mirror is None or local_ledger is None:
        if not is_started():
            startup()
        store = SqlAlchemyDocumentStore(session_factory(), clock=clock)
        mirror = mirror or SqlAlchemyBookingMirror(store)
        local_ledger = local_ledger or SqlAlchemyPaymentLedger(store)

    primary_url: str | None = None
    if offline:
        primary = None
    elif primary is None:
        primary, primary_url = _default_primary()
    elif isinstance(primary, PrimaryBookingClient):
        primary_url = primary.base_url

    ledger: PaymentLedger = local_ledger
    if primary is not None:
        ledger = CompositePaymentLedger(parts=(local_ledger, RemotePaymentLedger(primary)))

    writer = RepairWriter(mirror)
    resolver = build_resolver(
        mirror=mirror,
        ledger=ledger,
        writer=writer,
        primary=primary,
        clock=clock,
    )
    engine = CancellationEngine(
        resolver=resolver,
        writer=writer,
        primary=primary,
        policy=policy or get_cancellation_policy(),
        clock=clock,
    )
    diagnostics = DiagnosticsService(
        mirror=mirror,
        ledger=ledger,
        writer=writer,
        engine=engine,
        codec=JsonDocumentCodec(),
        session=SessionIdentity(
            operator=operator or optional_env_var("BOOKFIX_OPERATOR"),
            primary_url=primary_url,
        ),
        clock=clock,
    )
    return BookingServices(
        mirror=mirror,
        local_ledger=local_ledger,
        ledger=ledger,
        primary=primary,
        writer=writer,
        resolver=resolver,
        engine=engine,
        diagnostics=diagnostics,
    )


def resolve_booking(booking_id: str, *, services: BookingServices | None = None) -> Resolution:
    active = services or build_services()
    resolution = active.resolver.resolve(booking_id)
    log.info("Resolved %s: found=%s source=%s", booking_id, resolution.found, resolution.source)
    return resolution


def cancel_booking(
    booking_id: str,
    *,
    reason: str | None = None,
    services: BookingServices | None = None,
) -> CancellationResult:
    active = services or build_services()
    if reason is None:
        return active.engine.cancel(booking_id)
    return active.engine.cancel(booking_id, reason=reason)


def list_all_bookings(
    *,
    status: BookingStatus | None = None,
    services: BookingServices | None = None,
) -> BookingListing:
    active = services or build_services()
    return list_bookings(mirror=active.mirror, primary=active.primary, status=status)


def investigate_booking(
    booking_id: str,
    *,
    services: BookingServices | None = None,
) -> DiagnosticReport:
    active = services or build_services()
    return active.diagnostics.investigate(booking_id)


def repair_booking(booking_id: str, *, services: BookingServices | None = None) -> Booking:
    active = services or build_services()
    return active.diagnostics.repair(booking_id)


def diagnostic_cancel(
    booking_id: str,
    *,
    services: BookingServices | None = None,
) -> CancellationResult:
    active = services or build_services()
    return active.diagnostics.cancel(booking_id)


def clear_mirror(*, confirm: bool, services: BookingServices | None = None) -> int:
    active = services or build_services()
    return active.diagnostics.clear(confirm=confirm)


def export_snapshot(*, services: BookingServices | None = None) -> dict[str, object]:
    active = services or build_services()
    return active.diagnostics.export()


def storage_status(*, services: BookingServices | None = None) -> StorageStatus:
    active = services or build_services()
    return active.diagnostics.storage_status()


def related_booking_ids(*, services: BookingServices | None = None) -> list[str]:
    active = services or build_services()
    return active.diagnostics.related_booking_ids()


def create_test_booking(*, services: BookingServices | None = None) -> Booking:
    active = services or build_services()
    return active.diagnostics.create_test_booking()


def _payment_documents(payload: object) -> list[dict[str, Any]]:
    # Accepts a bare list, a payment-history response, or an exported snapshot.
    if isinstance(payload, dict):
        mapping = cast(dict[str, object], payload)
        payload = mapping.get("payments", mapping.get("localPayments"))
    if not isinstance(payload, list):
        msg = "Expected a list of payments, {payments: [...]} or {localPayments: [...]}"
        raise ValueError(msg)
    documents = cast(list[object], payload)
    if not all(isinstance(item, dict) for item in documents):
        raise ValueError("Every payment entry must be a JSON object")
    return cast(list[dict[str, Any]], documents)


def import_payments(path: Path, *, services: BookingServices | None = None) -> int:
    """Load payment history from a JSON file into the local Ledger.

    Every entry is validated before anything is written.
    """

    payload = json.loads(path.read_text(encoding="utf-8"))
    payments: list[Payment] = [
        payment_from_document(document) for document in _payment_documents(payload)
    ]
    active = services or build_services(offline=True)
    added = active.local_ledger.import_payments(payments)
    log.info("Imported %s of %s payment(s) from %s", added, len(payments), path)
    return added
