# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bookfix.adapters.documents import dump_booking
from bookfix.app import (
    cancel_booking,
    clear_mirror,
    create_test_booking,
    diagnostic_cancel,
    export_snapshot,
    import_payments,
    investigate_booking,
    list_all_bookings,
    related_booking_ids,
    repair_booking,
    resolve_booking,
    storage_status,
)
from bookfix.config import ConfigurationError, configure_logging
from bookfix.domain.errors import BookfixError
from bookfix.domain.model import BookingStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from bookfix.domain.cancellation import CancellationResult
    from bookfix.domain.diagnostics import DiagnosticReport

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve, repair and cancel bookings")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve a booking by id")
    resolve.add_argument("booking_id", help="Public booking id (BK...) or internal id")

    cancel = subparsers.add_parser("cancel", help="Cancel a confirmed booking")
    cancel.add_argument("booking_id")
    cancel.add_argument("--reason", type=str, help="Cancellation reason sent to the API")

    listing = subparsers.add_parser("list", help="List bookings, newest first")
    listing.add_argument(
        "--status",
        type=str,
        choices=[status.value for status in BookingStatus],
        help="Only show bookings with this status",
    )

    payments = subparsers.add_parser(
        "import-payments",
        help="Load payment history from a JSON file into the local ledger",
    )
    payments.add_argument("path", type=Path, help="JSON list, {payments} or an export file")

    diagnose = subparsers.add_parser("diagnose", help="Operator diagnostics")
    diagnose_sub = diagnose.add_subparsers(dest="diagnose_command", required=True)
    investigate = diagnose_sub.add_parser("investigate", help="Inspect one booking id")
    investigate.add_argument("booking_id")
    repair = diagnose_sub.add_parser("repair", help="Rebuild a booking from its payment")
    repair.add_argument("booking_id")
    diagnose_cancel = diagnose_sub.add_parser("cancel", help="Cancel as an operator")
    diagnose_cancel.add_argument("booking_id")
    clear = diagnose_sub.add_parser("clear", help="Drop every local booking")
    clear.add_argument("--yes", action="store_true", help="Confirm the destructive action")
    export = diagnose_sub.add_parser("export", help="Write a JSON snapshot of local data")
    export.add_argument("--output", type=Path, help="Destination file (defaults to stdout)")
    diagnose_sub.add_parser("status", help="Count local bookings and payments")
    diagnose_sub.add_parser("related", help="List booking ids referenced by payments")
    diagnose_sub.add_parser("create-test-booking", help="Seed a confirmed test booking")

    return parser.parse_args(list(argv))


def _print_json(document: object) -> None:
    print(json.dumps(document, indent=2, ensure_ascii=False))


def _cancellation_document(result: CancellationResult) -> dict[str, object]:
    return {
        "bookingId": result.booking_id,
        "path": str(result.path),
        "refundAmount": result.refund_amount,
        "refundStatus": str(result.refund_status) if result.refund_status else None,
        "booking": dump_booking(result.booking) if result.booking else None,
    }


def _report_document(report: DiagnosticReport) -> dict[str, object]:
    return {
        "bookingId": report.booking_id,
        "foundInBookings": report.found_in_bookings,
        "foundInPayments": report.found_in_payments,
        "validFormat": report.valid_format,
        "similarIds": report.similar_ids,
        "booking": dump_booking(report.booking) if report.booking else None,
        "paymentId": report.payment.id if report.payment else None,
    }


def _run_diagnose(args: argparse.Namespace) -> None:
    command = args.diagnose_command
    if command == "investigate":
        _print_json(_report_document(investigate_booking(args.booking_id)))
    elif command == "repair":
        _print_json(dump_booking(repair_booking(args.booking_id)))
    elif command == "cancel":
        _print_json(_cancellation_document(diagnostic_cancel(args.booking_id)))
    elif command == "clear":
        removed = clear_mirror(confirm=args.yes)
        _print_json({"removed": removed})
    elif command == "export":
        snapshot = export_snapshot()
        if args.output is None:
            _print_json(snapshot)
        else:
            args.output.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
            log.info("Wrote diagnostics snapshot to %s", args.output)
    elif command == "status":
        status = storage_status()
        _print_json({"bookings": status.bookings, "payments": status.payments})
    elif command == "related":
        _print_json(related_booking_ids())
    elif command == "create-test-booking":
        _print_json(dump_booking(create_test_booking()))
    else:
        raise ValueError(f"Unsupported diagnose command: {command}")


def _run(args: argparse.Namespace) -> None:
    if args.command == "resolve":
        resolution = resolve_booking(args.booking_id)
        _print_json(
            {
                "found": resolution.found,
                "source": str(resolution.source),
                "booking": dump_booking(resolution.booking) if resolution.booking else None,
            }
        )
    elif args.command == "cancel":
        _print_json(_cancellation_document(cancel_booking(args.booking_id, reason=args.reason)))
    elif args.command == "list":
        status = BookingStatus(args.status) if args.status else None
        listing = list_all_bookings(status=status)
        _print_json(
            {
                "source": str(listing.source),
                "bookings": [dump_booking(booking) for booking in listing.bookings],
            }
        )
    elif args.command == "import-payments":
        _print_json({"imported": import_payments(args.path)})
    elif args.command == "diagnose":
        _run_diagnose(args)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _run(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except (BookfixError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
