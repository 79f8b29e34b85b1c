from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from bookfix.domain.cancellation import CancellationPath, CancellationResult
from bookfix.domain.errors import BookingNotFoundError, ConfirmationRequiredError
from bookfix.domain.model import BookingStatus, RefundStatus, Resolution, ResolutionSource
from bookfix.domain.reconciliation import BookingListing
from bookfix.ui import cli as cli_module
from tests.support.bookings import make_booking

if TYPE_CHECKING:
    from pathlib import Path


def test_resolve_prints_booking(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    booking = make_booking("BK1", internal_id="int-1")
    monkeypatch.setattr(
        cli_module,
        "resolve_booking",
        lambda booking_id: Resolution.hit(booking, ResolutionSource.MIRROR),  # noqa: ARG005
    )

    cli_module.main(["resolve", "BK1"])

    output = json.loads(capsys.readouterr().out)
    assert output["found"] is True
    assert output["source"] == "mirror"
    assert output["booking"]["_id"] == "int-1"


def test_cancel_forwards_reason(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_cancel(booking_id: str, *, reason: str | None = None) -> CancellationResult:
        captured.update(booking_id=booking_id, reason=reason)
        return CancellationResult(
            booking_id=booking_id,
            path=CancellationPath.LOCAL,
            refund_amount=800,
            refund_status=RefundStatus.PENDING,
        )

    monkeypatch.setattr(cli_module, "cancel_booking", fake_cancel)

    cli_module.main(["cancel", "BK1", "--reason", "Changed plans"])

    assert captured == {"booking_id": "BK1", "reason": "Changed plans"}
    output = json.loads(capsys.readouterr().out)
    assert output["path"] == "local"
    assert output["refundAmount"] == 800
    assert output["refundStatus"] == "pending"
    assert output["booking"] is None


def test_list_passes_status_filter(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_list(*, status: BookingStatus | None = None) -> BookingListing:
        captured["status"] = status
        return BookingListing(bookings=[make_booking("BK2")], source=ResolutionSource.PRIMARY)

    monkeypatch.setattr(cli_module, "list_all_bookings", fake_list)

    cli_module.main(["list", "--status", "confirmed"])

    assert captured["status"] is BookingStatus.CONFIRMED
    output = json.loads(capsys.readouterr().out)
    assert [item["bookingId"] for item in output["bookings"]] == ["BK2"]


def test_list_rejects_unknown_status() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["list", "--status", "lost"])

    assert excinfo.value.code == 2


def test_not_found_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_resolve(booking_id: str) -> Resolution:
        raise BookingNotFoundError(booking_id)

    monkeypatch.setattr(cli_module, "resolve_booking", fake_resolve)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["resolve", "BK404"])

    assert excinfo.value.code == 1


def test_validation_error_exits_with_usage_code(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    def fake_import(path: Path) -> int:
        raise ValueError(f"Expected a list of payments in {path}")

    monkeypatch.setattr(cli_module, "import_payments", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import-payments", str(tmp_path / "payments.json")])

    assert excinfo.value.code == 2


def test_clear_requires_confirmation(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_clear(*, confirm: bool) -> int:
        if not confirm:
            raise ConfirmationRequiredError("confirmation required")
        return 3

    monkeypatch.setattr(cli_module, "clear_mirror", fake_clear)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["diagnose", "clear"])
    assert excinfo.value.code == 1

    cli_module.main(["diagnose", "clear", "--yes"])


def test_export_writes_output_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    snapshot = {"localBookings": [], "localPayments": [], "timestamp": "2025-06-01T12:00:00+00:00"}
    monkeypatch.setattr(cli_module, "export_snapshot", lambda: snapshot)
    destination = tmp_path / "snapshot.json"

    cli_module.main(["diagnose", "export", "--output", str(destination)])

    assert json.loads(destination.read_text(encoding="utf-8")) == snapshot
