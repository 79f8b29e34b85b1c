from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from bookfix.adapters.memory import InMemoryBookingMirror, InMemoryPaymentLedger
from bookfix.adapters.sqlalchemy import (
    SqlAlchemyDocumentStore,
    session_factory,
    shutdown,
    startup,
)
from tests.support.bookings import FixedClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

_BOOKFIX_ENV = (
    "BOOKFIX_API_URL",
    "BOOKFIX_API_TOKEN",
    "BOOKFIX_API_TIMEOUT_SECONDS",
    "BOOKFIX_API_MAX_CALLS_PER_SECOND",
    "BOOKFIX_CANCELLATION_NOTICE_HOURS",
    "BOOKFIX_LOCAL_REFUND_RATE",
    "BOOKFIX_DEPARTURE_TIMEZONE",
    "BOOKFIX_OPERATOR",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _BOOKFIX_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BOOKFIX_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def mirror() -> InMemoryBookingMirror:
    return InMemoryBookingMirror()


@pytest.fixture
def ledger() -> InMemoryPaymentLedger:
    return InMemoryPaymentLedger()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def document_store(sqlite_engine: Engine, clock: FixedClock) -> Iterator[SqlAlchemyDocumentStore]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyDocumentStore(session_factory(), clock=clock)
    finally:
        shutdown()
