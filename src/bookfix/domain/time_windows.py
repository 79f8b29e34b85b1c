"""Utilities for reasoning about the time left before a departure."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta, tzinfo
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date

DEPARTURE_TIME_PATTERN = r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$"
_DEPARTURE_TIME_RE = re.compile(DEPARTURE_TIME_PATTERN)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Clock values must include timezone information")
    return value.astimezone(UTC)


def parse_departure_time(value: str) -> time:
    """Parse an ``HH:MM`` (or ``HH:MM:SS``) departure time."""

    match = _DEPARTURE_TIME_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid departure time: {value!r}")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


@dataclass(frozen=True)
class DepartureWindow:
    """Departure instant of a booking, anchored in the operator's timezone."""

    departure: datetime

    @classmethod
    def for_itinerary(
        cls,
        travel_date: date,
        departure_time: str,
        *,
        timezone: tzinfo = UTC,
    ) -> DepartureWindow:
        local = datetime.combine(travel_date, parse_departure_time(departure_time), timezone)
        return cls(departure=local.astimezone(UTC))

    def time_remaining(self, *, clock: Clock = utcnow) -> timedelta:
        return self.departure - _ensure_aware(clock())

    def hours_remaining(self, *, clock: Clock = utcnow) -> float:
        return self.time_remaining(clock=clock) / timedelta(hours=1)

    def allows(self, minimum_notice: timedelta, *, clock: Clock = utcnow) -> bool:
        """Return whether at least ``minimum_notice`` is left before departure."""

        return self.time_remaining(clock=clock) >= minimum_notice


__all__ = ["DEPARTURE_TIME_PATTERN", "Clock", "DepartureWindow", "parse_departure_time", "utcnow"]
