"""Cancellation policy configuration values."""

from __future__ import annotations

from datetime import UTC, timedelta, tzinfo
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bookfix.domain.cancellation import (
    DEFAULT_LOCAL_REFUND_RATE,
    DEFAULT_MINIMUM_NOTICE,
    CancellationPolicy,
)

from .env import optional_env_var, optional_float_env_var
from .errors import ConfigurationError


def _minimum_notice() -> timedelta:
    hours = optional_float_env_var("BOOKFIX_CANCELLATION_NOTICE_HOURS")
    if hours is None:
        return DEFAULT_MINIMUM_NOTICE
    if hours < 0:
        raise ConfigurationError("BOOKFIX_CANCELLATION_NOTICE_HOURS must not be negative")
    return timedelta(hours=hours)


def _local_refund_rate() -> Decimal:
    value = optional_env_var("BOOKFIX_LOCAL_REFUND_RATE")
    if value is None:
        return DEFAULT_LOCAL_REFUND_RATE
    try:
        rate = Decimal(value)
    except InvalidOperation as exc:
        msg = f"BOOKFIX_LOCAL_REFUND_RATE must be a number, got {value!r}"
        raise ConfigurationError(msg) from exc
    if not Decimal(0) <= rate <= Decimal(1):
        raise ConfigurationError("BOOKFIX_LOCAL_REFUND_RATE must be between 0 and 1")
    return rate


def _departure_timezone() -> tzinfo:
    name = optional_env_var("BOOKFIX_DEPARTURE_TIMEZONE")
    if name is None:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown BOOKFIX_DEPARTURE_TIMEZONE: {name!r}") from exc


def get_cancellation_policy() -> CancellationPolicy:
    return CancellationPolicy(
        minimum_notice=_minimum_notice(),
        local_refund_rate=_local_refund_rate(),
        departure_timezone=_departure_timezone(),
    )
