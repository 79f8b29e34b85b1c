"""Primary booking service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import (
    NO_RETRIES,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ShouldCacheHook,
)

PAYMENT_HISTORY_CACHE_TTL_SECONDS = 30.0


@dataclass(frozen=True)
class PrimaryConfig:
    """Holds the Primary booking service connection values."""

    base_url: str
    bookings: ResilienceConfig
    payment_history: ResilienceConfig
    token: str | None = None


def _default_headers(token: str | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _rate_limit() -> RateLimit | None:
    max_calls = optional_float_env_var("BOOKFIX_API_MAX_CALLS_PER_SECOND")
    if max_calls is None:
        return None
    if max_calls < 1:
        raise ConfigurationError("BOOKFIX_API_MAX_CALLS_PER_SECOND must be at least 1")
    return RateLimit(max_calls=int(max_calls), per_seconds=1.0)


def build_primary_config(
    base_url: str,
    *,
    token: str | None = None,
    timeout_seconds: float | None = None,
    ratelimit: RateLimit | None = None,
    history_cache_predicate: ShouldCacheHook | None = None,
) -> PrimaryConfig:
    normalized_url = base_url.rstrip("/") + "/"
    headers = _default_headers(token)
    # Each booking call is attempted once; failures fall through to local sources.
    bookings = ResilienceConfig(
        name="primary-bookings",
        base_url=normalized_url,
        timeout_seconds=timeout_seconds,
        retry=NO_RETRIES,
        ratelimit=ratelimit,
        cache=None,
        default_headers=headers,
    )
    payment_history = ResilienceConfig(
        name="primary-payments",
        base_url=normalized_url,
        timeout_seconds=timeout_seconds,
        retry=NO_RETRIES,
        ratelimit=ratelimit,
        cache=CacheConfig(
            backend="sqlite",
            default_ttl_seconds=PAYMENT_HISTORY_CACHE_TTL_SECONDS,
            should_cache=history_cache_predicate,
        ),
        default_headers=headers,
    )
    return PrimaryConfig(
        base_url=normalized_url,
        bookings=bookings,
        payment_history=payment_history,
        token=token,
    )


def get_primary_config(*, history_cache_predicate: ShouldCacheHook | None = None) -> PrimaryConfig:
    values = require_env_vars(("BOOKFIX_API_URL",))
    return build_primary_config(
        values["BOOKFIX_API_URL"],
        token=optional_env_var("BOOKFIX_API_TOKEN"),
        timeout_seconds=optional_float_env_var("BOOKFIX_API_TIMEOUT_SECONDS"),
        ratelimit=_rate_limit(),
        history_cache_predicate=history_cache_predicate,
    )
