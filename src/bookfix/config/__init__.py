"""Application configuration helpers."""

from __future__ import annotations

from .cancellation import get_cancellation_policy
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .primary import PrimaryConfig, build_primary_config, get_primary_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PrimaryConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "build_primary_config",
    "configure_logging",
    "get_cancellation_policy",
    "get_database_config",
    "get_primary_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
