"""Application configuration helpers."""

from __future__ import annotations

from .aviationstack import AviationStackConfig, get_aviationstack_config
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .ledger import LedgerConfig, get_ledger_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "AviationStackConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LedgerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_aviationstack_config",
    "get_database_config",
    "get_ledger_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
