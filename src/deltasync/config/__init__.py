"""Application configuration helpers."""

from __future__ import annotations

from .env import load_environment, optional_int_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .source import SourceConfig, get_source_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SourceConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_source_config",
    "get_storage_config",
    "get_sync_config",
    "load_environment",
    "optional_int_env",
    "require_env_var",
    "require_env_vars",
]
