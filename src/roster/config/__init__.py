"""Application configuration helpers."""

from __future__ import annotations

from .env import positive_int_env
from .errors import ConfigurationError
from .imports import ImportConfig, get_import_config
from .logging import configure_logging
from .scheduler import SchedulerConfig, get_scheduler_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "SchedulerConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_import_config",
    "get_scheduler_config",
    "get_storage_config",
    "positive_int_env",
]
