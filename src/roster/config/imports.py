"""User import defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_int_env

DEFAULT_IMPORT_PAGE_SIZE = 100
DEFAULT_LOCK_LEASE_SECONDS = 3600


@dataclass(frozen=True, slots=True)
class ImportConfig:
    page_size: int = DEFAULT_IMPORT_PAGE_SIZE
    lock_lease_seconds: int = DEFAULT_LOCK_LEASE_SECONDS


def get_import_config() -> ImportConfig:
    return ImportConfig(
        page_size=positive_int_env("ROSTER_IMPORT_PAGE_SIZE", DEFAULT_IMPORT_PAGE_SIZE),
        lock_lease_seconds=positive_int_env(
            "ROSTER_LOCK_LEASE_SECONDS", DEFAULT_LOCK_LEASE_SECONDS
        ),
    )
