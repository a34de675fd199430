"""SQLAlchemy adapter package for Roster."""

from __future__ import annotations

from .locking import SqlAlchemyLockCoordinator
from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyStagingRepository,
    SqlAlchemyTenantRepository,
    SqlAlchemyUserRepository,
    TenantMismatchError,
)

__all__ = [
    "SqlAlchemyLockCoordinator",
    "SqlAlchemyStagingRepository",
    "SqlAlchemyTenantRepository",
    "SqlAlchemyUserRepository",
    "TenantMismatchError",
    "mapper_registry",
    "start_mappers",
]
