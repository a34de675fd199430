"""Domain port definitions for adapters."""

from __future__ import annotations

from .locking import LockCoordinator
from .persistence import Repository, StagingRepository, TenantRepository, UserRepository
from .reporting import ReportTemplates, ResultReporter
from .unit_of_work import (
    ImportRepositories,
    ImportUnitOfWork,
    RepositoryCollection,
    TenantRepositories,
    TenantUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ImportRepositories",
    "ImportUnitOfWork",
    "LockCoordinator",
    "ReportTemplates",
    "Repository",
    "RepositoryCollection",
    "ResultReporter",
    "StagingRepository",
    "TenantRepositories",
    "TenantRepository",
    "TenantUnitOfWork",
    "UnitOfWork",
    "UserRepository",
]
