"""Public domain model surface."""

from __future__ import annotations

from roster.domain.model.entity import Entity, TenantScopedEntity
from roster.domain.model.enums import (
    ImportOutcome,
    ImportStatus,
    LockPurpose,
    UserAttribute,
    UserRole,
    UserStatus,
)
from roster.domain.model.locking import TenantLock
from roster.domain.model.result import ImportResult
from roster.domain.model.tenant import Tenant
from roster.domain.model.user import ImportedUser, User

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "TenantScopedEntity",
    "Tenant",
    # users
    "ImportedUser",
    "User",
    # locking
    "TenantLock",
    # results
    "ImportResult",
    # enums
    "ImportOutcome",
    "ImportStatus",
    "LockPurpose",
    "UserAttribute",
    "UserRole",
    "UserStatus",
]
