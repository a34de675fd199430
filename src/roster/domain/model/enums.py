"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ImportStatus(StrEnum):
    READY = "ready"
    ERROR = "error"


class UserStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"
    LOCKED = "locked"


class UserRole(StrEnum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    BASIC = "basic"
    DEMO = "demo"


class LockPurpose(StrEnum):
    """Scope of a tenant lock; one pass per (tenant, purpose) at a time."""

    IMPORT_USERS = "import"


class ImportOutcome(StrEnum):
    """Shape of a finished pass, used to pick the operator message."""

    SUCCESS = "success"
    ERROR = "error"
    MIXED = "mixed"
    NOTHING = "nothing"


class UserAttribute(StrEnum):
    """User fields the canonical store writes separately from the user row."""

    ROLE = "role"
    STATUS = "status"
