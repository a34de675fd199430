"""Canonical users and the staged rows that feed them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from roster.domain.model.entity import TenantScopedEntity
from roster.domain.model.enums import ImportStatus, UserStatus

if TYPE_CHECKING:
    from datetime import datetime

    from roster.domain.model.enums import UserRole

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
UNKNOWN_ERROR: Final[str] = "Unknown error"


@dataclass(eq=False, kw_only=True)
class ImportedUser(TenantScopedEntity):
    """A candidate row waiting in staging to be merged into ``User``.

    Rows are deleted once merged. A row left behind is either still READY
    or ERROR with a non-empty ``error_description``; ERROR rows are not
    picked up again until someone corrects them and resets the status.
    """

    email: str
    name: str
    first_name: str | None = None
    status: ImportStatus = ImportStatus.READY
    error_description: str | None = None
    imported_by: str | None = None
    imported_on: datetime | None = None

    def mark_error(self, message: str) -> None:
        self.status = ImportStatus.ERROR
        self.error_description = message.strip() or UNKNOWN_ERROR

    def validation_error(self) -> str | None:
        """Return why the row cannot be imported as-is, or ``None``."""

        if not self.email or EMAIL_PATTERN.match(self.email) is None:
            return f"Invalid email '{self.email}'"
        if not self.name or not self.name.strip():
            return "User name is required"
        return None


@dataclass(eq=False, kw_only=True)
class User(TenantScopedEntity):
    """Authoritative user record, unique per tenant by ``email``.

    ``role`` and ``status`` are written separately from the row itself, so a
    user whose creation was interrupted can exist with either still unset.
    """

    email: str
    name: str
    first_name: str | None = None
    locale: str | None = None
    issuer: bool = True
    deleted: bool = False
    role: UserRole | None = None
    status: UserStatus | None = None
    notifications_active: bool = True
    created_by: str | None = None
    created_on: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_import(cls, candidate: ImportedUser) -> User:
        """Build a new local user from a staged row; sub-attributes stay unset."""

        return cls(
            tenant_id=candidate.tenant_id,
            email=candidate.email,
            name=candidate.name,
            first_name=candidate.first_name,
            locale=None,  # falls back to the browser locale
            issuer=True,
            deleted=False,
            notifications_active=True,
            created_by=candidate.imported_by,
            created_on=candidate.imported_on,
        )

    @property
    def is_incomplete(self) -> bool:
        return self.role is None or self.status is None

    def import_blocker(self) -> str | None:
        """Return why an import may not touch this user, or ``None``."""

        if not self.issuer:
            return "User is not local to the organization"
        if self.deleted:
            return "User is deleted"
        if self.status is not None and self.status != UserStatus.PENDING:
            return "User account is no longer pending"
        return None

    def apply_import(self, candidate: ImportedUser, *, now: datetime) -> None:
        self.name = candidate.name
        self.first_name = candidate.first_name
        self.updated_at = now
