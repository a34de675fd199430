"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from roster.domain.model import ImportedUser, ImportStatus, Tenant, User, UserAttribute

if TYPE_CHECKING:
    from uuid import UUID

    from roster.domain.model import UserRole, UserStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class StagingRepository(Repository[ImportedUser], Protocol):
    """Persistence contract for staged import rows."""

    def count(self, tenant_id: str, status: ImportStatus) -> int: ...

    def page(
        self,
        tenant_id: str,
        status: ImportStatus,
        limit: int,
        offset: int = 0,
    ) -> list[ImportedUser]:
        """Return up to ``limit`` rows in stable insertion order."""
        ...

    def upsert_with_error(self, tenant_id: str, record: ImportedUser) -> None: ...

    def delete(self, tenant_id: str, record_id: UUID) -> None: ...


@runtime_checkable
class UserRepository(Protocol):
    """Persistence contract for canonical users."""

    def find_by_email(self, tenant_id: str, email: str) -> User | None: ...

    def create(self, tenant_id: str, user: User) -> UUID: ...

    def update(self, tenant_id: str, user: User) -> None: ...

    def set_sub_attribute(
        self,
        tenant_id: str,
        user_id: UUID,
        attribute: UserAttribute,
        value: UserRole | UserStatus,
    ) -> None: ...


@runtime_checkable
class TenantRepository(Repository[Tenant], Protocol):
    """Persistence contract for tenants."""

    def get(self, tenant_id: str) -> Tenant | None: ...

    def list_ids(self) -> list[str]: ...
