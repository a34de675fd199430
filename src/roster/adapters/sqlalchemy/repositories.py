"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, func, select

from roster.adapters.sqlalchemy.mappings import imported_user_table, tenant_table, user_table
from roster.domain.model import ImportedUser, Tenant, User, UserAttribute

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session

    from roster.domain.model import ImportStatus, UserRole, UserStatus


class TenantMismatchError(ValueError):
    """Raised when an entity is written through another tenant's scope."""


def _check_tenant(tenant_id: str, entity: ImportedUser | User) -> None:
    if entity.tenant_id != tenant_id:
        raise TenantMismatchError(
            f"{type(entity).__name__} {entity.id} belongs to tenant {entity.tenant_id}, "
            f"not {tenant_id}"
        )


class SqlAlchemyStagingRepository:
    """Staged import rows, read in insertion order."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ImportedUser) -> None:
        self.session.add(entity)

    def count(self, tenant_id: str, status: ImportStatus) -> int:
        stmt = (
            select(func.count())
            .select_from(imported_user_table)
            .where(imported_user_table.c.tenant_id == tenant_id)
            .where(imported_user_table.c.status == status)
        )
        return self.session.execute(stmt).scalar_one()

    def page(
        self,
        tenant_id: str,
        status: ImportStatus,
        limit: int,
        offset: int = 0,
    ) -> list[ImportedUser]:
        stmt = (
            select(ImportedUser)
            .where(imported_user_table.c.tenant_id == tenant_id)
            .where(imported_user_table.c.status == status)
            .order_by(imported_user_table.c.imported_on, imported_user_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())

    def upsert_with_error(self, tenant_id: str, record: ImportedUser) -> None:
        _check_tenant(tenant_id, record)
        self.session.merge(record)

    def delete(self, tenant_id: str, record_id: uuid.UUID) -> None:
        stmt = (
            delete(imported_user_table)
            .where(imported_user_table.c.tenant_id == tenant_id)
            .where(imported_user_table.c.id == record_id)
        )
        self.session.execute(stmt)


class SqlAlchemyUserRepository:
    """Canonical users keyed by (tenant, email)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, tenant_id: str, email: str) -> User | None:
        stmt = (
            select(User)
            .where(user_table.c.tenant_id == tenant_id)
            .where(user_table.c.email == email)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, tenant_id: str, user: User) -> uuid.UUID:
        _check_tenant(tenant_id, user)
        self.session.add(user)
        self.session.flush()
        return user.id

    def update(self, tenant_id: str, user: User) -> None:
        _check_tenant(tenant_id, user)
        self.session.merge(user)

    def set_sub_attribute(
        self,
        tenant_id: str,
        user_id: uuid.UUID,
        attribute: UserAttribute,
        value: UserRole | UserStatus,
    ) -> None:
        user = self.session.get(User, user_id)
        if user is None or user.tenant_id != tenant_id:
            raise LookupError(f"User {user_id} not found in tenant {tenant_id}")
        match attribute:
            case UserAttribute.ROLE:
                user.role = cast("UserRole", value)
            case UserAttribute.STATUS:
                user.status = cast("UserStatus", value)
        self.session.flush()


class SqlAlchemyTenantRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Tenant) -> None:
        self.session.add(entity)

    def get(self, tenant_id: str) -> Tenant | None:
        return self.session.get(Tenant, tenant_id)

    def list_ids(self) -> list[str]:
        stmt = select(tenant_table.c.id).order_by(tenant_table.c.id)
        return list(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from roster.domain.ports.persistence import (
        StagingRepository,
        TenantRepository,
        UserRepository,
    )

    _session_stub = cast("Session", object())
    _staging_check: StagingRepository = SqlAlchemyStagingRepository(_session_stub)
    _user_check: UserRepository = SqlAlchemyUserRepository(_session_stub)
    _tenant_check: TenantRepository = SqlAlchemyTenantRepository(_session_stub)
