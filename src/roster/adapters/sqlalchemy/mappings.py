"""SQLAlchemy mapping metadata for the Roster domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from roster.domain.model import (
    ImportedUser,
    ImportStatus,
    LockPurpose,
    Tenant,
    TenantLock,
    User,
    UserRole,
    UserStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

tenant_table = Table(
    "tenant",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("subdomain", String, nullable=True),
)

imported_user_table = Table(
    "imported_user",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "tenant_id", String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False
    ),
    Column("email", String, nullable=False),
    Column("name", String, nullable=False),
    Column("first_name", String, nullable=True),
    Column("status", Enum(ImportStatus, native_enum=False), nullable=False),
    Column("error_description", String, nullable=True),
    Column("imported_by", String, nullable=True),
    Column("imported_on", UTCDateTime(), nullable=True),
    Index("ix_imported_user_queue", "tenant_id", "status", "imported_on"),
)

user_table = Table(
    "user_account",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "tenant_id", String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False
    ),
    Column("email", String, nullable=False),
    Column("name", String, nullable=False),
    Column("first_name", String, nullable=True),
    Column("locale", String, nullable=True),
    Column("issuer", Boolean, nullable=False, default=True),
    Column("deleted", Boolean, nullable=False, default=False),
    Column("role", Enum(UserRole, native_enum=False), nullable=True),
    Column("status", Enum(UserStatus, native_enum=False), nullable=True),
    Column("notifications_active", Boolean, nullable=False, default=True),
    Column("created_by", String, nullable=True),
    Column("created_on", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    UniqueConstraint("tenant_id", "email", name="uq_user_account_email"),
)

tenant_lock_table = Table(
    "tenant_lock",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("tenant_id", String, nullable=False),
    Column("purpose", Enum(LockPurpose, native_enum=False), nullable=False),
    Column("owner", String, nullable=False),
    Column("acquired_at", UTCDateTime(), nullable=False),
    Column("expires_at", UTCDateTime(), nullable=False),
    UniqueConstraint("tenant_id", "purpose", name="uq_tenant_lock_scope"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Tenant, tenant_table)
    mapper_registry.map_imperatively(ImportedUser, imported_user_table)
    mapper_registry.map_imperatively(User, user_table)
    mapper_registry.map_imperatively(TenantLock, tenant_lock_table)

    configure_mappers()
    return mapper_registry
