"""Reusable fakes and builders for user-import tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal
from uuid import UUID

from roster.domain.model import (
    ImportedUser,
    ImportStatus,
    TenantLock,
    User,
    UserAttribute,
    UserRole,
    UserStatus,
)
from roster.domain.ports import ImportRepositories, ReportTemplates

if TYPE_CHECKING:
    from types import TracebackType

    from roster.domain.model import ImportResult, LockPurpose

TENANT = "acme"
BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

type FaultPredicate = Callable[[object], bool]


def make_candidate(
    email: str = "a@x.com",
    *,
    tenant_id: str = TENANT,
    name: str = "Doe",
    first_name: str | None = "Alex",
    position: int = 0,
    status: ImportStatus = ImportStatus.READY,
) -> ImportedUser:
    return ImportedUser(
        tenant_id=tenant_id,
        email=email,
        name=name,
        first_name=first_name,
        status=status,
        imported_by="admin-1",
        imported_on=BASE_TIME + timedelta(seconds=position),
    )


def make_user(
    email: str = "a@x.com",
    *,
    tenant_id: str = TENANT,
    issuer: bool = True,
    deleted: bool = False,
    role: UserRole | None = UserRole.BASIC,
    status: UserStatus | None = UserStatus.PENDING,
) -> User:
    return User(
        tenant_id=tenant_id,
        email=email,
        name="Original",
        first_name="Orig",
        issuer=issuer,
        deleted=deleted,
        role=role,
        status=status,
    )


@dataclass(slots=True)
class _Fault:
    operation: str
    error: Exception
    when: FaultPredicate | None


@dataclass
class InMemoryImportStore:
    """Shared state behind the fake repositories, with write log and fault injection."""

    staged: dict[UUID, ImportedUser] = field(default_factory=dict[UUID, ImportedUser])
    users: dict[UUID, User] = field(default_factory=dict[UUID, User])
    writes: list[tuple[str, object]] = field(default_factory=list[tuple[str, object]])
    page_requests: list[tuple[int, int]] = field(default_factory=list[tuple[int, int]])
    commits: int = 0
    rollbacks: int = 0
    _faults: list[_Fault] = field(default_factory=list[_Fault])

    def stage(self, *candidates: ImportedUser) -> None:
        for candidate in candidates:
            self.staged[candidate.id] = candidate

    def add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def fail(
        self,
        operation: str,
        error: Exception,
        *,
        when: FaultPredicate | None = None,
    ) -> None:
        self._faults.append(_Fault(operation, error, when))

    def clear_faults(self) -> None:
        self._faults.clear()

    def check(self, operation: str, subject: object) -> None:
        for fault in self._faults:
            if fault.operation != operation:
                continue
            if fault.when is None or fault.when(subject):
                raise fault.error

    def user_by_email(self, email: str) -> User | None:
        return next((user for user in self.users.values() if user.email == email), None)

    def staged_by_email(self, email: str) -> ImportedUser | None:
        return next((row for row in self.staged.values() if row.email == email), None)

    def record(self, operation: str, subject: object) -> None:
        self.writes.append((operation, subject))


class FakeStagingRepository:
    def __init__(self, store: InMemoryImportStore) -> None:
        self.store = store

    def add(self, entity: ImportedUser) -> None:
        self.store.check("staging.add", entity)
        self.store.record("staging.add", entity.id)
        self.store.staged[entity.id] = replace(entity)

    def count(self, tenant_id: str, status: ImportStatus) -> int:
        self.store.check("staging.count", tenant_id)
        return len(self._matching(tenant_id, status))

    def page(
        self,
        tenant_id: str,
        status: ImportStatus,
        limit: int,
        offset: int = 0,
    ) -> list[ImportedUser]:
        self.store.check("staging.page", tenant_id)
        self.store.page_requests.append((limit, offset))
        rows = self._matching(tenant_id, status)[offset : offset + limit]
        return [replace(row) for row in rows]

    def upsert_with_error(self, tenant_id: str, record: ImportedUser) -> None:
        self.store.check("staging.upsert_with_error", record)
        self.store.record("staging.upsert_with_error", record.id)
        self.store.staged[record.id] = replace(record)

    def delete(self, tenant_id: str, record_id: UUID) -> None:
        self.store.check("staging.delete", record_id)
        self.store.record("staging.delete", record_id)
        self.store.staged.pop(record_id, None)

    def _matching(self, tenant_id: str, status: ImportStatus) -> list[ImportedUser]:
        rows = [
            row
            for row in self.store.staged.values()
            if row.tenant_id == tenant_id and row.status == status
        ]
        return sorted(rows, key=lambda row: (row.imported_on or BASE_TIME, str(row.id)))


class FakeUserRepository:
    def __init__(self, store: InMemoryImportStore) -> None:
        self.store = store

    def find_by_email(self, tenant_id: str, email: str) -> User | None:
        self.store.check("users.find_by_email", email)
        user = self.store.user_by_email(email)
        if user is None or user.tenant_id != tenant_id:
            return None
        return replace(user)

    def create(self, tenant_id: str, user: User) -> UUID:
        self.store.check("users.create", user)
        self.store.record("users.create", user.id)
        self.store.users[user.id] = replace(user)
        return user.id

    def update(self, tenant_id: str, user: User) -> None:
        self.store.check("users.update", user)
        self.store.record("users.update", user.id)
        self.store.users[user.id] = replace(user)

    def set_sub_attribute(
        self,
        tenant_id: str,
        user_id: UUID,
        attribute: UserAttribute,
        value: UserRole | UserStatus,
    ) -> None:
        self.store.check(f"users.set_{attribute.value}", user_id)
        self.store.record(f"users.set_{attribute.value}", user_id)
        user = self.store.users[user_id]
        if attribute is UserAttribute.ROLE:
            user.role = UserRole(value)
        else:
            user.status = UserStatus(value)


class FakeImportUnitOfWork:
    def __init__(self, store: InMemoryImportStore) -> None:
        self.store = store
        self.repositories = ImportRepositories(
            staging=FakeStagingRepository(store),
            users=FakeUserRepository(store),
        )

    def __enter__(self) -> FakeImportUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.store.commits += 1

    def rollback(self) -> None:
        self.store.rollbacks += 1


class FakeLockCoordinator:
    """In-process stand-in for the database lock, keyed by (tenant, purpose)."""

    def __init__(self) -> None:
        self.held: dict[tuple[str, str], TenantLock] = {}
        self.acquired: list[TenantLock] = []
        self.released: list[TenantLock] = []

    def hold_elsewhere(self, tenant_id: str, purpose: LockPurpose) -> TenantLock:
        lock = self._new_lock(tenant_id, purpose, owner="other-host:1")
        self.held[(tenant_id, purpose.value)] = lock
        return lock

    def acquire(self, tenant_id: str, purpose: LockPurpose) -> TenantLock | None:
        key = (tenant_id, purpose.value)
        if key in self.held:
            return None
        lock = self._new_lock(tenant_id, purpose, owner="test-host:1")
        self.held[key] = lock
        self.acquired.append(lock)
        return lock

    def release(self, lock: TenantLock) -> None:
        self.released.append(lock)
        key = (lock.tenant_id, lock.purpose.value)
        current = self.held.get(key)
        if current is not None and current.id == lock.id:
            del self.held[key]

    @staticmethod
    def _new_lock(tenant_id: str, purpose: LockPurpose, *, owner: str) -> TenantLock:
        return TenantLock(
            tenant_id=tenant_id,
            purpose=purpose,
            owner=owner,
            acquired_at=BASE_TIME,
            expires_at=BASE_TIME + timedelta(hours=1),
        )


@dataclass
class RecordingReporter:
    reports: list[tuple[str, ImportResult, ReportTemplates]] = field(default_factory=list)
    faults: list[tuple[str, BaseException]] = field(default_factory=list)
    error: Exception | None = None

    def report(self, tenant_id: str, result: ImportResult, templates: ReportTemplates) -> None:
        if self.error is not None:
            raise self.error
        self.reports.append((tenant_id, result, templates))

    def report_fault(self, tenant_id: str, error: BaseException) -> None:
        self.faults.append((tenant_id, error))

    @property
    def last_result(self) -> ImportResult:
        return self.reports[-1][1]
