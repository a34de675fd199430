from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from roster.adapters.sqlalchemy import SqlAlchemyLockCoordinator
from roster.adapters.sqlalchemy.mappings import tenant_lock_table
from roster.domain.model import ImportStatus, LockPurpose, UserRole, UserStatus
from roster.domain.user_import import UserImportEngine
from tests.helpers.imports import BASE_TIME, TENANT, RecordingReporter, make_candidate, make_user

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from roster.adapters.sqlalchemy.unit_of_work import SqlAlchemyImportUnitOfWork
    from roster.domain.model import ImportedUser, User

type UnitOfWorkFactory = Callable[[], SqlAlchemyImportUnitOfWork]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def engine(
    sqlite_engine: Engine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> UserImportEngine:
    return UserImportEngine(
        locks=SqlAlchemyLockCoordinator(sqlite_engine, owner="worker:1", clock=lambda: BASE_TIME),
        unit_of_work_factory=sqlite_unit_of_work,
        reporter=reporter,
        page_size=2,
        clock=lambda: BASE_TIME,
    )


def _stage(factory: UnitOfWorkFactory, *candidates: ImportedUser) -> None:
    with factory() as uow:
        for candidate in candidates:
            uow.repositories.staging.add(candidate)
        uow.commit()


def _add_user(factory: UnitOfWorkFactory, user: User) -> None:
    with factory() as uow:
        uow.repositories.users.create(user.tenant_id, user)
        uow.commit()


def _find_user(factory: UnitOfWorkFactory, email: str) -> User | None:
    with factory() as uow:
        return uow.repositories.users.find_by_email(TENANT, email)


def _staged(factory: UnitOfWorkFactory, status: ImportStatus) -> list[ImportedUser]:
    with factory() as uow:
        return uow.repositories.staging.page(TENANT, status, limit=100)


def _lock_rows(engine: Engine) -> int:
    with engine.connect() as connection:
        return connection.execute(select(func.count()).select_from(tenant_lock_table)).scalar_one()


def test_new_candidate_becomes_active_basic_user(
    engine: UserImportEngine,
    sqlite_engine: Engine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    _stage(sqlite_unit_of_work, make_candidate("new@x.com"))

    engine.run(TENANT)

    user = _find_user(sqlite_unit_of_work, "new@x.com")
    assert user is not None
    assert user.role is UserRole.BASIC
    assert user.status is UserStatus.ACTIVE
    assert user.issuer is True
    assert user.created_on == BASE_TIME
    assert _staged(sqlite_unit_of_work, ImportStatus.READY) == []
    assert (reporter.last_result.in_success, reporter.last_result.in_error) == (1, 0)
    assert _lock_rows(sqlite_engine) == 0


def test_non_local_user_is_untouched(
    engine: UserImportEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    _add_user(sqlite_unit_of_work, make_user("a@x.com", issuer=False))
    _stage(sqlite_unit_of_work, make_candidate("a@x.com", name="Changed"))

    engine.run(TENANT)

    user = _find_user(sqlite_unit_of_work, "a@x.com")
    assert user is not None
    assert user.name == "Original"
    (errored,) = _staged(sqlite_unit_of_work, ImportStatus.ERROR)
    assert errored.error_description == "User is not local to the organization"
    assert (reporter.last_result.in_success, reporter.last_result.in_error) == (0, 1)


def test_active_user_is_no_longer_pending(
    engine: UserImportEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    _add_user(sqlite_unit_of_work, make_user("a@x.com", status=UserStatus.ACTIVE))
    _stage(sqlite_unit_of_work, make_candidate("a@x.com"))

    engine.run(TENANT)

    (errored,) = _staged(sqlite_unit_of_work, ImportStatus.ERROR)
    assert errored.error_description is not None
    assert "no longer pending" in errored.error_description
    assert (reporter.last_result.in_success, reporter.last_result.in_error) == (0, 1)


def test_pages_are_drained_and_second_run_is_idle(
    engine: UserImportEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    _stage(
        sqlite_unit_of_work,
        *(make_candidate(f"user{index}@x.com", position=index) for index in range(5)),
        make_candidate("invalid", position=6),
    )

    engine.run(TENANT)
    engine.run(TENANT)

    first, second = (result for _, result, _ in reporter.reports)
    assert (first.in_success, first.in_error) == (5, 1)
    assert second.processed == 0
    for index in range(5):
        assert _find_user(sqlite_unit_of_work, f"user{index}@x.com") is not None
    assert [row.email for row in _staged(sqlite_unit_of_work, ImportStatus.ERROR)] == ["invalid"]


def test_lock_held_by_another_worker_prevents_writes(
    engine: UserImportEngine,
    sqlite_engine: Engine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    other = SqlAlchemyLockCoordinator(
        sqlite_engine, owner="other:2", lease=timedelta(hours=2), clock=lambda: BASE_TIME
    )
    held = other.acquire(TENANT, LockPurpose.IMPORT_USERS)
    assert held is not None
    _stage(sqlite_unit_of_work, make_candidate())

    engine.run(TENANT)

    assert _find_user(sqlite_unit_of_work, "a@x.com") is None
    assert len(_staged(sqlite_unit_of_work, ImportStatus.READY)) == 1
    assert reporter.reports == []
    assert _lock_rows(sqlite_engine) == 1

    other.release(held)
    engine.run(TENANT)

    assert _find_user(sqlite_unit_of_work, "a@x.com") is not None
    assert _lock_rows(sqlite_engine) == 0


def test_incomplete_user_is_completed(
    engine: UserImportEngine,
    sqlite_unit_of_work: UnitOfWorkFactory,
    reporter: RecordingReporter,
) -> None:
    _add_user(sqlite_unit_of_work, make_user("a@x.com", role=None, status=None))
    _stage(sqlite_unit_of_work, make_candidate("a@x.com", name="Recovered"))

    engine.run(TENANT)

    user = _find_user(sqlite_unit_of_work, "a@x.com")
    assert user is not None
    assert (user.role, user.status) == (UserRole.BASIC, UserStatus.ACTIVE)
    assert user.name == "Recovered"
    assert user.updated_at == BASE_TIME
    assert (reporter.last_result.in_success, reporter.last_result.in_error) == (1, 0)
