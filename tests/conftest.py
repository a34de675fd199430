from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from roster.adapters.sqlalchemy import start_mappers
from roster.adapters.sqlalchemy.migrations import upgrade_head
from roster.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    SqlAlchemyTenantUnitOfWork,
    shutdown,
    startup,
)
from roster.domain.model import Tenant
from tests.helpers.imports import (
    TENANT,
    FakeImportUnitOfWork,
    FakeLockCoordinator,
    InMemoryImportStore,
    RecordingReporter,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection so worker threads see the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyImportUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyTenantUnitOfWork() as uow:
        uow.repositories.tenants.add(Tenant(id=TENANT, name="Acme", subdomain="acme"))
        uow.commit()

    try:
        yield SqlAlchemyImportUnitOfWork
    finally:
        shutdown()


@pytest.fixture
def import_store() -> InMemoryImportStore:
    return InMemoryImportStore()


@pytest.fixture
def fake_unit_of_work(import_store: InMemoryImportStore) -> Callable[[], FakeImportUnitOfWork]:
    def factory() -> FakeImportUnitOfWork:
        return FakeImportUnitOfWork(import_store)

    return factory


@pytest.fixture
def fake_locks() -> FakeLockCoordinator:
    return FakeLockCoordinator()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
