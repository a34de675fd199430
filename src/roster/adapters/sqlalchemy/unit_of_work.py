"""SQLAlchemy-backed units of work for imports and tenant management.

The adapter keeps one engine and session factory per process. ``startup``
binds them (and migrates the schema); every unit of work opens a fresh
session from that factory and closes it on exit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from roster.adapters.sqlalchemy.mappings import start_mappers
from roster.adapters.sqlalchemy.migrations import upgrade_head
from roster.adapters.sqlalchemy.repositories import (
    SqlAlchemyStagingRepository,
    SqlAlchemyTenantRepository,
    SqlAlchemyUserRepository,
)
from roster.config import get_database_config
from roster.domain.ports.unit_of_work import (
    ImportRepositories,
    RepositoryCollection,
    TenantRepositories,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the adapter or a unit of work is used in the wrong state."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to a database and bring its schema to head."""

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    upgrade_head(engine=bound)

    _STATE.engine = bound
    _STATE.session_factory = sessionmaker(bind=bound, expire_on_commit=False)


def configured_engine() -> Engine:
    if _STATE.engine is None:
        raise StartupError("SQLAlchemy adapter not started")
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.session_factory = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session, one repository collection, for the span of a ``with`` block."""

    def __init__(self) -> None:
        if _STATE.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not started; call "
                "roster.adapters.sqlalchemy.unit_of_work.startup() first"
            )
        self.session_factory = _STATE.session_factory
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work already active")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active")
        return self._repositories


class SqlAlchemyImportUnitOfWork(BaseSqlAlchemyUnitOfWork[ImportRepositories]):
    """Unit of work over the staging and canonical user tables."""

    def _build_repositories(self, session: Session) -> ImportRepositories:
        return ImportRepositories(
            staging=SqlAlchemyStagingRepository(session),
            users=SqlAlchemyUserRepository(session),
        )


class SqlAlchemyTenantUnitOfWork(BaseSqlAlchemyUnitOfWork[TenantRepositories]):
    def _build_repositories(self, session: Session) -> TenantRepositories:
        return TenantRepositories(tenants=SqlAlchemyTenantRepository(session))


if TYPE_CHECKING:
    from roster.domain.ports.unit_of_work import ImportUnitOfWork, TenantUnitOfWork

    _uow_import_check: ImportUnitOfWork = SqlAlchemyImportUnitOfWork()
    _uow_tenant_check: TenantUnitOfWork = SqlAlchemyTenantUnitOfWork()
