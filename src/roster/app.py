"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from roster.adapters.reporting import LoggingResultReporter
from roster.adapters.sqlalchemy.locking import SqlAlchemyLockCoordinator
from roster.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    SqlAlchemyTenantUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from roster.adapters.staging import read_staging_file, translate_row
from roster.config import get_import_config, get_scheduler_config
from roster.domain.model import Tenant
from roster.domain.ports.unit_of_work import ImportUnitOfWork, TenantUnitOfWork
from roster.domain.user_import import UserImportEngine
from roster.scheduler import SchedulerRun, TenantScheduler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from roster.adapters.staging import StagingFile
    from roster.config import ImportConfig, SchedulerConfig

ImportUnitOfWorkFactory = Callable[[], ImportUnitOfWork]
TenantUnitOfWorkFactory = Callable[[], TenantUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _tenant_ids(unit_of_work_factory: TenantUnitOfWorkFactory) -> list[str]:
    with unit_of_work_factory() as uow:
        return uow.repositories.tenants.list_ids()


def _tenant_name_resolver(unit_of_work_factory: TenantUnitOfWorkFactory) -> Callable[[str], str]:
    def resolve(tenant_id: str) -> str:
        with unit_of_work_factory() as uow:
            tenant = uow.repositories.tenants.get(tenant_id)
        return tenant.display_name if tenant is not None else tenant_id

    return resolve


def build_import_engine(
    *,
    config: ImportConfig | None = None,
    unit_of_work_factory: ImportUnitOfWorkFactory | None = None,
    tenant_unit_of_work_factory: TenantUnitOfWorkFactory | None = None,
) -> UserImportEngine:
    """Wire the import engine onto the configured database."""

    _ensure_started()
    effective_config = config or get_import_config()
    tenants_uow = tenant_unit_of_work_factory or SqlAlchemyTenantUnitOfWork
    return UserImportEngine(
        locks=SqlAlchemyLockCoordinator(
            configured_engine(),
            lease=timedelta(seconds=effective_config.lock_lease_seconds),
        ),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyImportUnitOfWork,
        reporter=LoggingResultReporter(tenant_name=_tenant_name_resolver(tenants_uow)),
        page_size=effective_config.page_size,
    )


def build_scheduler(
    engine: UserImportEngine,
    *,
    tenant_ids: Sequence[str] | None = None,
    config: SchedulerConfig | None = None,
    tenant_unit_of_work_factory: TenantUnitOfWorkFactory | None = None,
) -> TenantScheduler:
    effective_config = config or get_scheduler_config()
    tenants_uow = tenant_unit_of_work_factory or SqlAlchemyTenantUnitOfWork

    def resolve_tenants() -> list[str]:
        if tenant_ids:
            return list(tenant_ids)
        return _tenant_ids(tenants_uow)

    return TenantScheduler(
        task=engine.run,
        tenant_ids=resolve_tenants,
        max_workers=effective_config.max_workers,
    )


def run_user_import(*, tenant_ids: Sequence[str] | None = None) -> SchedulerRun:
    """Run one import pass for the given tenants (all tenants by default)."""

    engine = build_import_engine()
    scheduler = build_scheduler(engine, tenant_ids=tenant_ids)
    run = scheduler.run_once()
    log.info(
        "Finished user import: tenants=%s, succeeded=%s, failed=%s",
        len(run.tenants),
        run.succeeded,
        len(run.failed),
    )
    return run


def serve_user_import(
    *,
    tenant_ids: Sequence[str] | None = None,
    interval_seconds: int | None = None,
    stop_event: threading.Event | None = None,
) -> None:
    """Run import passes on an interval until ``stop_event`` is set."""

    engine = build_import_engine()
    config = get_scheduler_config()
    scheduler = build_scheduler(engine, tenant_ids=tenant_ids, config=config)
    interval = interval_seconds or config.interval_seconds
    log.info("Scheduling user import every %ss", interval)
    scheduler.run_forever(interval_seconds=interval, stop_event=stop_event)


def create_tenant(
    *,
    tenant_id: str,
    name: str,
    subdomain: str | None = None,
    unit_of_work_factory: TenantUnitOfWorkFactory | None = None,
) -> Tenant:
    """Create and persist a tenant."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyTenantUnitOfWork
    tenant = Tenant(id=tenant_id, name=name, subdomain=subdomain)
    with effective_uow() as uow:
        if uow.repositories.tenants.get(tenant_id) is not None:
            raise ValueError(f"Tenant {tenant_id} already exists")
        uow.repositories.tenants.add(tenant)
        uow.commit()
    return tenant


def stage_users(
    path: Path,
    *,
    tenant_id: str,
    imported_by: str | None = None,
    unit_of_work_factory: ImportUnitOfWorkFactory | None = None,
    now: datetime | None = None,
) -> StagingFile:
    """Validate a JSON Lines file and stage its valid rows as READY."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyImportUnitOfWork
    parsed = read_staging_file(path)
    imported_on = now or datetime.now(UTC)
    with effective_uow() as uow:
        for row in parsed.rows:
            uow.repositories.staging.add(
                translate_row(
                    row,
                    tenant_id=tenant_id,
                    imported_by=imported_by,
                    imported_on=imported_on,
                )
            )
        uow.commit()
    for rejected in parsed.rejected:
        log.warning("Skipped line %s of %s: %s", rejected.line_number, path, rejected.reason)
    log.info("Staged %s user(s) for tenant %s", len(parsed.rows), tenant_id)
    return parsed
