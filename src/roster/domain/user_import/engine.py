"""Recurring, tenant-scoped import of staged users into the canonical store.

One pass per (tenant, purpose) runs at a time; exclusivity comes from the
injected ``LockCoordinator`` rather than from in-process locks, so it holds
across workers and hosts. Each staged row is merged in its own unit of work
and a failing row never stops the pass. Only faults that make the staging
queue unreadable abort it, and the lock is released on every path.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Final, Protocol

from roster.domain.model import ImportResult, ImportStatus, LockPurpose
from roster.domain.ports.reporting import ReportTemplates

from .errors import StalledPaginationError
from .merge import ImportDefaults, merge_candidate
from .outcomes import MergeFailure, MergeSuccess

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from roster.domain.model import ImportedUser
    from roster.domain.ports import ImportUnitOfWork, LockCoordinator, ResultReporter

    from .outcomes import MergeOutcome

DEFAULT_IMPORT_PAGE_SIZE: Final[int] = 100

DEFAULT_TEMPLATES: Final[ReportTemplates] = ReportTemplates(
    success="{in_success} user(s) have been imported successfully in {duration}s in tenant {tenant}",
    error="{in_error} user(s) failed to be imported in {duration}s in tenant {tenant}",
    mixed=(
        "{in_success} user(s) have been imported successfully but {in_error} failed "
        "in {duration}s in tenant {tenant}"
    ),
    nothing="No user has been imported in {duration}s in tenant {tenant}",
)

log = logging.getLogger(__name__)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class _PassCounters:
    in_success: int = 0
    in_error: int = 0

    @property
    def processed(self) -> int:
        return self.in_success + self.in_error


@dataclass(slots=True)
class UserImportEngine:
    """Drain READY staged users for a tenant into the canonical user store."""

    locks: LockCoordinator
    unit_of_work_factory: Callable[[], ImportUnitOfWork]
    reporter: ResultReporter
    page_size: int = DEFAULT_IMPORT_PAGE_SIZE
    defaults: ImportDefaults = field(default_factory=ImportDefaults)
    templates: ReportTemplates = DEFAULT_TEMPLATES
    clock: Clock = _utcnow
    timer: Callable[[], float] = time.monotonic

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("Import page size must be positive")

    def run(self, tenant_id: str) -> None:
        """Run one import pass for ``tenant_id``.

        Returns without doing anything when another holder owns the tenant's
        import lock. Only faults that stop the staging queue from draining
        (a failed page fetch or a failed ERROR mark) are reported and
        re-raised for the scheduler to handle.
        """

        lock = self.locks.acquire(tenant_id, LockPurpose.IMPORT_USERS)
        if lock is None:
            log.debug("User import already running for tenant %s, skipping", tenant_id)
            return
        try:
            self._run_pass(tenant_id)
        except Exception as exc:
            self.reporter.report_fault(tenant_id, exc)
            raise
        finally:
            self.locks.release(lock)

    def _run_pass(self, tenant_id: str) -> None:
        counters = _PassCounters()
        started = self.timer()
        handled: set[UUID] = set()

        total = self._count_ready(tenant_id)
        if total:
            log.info("%s user(s) are going to be imported in tenant %s", total, tenant_id)

        while page := self._fetch_page(tenant_id):
            fresh = [candidate for candidate in page if candidate.id not in handled]
            if not fresh:
                raise StalledPaginationError(
                    f"Staging returned {len(page)} already handled row(s) for tenant {tenant_id}"
                )
            for candidate in fresh:
                handled.add(candidate.id)
                outcome = self._merge(candidate)
                if isinstance(outcome, MergeSuccess):
                    counters.in_success += 1
                else:
                    self._record_failure(outcome)
                    counters.in_error += 1
            log.debug(
                "%s/%s user(s) have been processed in %ss in tenant %s",
                counters.processed,
                "?" if total is None else total,
                round(self.timer() - started),
                tenant_id,
            )

        result = ImportResult(
            in_success=counters.in_success,
            in_error=counters.in_error,
            duration=timedelta(seconds=self.timer() - started),
        )
        try:
            self.reporter.report(tenant_id, result, self.templates)
        except Exception:
            log.exception("Could not report user import result for tenant %s", tenant_id)

    def _count_ready(self, tenant_id: str) -> int | None:
        try:
            with self.unit_of_work_factory() as uow:
                return uow.repositories.staging.count(tenant_id, ImportStatus.READY)
        except Exception:
            log.warning(
                "Could not count users to import in tenant %s", tenant_id, exc_info=True
            )
            return None

    def _fetch_page(self, tenant_id: str) -> list[ImportedUser]:
        # Handled rows leave the READY set before the next fetch, so the
        # window always starts at offset zero.
        with self.unit_of_work_factory() as uow:
            return uow.repositories.staging.page(
                tenant_id, ImportStatus.READY, limit=self.page_size, offset=0
            )

    def _merge(self, candidate: ImportedUser) -> MergeOutcome:
        try:
            with self.unit_of_work_factory() as uow:
                return merge_candidate(uow, candidate, defaults=self.defaults, now=self.clock())
        except Exception as exc:  # noqa: BLE001
            return MergeFailure(
                candidate=candidate,
                reason=str(exc) or type(exc).__name__,
                error=exc,
            )

    def _record_failure(self, failure: MergeFailure) -> None:
        candidate = failure.candidate
        candidate.mark_error(failure.reason)
        with self.unit_of_work_factory() as uow:
            uow.repositories.staging.upsert_with_error(candidate.tenant_id, candidate)
            uow.commit()
        log.error(
            "Error when importing user with email '%s' in tenant %s: %s",
            candidate.email,
            candidate.tenant_id,
            candidate.error_description,
            exc_info=failure.error,
        )
