"""Run a per-tenant task for every tenant, on an interval.

Tenants run in parallel on a thread pool; each tenant's task runs as one
sequential unit. Exclusivity of a tenant's pass is the task's concern (the
import engine takes a database lock), not the scheduler's.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    type TenantTask = Callable[[str], None]
    type FaultHandler = Callable[[str, BaseException], None]

log = logging.getLogger(__name__)


def log_fault(tenant_id: str, error: BaseException) -> None:
    log.error("Scheduled task failed for tenant %s: %s", tenant_id, error, exc_info=error)


@dataclass(frozen=True, slots=True)
class SchedulerRun:
    tenants: tuple[str, ...]
    failed: tuple[str, ...] = field(default_factory=tuple[str, ...])

    @property
    def succeeded(self) -> int:
        return len(self.tenants) - len(self.failed)


@dataclass(slots=True)
class TenantScheduler:
    task: TenantTask
    tenant_ids: Callable[[], Iterable[str]]
    max_workers: int = 4
    on_fault: FaultHandler = log_fault

    def run_once(self) -> SchedulerRun:
        """Run ``task`` once per tenant and wait for all of them."""

        tenants = tuple(self.tenant_ids())
        if not tenants:
            log.debug("No tenants to schedule")
            return SchedulerRun(tenants=())

        failed: list[str] = []
        workers = min(self.max_workers, len(tenants))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="roster") as pool:
            futures = {pool.submit(self.task, tenant_id): tenant_id for tenant_id in tenants}
            for future in as_completed(futures):
                tenant_id = futures[future]
                error = future.exception()
                if error is not None:
                    failed.append(tenant_id)
                    self.on_fault(tenant_id, error)

        return SchedulerRun(tenants=tenants, failed=tuple(sorted(failed)))

    def run_forever(
        self,
        *,
        interval_seconds: float,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Repeat ``run_once`` every ``interval_seconds`` until ``stop_event`` is set."""

        stop = stop_event or threading.Event()
        while not stop.is_set():
            try:
                run = self.run_once()
            except Exception:
                log.exception("Scheduler iteration failed")
            else:
                log.debug(
                    "Scheduler iteration finished: tenants=%s, failed=%s",
                    len(run.tenants),
                    len(run.failed),
                )
            stop.wait(interval_seconds)
