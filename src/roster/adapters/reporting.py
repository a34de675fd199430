"""Log-based result reporter for import passes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from roster.domain.model import ImportOutcome

if TYPE_CHECKING:
    from collections.abc import Callable

    from roster.domain.model import ImportResult
    from roster.domain.ports import ReportTemplates

log = logging.getLogger("roster.import")

LEVEL_BY_OUTCOME: Final[dict[ImportOutcome, int]] = {
    ImportOutcome.SUCCESS: logging.INFO,
    ImportOutcome.NOTHING: logging.INFO,
    ImportOutcome.MIXED: logging.WARNING,
    ImportOutcome.ERROR: logging.ERROR,
}


class LoggingResultReporter:
    """Render the template matching a pass outcome and log it."""

    def __init__(
        self,
        *,
        tenant_name: Callable[[str], str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._tenant_name = tenant_name or str
        self._log = logger or log

    def render(self, tenant_id: str, result: ImportResult, templates: ReportTemplates) -> str:
        return templates.select(result.outcome).format(
            in_success=result.in_success,
            in_error=result.in_error,
            duration=result.duration_seconds,
            tenant=self._tenant_name(tenant_id),
        )

    def report(self, tenant_id: str, result: ImportResult, templates: ReportTemplates) -> None:
        message = self.render(tenant_id, result, templates)
        self._log.log(LEVEL_BY_OUTCOME[result.outcome], message)

    def report_fault(self, tenant_id: str, error: BaseException) -> None:
        self._log.error(
            "User import aborted in tenant %s: %s",
            self._tenant_name(tenant_id),
            error,
        )


if TYPE_CHECKING:
    from roster.domain.ports import ResultReporter

    _reporter_check: ResultReporter = LoggingResultReporter()
