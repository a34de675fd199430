"""Port for surfacing pass outcomes to operators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from roster.domain.model import ImportOutcome

if TYPE_CHECKING:
    from roster.domain.model import ImportResult


@dataclass(frozen=True, slots=True)
class ReportTemplates:
    """One message per pass outcome.

    Templates are ``str.format`` strings and may reference ``{in_success}``,
    ``{in_error}``, ``{duration}`` (whole seconds) and ``{tenant}``.
    """

    success: str
    error: str
    mixed: str
    nothing: str

    def select(self, outcome: ImportOutcome) -> str:
        match outcome:
            case ImportOutcome.SUCCESS:
                return self.success
            case ImportOutcome.ERROR:
                return self.error
            case ImportOutcome.MIXED:
                return self.mixed
            case ImportOutcome.NOTHING:
                return self.nothing


@runtime_checkable
class ResultReporter(Protocol):
    def report(self, tenant_id: str, result: ImportResult, templates: ReportTemplates) -> None: ...

    def report_fault(self, tenant_id: str, error: BaseException) -> None: ...
