"""Aggregate outcome of one import pass."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from roster.domain.model.enums import ImportOutcome


@dataclass(frozen=True, slots=True)
class ImportResult:
    in_success: int = 0
    in_error: int = 0
    duration: timedelta = timedelta(0)

    @property
    def processed(self) -> int:
        return self.in_success + self.in_error

    @property
    def duration_seconds(self) -> int:
        return round(self.duration.total_seconds())

    @property
    def outcome(self) -> ImportOutcome:
        if self.in_success and self.in_error:
            return ImportOutcome.MIXED
        if self.in_error:
            return ImportOutcome.ERROR
        if self.in_success:
            return ImportOutcome.SUCCESS
        return ImportOutcome.NOTHING
