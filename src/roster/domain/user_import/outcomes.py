"""Per-row merge results.

Expected business faults travel as ``MergeFailure`` values; exceptions are
reserved for faults the pass cannot recover from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from roster.domain.model import ImportedUser


@dataclass(frozen=True, slots=True)
class MergeSuccess:
    candidate: ImportedUser
    user_id: UUID
    created: bool


@dataclass(frozen=True, slots=True)
class MergeFailure:
    candidate: ImportedUser
    reason: str
    error: BaseException | None = None


type MergeOutcome = MergeSuccess | MergeFailure
