"""Import of staged users into the canonical user store."""

from __future__ import annotations

from .engine import DEFAULT_IMPORT_PAGE_SIZE, DEFAULT_TEMPLATES, UserImportEngine
from .errors import ImportPassError, StalledPaginationError
from .merge import ImportDefaults, merge_candidate
from .outcomes import MergeFailure, MergeOutcome, MergeSuccess

__all__ = [
    "DEFAULT_IMPORT_PAGE_SIZE",
    "DEFAULT_TEMPLATES",
    "ImportDefaults",
    "ImportPassError",
    "MergeFailure",
    "MergeOutcome",
    "MergeSuccess",
    "StalledPaginationError",
    "UserImportEngine",
    "merge_candidate",
]
