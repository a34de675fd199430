"""Faults that abort a whole import pass."""

from __future__ import annotations


class ImportPassError(RuntimeError):
    """Raised when a pass cannot continue for the current tenant."""


class StalledPaginationError(ImportPassError):
    """Raised when the staging store keeps returning rows this pass already handled."""
