"""Lease-bound tenant locks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from roster.domain.model.entity import TenantScopedEntity

if TYPE_CHECKING:
    from datetime import datetime

    from roster.domain.model.enums import LockPurpose


@dataclass(eq=False, kw_only=True)
class TenantLock(TenantScopedEntity):
    """Exclusive right to run ``purpose`` for one tenant until released or expired."""

    purpose: LockPurpose
    owner: str
    acquired_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
