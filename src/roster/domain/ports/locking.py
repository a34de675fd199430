"""Port for the distributed tenant lock."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from roster.domain.model import LockPurpose, TenantLock


@runtime_checkable
class LockCoordinator(Protocol):
    """Grants exclusive, lease-bound locks per (tenant, purpose).

    ``acquire`` returns ``None`` when another holder already owns the lock;
    that is contention, not an error. ``release`` must be idempotent and must
    not fail when the lease has already lapsed.
    """

    def acquire(self, tenant_id: str, purpose: LockPurpose) -> TenantLock | None: ...

    def release(self, lock: TenantLock) -> None: ...
