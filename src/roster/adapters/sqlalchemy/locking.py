"""Database-backed tenant locks.

A lock is a row in ``tenant_lock``; the unique ``(tenant_id, purpose)``
constraint gives atomic insert-if-absent semantics to every process sharing
the database. Rows whose lease has lapsed are reclaimed by the next
``acquire``; the lease only matters when a holder died without releasing.
"""

from __future__ import annotations

import logging
import os
import socket
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from roster.adapters.sqlalchemy.mappings import tenant_lock_table
from roster.domain.model import TenantLock

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from roster.domain.model import LockPurpose

DEFAULT_LEASE = timedelta(hours=1)

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def default_owner() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


class SqlAlchemyLockCoordinator:
    def __init__(
        self,
        engine: Engine,
        *,
        lease: timedelta = DEFAULT_LEASE,
        owner: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if lease <= timedelta(0):
            raise ValueError("Lock lease must be positive")
        self.session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self.lease = lease
        self.owner = owner or default_owner()
        self.clock = clock

    def acquire(self, tenant_id: str, purpose: LockPurpose) -> TenantLock | None:
        now = self.clock()
        lock = TenantLock(
            tenant_id=tenant_id,
            purpose=purpose,
            owner=self.owner,
            acquired_at=now,
            expires_at=now + self.lease,
        )
        with self.session_factory() as session:
            reclaimed = session.execute(
                delete(tenant_lock_table)
                .where(tenant_lock_table.c.tenant_id == tenant_id)
                .where(tenant_lock_table.c.purpose == purpose)
                .where(tenant_lock_table.c.expires_at <= now)
            ).rowcount
            if reclaimed:
                log.warning(
                    "Reclaimed expired %s lock for tenant %s", purpose.value, tenant_id
                )
            session.add(lock)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                log.debug("%s lock for tenant %s is held elsewhere", purpose.value, tenant_id)
                return None
        log.debug("Acquired %s lock for tenant %s as %s", purpose.value, tenant_id, self.owner)
        return lock

    def release(self, lock: TenantLock) -> None:
        with self.session_factory() as session:
            session.execute(delete(tenant_lock_table).where(tenant_lock_table.c.id == lock.id))
            session.commit()
        log.debug("Released %s lock for tenant %s", lock.purpose.value, lock.tenant_id)


if TYPE_CHECKING:
    from typing import cast

    from roster.domain.ports.locking import LockCoordinator

    _lock_check: LockCoordinator = SqlAlchemyLockCoordinator(cast("Engine", object()))
