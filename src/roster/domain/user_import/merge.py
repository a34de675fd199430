"""Merge one staged row into the canonical user table.

Every write is committed on its own so that the next row in the pass sees
it. Creating a user takes several commits (row, role, status); a pass that
dies in between leaves a user without role or status, which the update path
recognises and completes on a later pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from roster.domain.model import User, UserAttribute, UserRole, UserStatus

from .outcomes import MergeFailure, MergeSuccess

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from roster.domain.model import ImportedUser
    from roster.domain.ports import ImportUnitOfWork

    from .outcomes import MergeOutcome


@dataclass(frozen=True, slots=True)
class ImportDefaults:
    """Values given to users that the staged row does not describe."""

    role: UserRole = UserRole.BASIC
    status: UserStatus = UserStatus.ACTIVE


def merge_candidate(
    uow: ImportUnitOfWork,
    candidate: ImportedUser,
    *,
    defaults: ImportDefaults,
    now: datetime,
) -> MergeOutcome:
    """Create or update the user matching ``candidate`` and drop it from staging.

    Store exceptions propagate; the caller decides how to classify them.
    """

    problem = candidate.validation_error()
    if problem is not None:
        return MergeFailure(candidate=candidate, reason=problem)

    existing = uow.repositories.users.find_by_email(candidate.tenant_id, candidate.email)
    if existing is not None:
        return _update_existing(uow, existing, candidate, defaults=defaults, now=now)
    return _create_new(uow, candidate, defaults=defaults)


def _update_existing(
    uow: ImportUnitOfWork,
    user: User,
    candidate: ImportedUser,
    *,
    defaults: ImportDefaults,
    now: datetime,
) -> MergeOutcome:
    blocker = user.import_blocker()
    if blocker is not None:
        return MergeFailure(candidate=candidate, reason=blocker)

    missing_role = user.role is None
    missing_status = user.status is None

    user.apply_import(candidate, now=now)
    uow.repositories.users.update(candidate.tenant_id, user)
    uow.commit()

    if missing_role:
        _set_attribute(uow, user.tenant_id, user.id, UserAttribute.ROLE, defaults.role)
    if missing_status:
        _set_attribute(uow, user.tenant_id, user.id, UserAttribute.STATUS, defaults.status)

    _drop_candidate(uow, candidate)
    return MergeSuccess(candidate=candidate, user_id=user.id, created=False)


def _create_new(
    uow: ImportUnitOfWork,
    candidate: ImportedUser,
    *,
    defaults: ImportDefaults,
) -> MergeOutcome:
    user_id = uow.repositories.users.create(candidate.tenant_id, User.from_import(candidate))
    uow.commit()

    _set_attribute(uow, candidate.tenant_id, user_id, UserAttribute.ROLE, defaults.role)
    _set_attribute(uow, candidate.tenant_id, user_id, UserAttribute.STATUS, defaults.status)

    _drop_candidate(uow, candidate)
    return MergeSuccess(candidate=candidate, user_id=user_id, created=True)


def _set_attribute(
    uow: ImportUnitOfWork,
    tenant_id: str,
    user_id: UUID,
    attribute: UserAttribute,
    value: UserRole | UserStatus,
) -> None:
    uow.repositories.users.set_sub_attribute(tenant_id, user_id, attribute, value)
    uow.commit()


def _drop_candidate(uow: ImportUnitOfWork, candidate: ImportedUser) -> None:
    uow.repositories.staging.delete(candidate.tenant_id, candidate.id)
    uow.commit()
