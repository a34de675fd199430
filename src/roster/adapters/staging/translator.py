"""Translate validated staging rows into domain ``ImportedUser`` rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from roster.domain.model import ImportedUser, ImportStatus

if TYPE_CHECKING:
    from datetime import datetime

    from .schema import ImportedUserRow


def translate_row(
    row: ImportedUserRow,
    *,
    tenant_id: str,
    imported_by: str | None,
    imported_on: datetime,
) -> ImportedUser:
    return ImportedUser(
        tenant_id=tenant_id,
        email=row.email,
        name=row.name,
        first_name=row.first_name,
        status=ImportStatus.READY,
        imported_by=imported_by,
        imported_on=imported_on,
    )
