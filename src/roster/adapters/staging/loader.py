"""Read JSON Lines files of users to stage for import."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import ImportedUserRow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RejectedLine:
    line_number: int
    reason: str


@dataclass(slots=True)
class StagingFile:
    rows: list[ImportedUserRow] = field(default_factory=list[ImportedUserRow])
    rejected: list[RejectedLine] = field(default_factory=list[RejectedLine])


def parse_lines(lines: Iterable[str]) -> StagingFile:
    """Validate each non-blank line; invalid lines are collected, not raised."""

    parsed = StagingFile()
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            parsed.rows.append(ImportedUserRow.model_validate(json.loads(line)))
        except json.JSONDecodeError as exc:
            parsed.rejected.append(RejectedLine(line_number, f"invalid JSON: {exc.msg}"))
        except ValidationError as exc:
            reason = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            parsed.rejected.append(RejectedLine(line_number, reason))
    return parsed


def read_staging_file(path: Path) -> StagingFile:
    with path.open(encoding="utf-8") as handle:
        parsed = parse_lines(handle)
    log.info(
        "Read %s: %s valid row(s), %s rejected", path, len(parsed.rows), len(parsed.rejected)
    )
    return parsed
