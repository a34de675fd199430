"""Adapter for user rows staged from tenant-supplied files."""

from __future__ import annotations

from .loader import RejectedLine, StagingFile, parse_lines, read_staging_file
from .schema import ImportedUserRow
from .translator import translate_row

__all__ = [
    "ImportedUserRow",
    "RejectedLine",
    "StagingFile",
    "parse_lines",
    "read_staging_file",
    "translate_row",
]
