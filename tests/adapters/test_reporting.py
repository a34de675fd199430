from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from roster.adapters.reporting import LoggingResultReporter
from roster.domain.model import ImportResult
from roster.domain.user_import import DEFAULT_TEMPLATES


@pytest.mark.parametrize(
    ("result", "level", "message"),
    [
        (
            ImportResult(in_success=2, duration=timedelta(seconds=4.4)),
            logging.INFO,
            "2 user(s) have been imported successfully in 4s in tenant Acme (acme)",
        ),
        (
            ImportResult(in_error=1, duration=timedelta(seconds=1)),
            logging.ERROR,
            "1 user(s) failed to be imported in 1s in tenant Acme (acme)",
        ),
        (
            ImportResult(in_success=3, in_error=1),
            logging.WARNING,
            "3 user(s) have been imported successfully but 1 failed in 0s in tenant Acme (acme)",
        ),
        (
            ImportResult(),
            logging.INFO,
            "No user has been imported in 0s in tenant Acme (acme)",
        ),
    ],
)
def test_report_logs_template_for_outcome(
    caplog: pytest.LogCaptureFixture,
    result: ImportResult,
    level: int,
    message: str,
) -> None:
    reporter = LoggingResultReporter(tenant_name=lambda tenant_id: f"Acme ({tenant_id})")

    with caplog.at_level(logging.DEBUG, logger="roster.import"):
        reporter.report("acme", result, DEFAULT_TEMPLATES)

    (record,) = caplog.records
    assert record.levelno == level
    assert record.getMessage() == message


def test_report_fault_logs_one_line(caplog: pytest.LogCaptureFixture) -> None:
    reporter = LoggingResultReporter()
    try:
        raise OSError("staging unavailable")
    except OSError as exc:
        error = exc

    with caplog.at_level(logging.ERROR, logger="roster.import"):
        reporter.report_fault("acme", error)

    (record,) = caplog.records
    assert record.getMessage() == "User import aborted in tenant acme: staging unavailable"
    assert record.levelno == logging.ERROR
    assert record.exc_info is None
