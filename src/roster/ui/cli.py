from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from roster.app import create_tenant, run_user_import, serve_user_import, stage_users
from roster.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import staged users into tenants")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("import", help="Run one import pass")
    run.add_argument(
        "--tenant",
        action="append",
        dest="tenants",
        help="Tenant id to import (repeatable; defaults to all tenants)",
    )

    schedule = subparsers.add_parser("schedule", help="Run import passes on an interval")
    schedule.add_argument(
        "--tenant",
        action="append",
        dest="tenants",
        help="Tenant id to import (repeatable; defaults to all tenants)",
    )
    schedule.add_argument(
        "--interval",
        type=_positive_int,
        default=None,
        help="Seconds between passes (defaults to config)",
    )

    stage = subparsers.add_parser("stage", help="Stage users from a JSON Lines file")
    stage.add_argument("path", type=Path, help="File with one JSON user object per line")
    stage.add_argument("--tenant", required=True, help="Tenant id to stage users for")
    stage.add_argument("--imported-by", help="Actor recorded as the importer")

    tenant = subparsers.add_parser("tenant", help="Tenant management commands")
    tenant_sub = tenant.add_subparsers(dest="tenant_command", required=True)
    tenant_create = tenant_sub.add_parser("create", help="Create a tenant")
    tenant_create.add_argument("--id", dest="tenant_id", required=True, help="Tenant id")
    tenant_create.add_argument("--name", required=True, help="Tenant display name")
    tenant_create.add_argument("--subdomain", help="Optional tenant subdomain")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except SystemExit as exc:
        sys.exit(2 if exc.code else 0)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "import":
            run = run_user_import(tenant_ids=parsed_args.tenants)
            if run.failed:
                log.error("User import failed for tenant(s): %s", ", ".join(run.failed))
                sys.exit(1)
        elif parsed_args.command == "schedule":
            serve_user_import(
                tenant_ids=parsed_args.tenants,
                interval_seconds=parsed_args.interval,
            )
        elif parsed_args.command == "stage":
            staged = stage_users(
                parsed_args.path,
                tenant_id=parsed_args.tenant,
                imported_by=parsed_args.imported_by,
            )
            if staged.rejected:
                sys.exit(1)
        elif parsed_args.command == "tenant" and parsed_args.tenant_command == "create":
            tenant = create_tenant(
                tenant_id=parsed_args.tenant_id,
                name=parsed_args.name,
                subdomain=parsed_args.subdomain,
            )
            log.info("Created tenant %s", tenant.display_name)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
