"""
Admin CLI for reviewing uploads and working with exports.

Usage:
    contactsync-admin reports [--username <name>] [--page N] [--limit N]
    contactsync-admin report --id <report_id>
    contactsync-admin export --format csv|xlsx [--fields A,B] [--search term] \
        [--filter FIELD=VALUE ...] --output <path>
    contactsync-admin snapshots [--username <name>] [--page N] [--limit N]
    contactsync-admin snapshot --id <snapshot_id>
    contactsync-admin snapshot-items --id <snapshot_id> [--page N] [--limit N]
"""

import argparse
import sys
from pathlib import Path

from contactsync.cli.common import add_db_arguments, create_pool, print_json
from contactsync.core.errors import ContactSyncError
from contactsync.core.models import Actor
from contactsync.export.service import ExportRequest, ExportService
from contactsync.export.snapshot import SnapshotEngine
from contactsync.observability.logger import get_logger
from contactsync.utils.validation import (
    ValidationError,
    validate_limit,
    validate_page,
    validate_username,
    validate_uuid,
)
from contactsync.warehouse.connection import close_pool
from contactsync.warehouse.reports import UploadReportRepository

logger = get_logger(__name__)


def parse_filters(pairs: list[str] | None) -> dict[str, str]:
    """
    Turn ``FIELD=VALUE`` arguments into a filter mapping.

    Repeating a field joins the values, which makes it a one_of match.
    """
    filters: dict[str, str] = {}
    for pair in pairs or []:
        field_name, sep, value = pair.partition("=")
        field_name = field_name.strip()
        if not sep or not field_name:
            raise ValidationError(f"filter must look like FIELD=VALUE, got {pair!r}")
        if field_name in filters:
            filters[field_name] = f"{filters[field_name]},{value}"
        else:
            filters[field_name] = value
    return filters


def reports_command(args, pool):
    repository = UploadReportRepository(pool)
    listing = repository.list_reports(
        username=args.username,
        page=validate_page(args.page),
        limit=validate_limit(args.limit, max_limit=100),
    )
    print_json(listing)


def report_command(args, pool):
    report = UploadReportRepository(pool).get(validate_uuid(args.id, "report id"))
    if report is None:
        print(f"Upload report not found: {args.id}", file=sys.stderr)
        sys.exit(1)
    print_json(report)


def export_command(args, pool):
    """
    Write an export file and print where it went and its snapshot id.
    """
    service = ExportService(pool)
    request = ExportRequest(
        format=args.format,
        search=args.search or "",
        filters=parse_filters(args.filter),
        fields=args.fields,
    )
    actor = Actor(user_id=args.user_id, username=validate_username(args.username))
    result = service.export(actor, request)

    output = Path(args.output or result.filename)
    output.write_bytes(result.content)

    print_json({
        "output": str(output),
        "mediaType": result.media_type,
        "total": result.total,
        "snapshotId": result.snapshot_id,
    })


def snapshots_command(args, pool):
    listing = SnapshotEngine(pool).list_snapshots(
        username=args.username,
        page=args.page,
        limit=args.limit,
    )
    print_json(listing)


def snapshot_command(args, pool):
    snapshot = SnapshotEngine(pool).get(args.id)
    print_json(snapshot)


def snapshot_items_command(args, pool):
    page = SnapshotEngine(pool).replay(args.id, page=args.page, page_size=args.limit)
    print_json(page.to_dict())


COMMANDS = {
    "reports": reports_command,
    "report": report_command,
    "export": export_command,
    "snapshots": snapshots_command,
    "snapshot": snapshot_command,
    "snapshot-items": snapshot_items_command,
}


def main():
    """Main entry point for admin CLI."""
    parser = argparse.ArgumentParser(
        description="Admin CLI for contact uploads and exports",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    add_db_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # reports command
    reports_parser = subparsers.add_parser("reports", help="List upload reports, newest first")
    reports_parser.add_argument("--username", help="Only reports by this operator")
    reports_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    reports_parser.add_argument("--limit", type=int, default=20, help="Reports per page (default: 20)")

    # report command
    report_parser = subparsers.add_parser("report", help="Show one upload report")
    report_parser.add_argument("--id", required=True, help="Report ID")

    # export command
    export_parser = subparsers.add_parser("export", help="Export contacts to CSV or XLSX")
    export_parser.add_argument(
        "--format",
        default="csv",
        help="Output format: csv or xlsx (default: csv)"
    )
    export_parser.add_argument(
        "--fields",
        help="Comma-separated field list (default: all fields)"
    )
    export_parser.add_argument("--search", help="Free-text search term")
    export_parser.add_argument(
        "--filter",
        action="append",
        metavar="FIELD=VALUE",
        help="Field filter; comma-separated values match any of them (repeatable)"
    )
    export_parser.add_argument("--output", help="Output path (default: contacts.<format>)")
    export_parser.add_argument("--username", default=None, help="Operator name recorded on the snapshot")
    export_parser.add_argument("--user-id", default=None, help="Operator id recorded on the snapshot")

    # snapshots command
    snapshots_parser = subparsers.add_parser("snapshots", help="List export snapshots, newest first")
    snapshots_parser.add_argument("--username", help="Only snapshots by this operator")
    snapshots_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    snapshots_parser.add_argument("--limit", type=int, default=20, help="Snapshots per page (default: 20)")

    # snapshot command
    snapshot_parser = subparsers.add_parser("snapshot", help="Show snapshot metadata")
    snapshot_parser.add_argument("--id", required=True, help="Snapshot ID")

    # snapshot-items command
    items_parser = subparsers.add_parser("snapshot-items", help="Replay a page of a snapshot")
    items_parser.add_argument("--id", required=True, help="Snapshot ID")
    items_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    items_parser.add_argument("--limit", type=int, default=100, help="Items per page, 1-1000 (default: 100)")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        pool = create_pool(args)
        COMMANDS[args.command](args, pool)

    except (ContactSyncError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Admin command failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        close_pool()


if __name__ == "__main__":
    main()
