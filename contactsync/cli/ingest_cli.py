"""
CLI for contact upload ingestion.

Usage:
    contactsync-ingest upload --input <path> [--name <original name>] [--username <name>] [--keep-file]
"""

import argparse
import os
import shutil
import sys
import tempfile
from pathlib import Path

from contactsync.batch.pipeline import IngestionPipeline
from contactsync.core.errors import ContactSyncError
from contactsync.core.models import Actor
from contactsync.cli.common import add_db_arguments, create_pool, print_json
from contactsync.observability.logger import get_logger
from contactsync.utils.validation import ValidationError, validate_file_path, validate_username
from contactsync.warehouse.connection import close_pool

logger = get_logger(__name__)


def _staged_copy(input_path: Path) -> str:
    """Copy the input to a temp file the pipeline is free to delete."""
    fd, staged = tempfile.mkstemp(prefix="contactsync-", suffix=input_path.suffix)
    os.close(fd)
    shutil.copyfile(input_path, staged)
    return staged


def upload_command(args):
    """
    Run one ingestion and print the result as JSON.

    Args:
        args: Command-line arguments
    """
    try:
        input_path = Path(validate_file_path(args.input, "input"))
        username = validate_username(args.username)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    original_name = args.name or input_path.name
    file_path = _staged_copy(input_path) if args.keep_file else str(input_path)

    try:
        pool = create_pool(args)
        pipeline = IngestionPipeline(pool, aliases_path=args.aliases)
        result = pipeline.process_upload(
            file_path,
            original_name,
            Actor(user_id=args.user_id, username=username),
        )
        print_json(result.to_dict())

        if not result.report_persisted:
            logger.warning("Upload applied but the upload report was not stored")

    except ContactSyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error during ingestion: {e}", exc_info=True)
        sys.exit(1)
    finally:
        close_pool()
        if args.keep_file and os.path.exists(file_path):
            os.remove(file_path)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Contact spreadsheet ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest a CSV export (the file is deleted afterwards)
  contactsync-ingest upload --input /tmp/upload-8f2a --name contacts.csv --username ops.jane

  # Keep the input file
  contactsync-ingest upload --input data/contacts.xlsx --keep-file
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser("upload", help="Ingest a CSV or XLSX file")
    upload_parser.add_argument(
        "--input",
        required=True,
        help="Path to the uploaded file"
    )
    upload_parser.add_argument(
        "--name",
        help="Original file name, used to pick the format (default: input file name)"
    )
    upload_parser.add_argument(
        "--username",
        default=None,
        help="Operator name recorded on the report (default: unknown)"
    )
    upload_parser.add_argument(
        "--user-id",
        default=None,
        help="Operator id recorded on the report"
    )
    upload_parser.add_argument(
        "--aliases",
        default=None,
        help="Header alias YAML file (default: $HEADER_ALIASES_PATH or config/header_aliases.yaml)"
    )
    upload_parser.add_argument(
        "--keep-file",
        action="store_true",
        help="Ingest a temporary copy so the input file is not deleted"
    )
    add_db_arguments(upload_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "upload":
        upload_command(args)


if __name__ == "__main__":
    main()
