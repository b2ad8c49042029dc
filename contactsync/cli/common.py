"""
Shared CLI helpers: database arguments and JSON output.
"""

import argparse
import json
from datetime import datetime
from typing import Any
from uuid import UUID

from contactsync.warehouse.connection import DatabaseConnectionPool, initialize_pool


def add_db_arguments(parser: argparse.ArgumentParser) -> None:
    """Database connection options; unset values fall back to DB_* env vars."""
    parser.add_argument("--db-host", default=None, help="Database host (default: $DB_HOST or localhost)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (default: $DB_PORT or 5432)")
    parser.add_argument("--db-name", default=None, help="Database name (default: $DB_NAME or contacts)")
    parser.add_argument("--db-user", default=None, help="Database user (default: $DB_USER or contactsync)")
    parser.add_argument("--db-password", default=None, help="Database password (default: $DB_PASSWORD)")


def create_pool(args: argparse.Namespace) -> DatabaseConnectionPool:
    """Open the process-wide pool from CLI arguments; release it with close_pool()."""
    return initialize_pool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password,
    )


def _default(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=_default))
