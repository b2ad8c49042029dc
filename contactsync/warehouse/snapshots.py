"""
Persistence of export snapshots.
"""

import math
from uuid import UUID

from psycopg.types.json import Jsonb

from contactsync.core.models import ExportSnapshot, SnapshotListing, SnapshotSummary
from contactsync.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

SNAPSHOT_COLUMNS = """
    snapshot_id, user_id, username, format, fields, filters, total,
    item_ids, created_at
"""


class SnapshotRepository:
    """Insert-only storage of ExportSnapshot rows plus read queries."""

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def insert(self, snapshot: ExportSnapshot) -> UUID:
        """
        Write a snapshot in one statement.

        Raises:
            psycopg.DatabaseError: If insert fails
        """
        rows = self.pool.execute_query(
            """
            INSERT INTO export_snapshot (
                user_id, username, format, fields, filters, total, item_ids, created_at
            ) VALUES (
                %(user_id)s, %(username)s, %(format)s, %(fields)s, %(filters)s,
                %(total)s, %(item_ids)s, %(created_at)s
            ) RETURNING snapshot_id
            """,
            {
                "user_id": snapshot.user_id,
                "username": snapshot.username,
                "format": snapshot.format,
                "fields": list(snapshot.fields),
                "filters": Jsonb(snapshot.filters),
                "total": snapshot.total,
                "item_ids": list(snapshot.item_ids),
                "created_at": snapshot.created_at,
            },
        )
        snapshot_id = rows[0]["snapshot_id"]
        logger.debug(f"Inserted export snapshot {snapshot_id} with {snapshot.total} items")
        return snapshot_id

    def get(self, snapshot_id: UUID | str) -> ExportSnapshot | None:
        rows = self.pool.execute_query(
            f"SELECT {SNAPSHOT_COLUMNS} FROM export_snapshot WHERE snapshot_id = %s",
            (str(snapshot_id),),
        )
        return ExportSnapshot(**rows[0]) if rows else None

    def list_snapshots(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> SnapshotListing:
        """Snapshot metadata newest first; item ids are not loaded."""
        where = " WHERE username = %(username)s" if username else ""
        params = {"username": username, "limit": limit, "offset": (page - 1) * limit}

        rows = self.pool.execute_query(
            "SELECT snapshot_id, user_id, username, format, fields, filters, total, created_at "
            f"FROM export_snapshot{where} "
            "ORDER BY created_at DESC LIMIT %(limit)s OFFSET %(offset)s",
            params,
        )
        total = self.pool.execute_query(
            f"SELECT COUNT(*) AS total FROM export_snapshot{where}", params
        )[0]["total"]

        return SnapshotListing(
            items=[SnapshotSummary(**row) for row in rows],
            total=total,
            page=page,
            pages=math.ceil(total / limit) if limit else 0,
        )
