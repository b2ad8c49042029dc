"""
Persistence of upload reports.

Reports are written once per ingestion run and never updated.
"""

import math
from typing import Any
from uuid import UUID

import psycopg
from psycopg.types.json import Jsonb

from contactsync.core.models import UploadReport
from contactsync.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

REPORT_COLUMNS = """
    report_id, user_id, username, filename, processed, inserted, updated,
    duplicates_in_file, duplicates_existing, created_at
"""


class UploadReportRepository:
    """Insert-only storage of UploadReport rows plus read queries."""

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def insert(self, report: UploadReport) -> UUID:
        """
        Insert a report.

        Returns:
            report_id: Generated report id

        Raises:
            psycopg.DatabaseError: If insert fails
        """
        insert_sql = """
            INSERT INTO upload_report (
                user_id, username, filename, processed, inserted, updated,
                duplicates_in_file, duplicates_existing, created_at
            ) VALUES (
                %(user_id)s, %(username)s, %(filename)s, %(processed)s,
                %(inserted)s, %(updated)s, %(duplicates_in_file)s,
                %(duplicates_existing)s, %(created_at)s
            ) RETURNING report_id;
        """
        try:
            with self.pool.transaction() as cur:
                cur.execute(
                    insert_sql,
                    {
                        "user_id": report.user_id,
                        "username": report.username,
                        "filename": report.filename,
                        "processed": report.processed,
                        "inserted": report.inserted,
                        "updated": report.updated,
                        "duplicates_in_file": Jsonb(
                            [d.model_dump() for d in report.duplicates_in_file]
                        ),
                        "duplicates_existing": Jsonb(list(report.duplicates_existing)),
                        "created_at": report.created_at,
                    },
                )
                report_id = cur.fetchone()["report_id"]
        except psycopg.DatabaseError as e:
            logger.error(f"Failed to insert upload report: {e}")
            raise

        logger.debug(f"Inserted upload report {report_id} for {report.filename}")
        return report_id

    def get(self, report_id: UUID | str) -> UploadReport | None:
        rows = self.pool.execute_query(
            f"SELECT {REPORT_COLUMNS} FROM upload_report WHERE report_id = %s",
            (str(report_id),),
        )
        return UploadReport(**rows[0]) if rows else None

    def list_reports(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """
        Reports newest first.

        Returns:
            Dictionary with items, total, page and pages
        """
        where = " WHERE username = %(username)s" if username else ""
        params = {"username": username, "limit": limit, "offset": (page - 1) * limit}

        items = self.pool.execute_query(
            f"SELECT {REPORT_COLUMNS} FROM upload_report{where} "
            "ORDER BY created_at DESC LIMIT %(limit)s OFFSET %(offset)s",
            params,
        )
        total = self.pool.execute_query(
            f"SELECT COUNT(*) AS total FROM upload_report{where}", params
        )[0]["total"]

        return {
            "items": [UploadReport(**row) for row in items],
            "total": total,
            "page": page,
            "pages": math.ceil(total / limit) if limit else 0,
        }
