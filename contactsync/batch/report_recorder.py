"""
Upload report recording.

Writes one UploadReport and one UPLOAD_CONTACTS activity per ingestion
run. Both writes are best-effort: the upsert has already committed by the
time they run.
"""

from uuid import UUID

import psycopg
from pydantic import BaseModel

from contactsync.batch.dedup import DuplicateReport
from contactsync.core.models import Actor, BatchUpsertResult, UploadReport
from contactsync.observability.activity import UPLOAD_CONTACTS, ActivityRecorder
from contactsync.observability.logger import get_logger
from contactsync.observability.metrics import record_side_effect_failure
from contactsync.warehouse.connection import DatabaseConnectionPool
from contactsync.warehouse.reports import UploadReportRepository

logger = get_logger(__name__)


class RecordedReport(BaseModel):
    """Result of recording a report; ``persisted`` is False when the write failed."""

    report_id: UUID | None = None
    persisted: bool = False
    report: UploadReport


class UploadReportRecorder:
    """
    Persists upload reports and the accompanying activity entry.
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        activity_recorder: ActivityRecorder | None = None,
    ):
        """
        Args:
            pool: Database connection pool
            activity_recorder: Activity sink (defaults to one on the same pool)
        """
        self.repository = UploadReportRepository(pool)
        self.activity_recorder = activity_recorder or ActivityRecorder(pool)

    @staticmethod
    def build(
        actor: Actor,
        filename: str,
        upsert_result: BatchUpsertResult,
        duplicate_report: DuplicateReport,
    ) -> UploadReport:
        return UploadReport(
            user_id=actor.user_id,
            username=actor.username,
            filename=filename,
            processed=upsert_result.processed,
            inserted=upsert_result.inserted,
            updated=upsert_result.updated,
            duplicates_in_file=duplicate_report.in_batch,
            duplicates_existing=duplicate_report.existing,
        )

    def record(
        self,
        actor: Actor,
        filename: str,
        upsert_result: BatchUpsertResult,
        duplicate_report: DuplicateReport,
    ) -> RecordedReport:
        """
        Write the report, then the activity entry.

        Never raises for storage failures; a failed report write comes back
        with ``persisted=False`` and no id.
        """
        report = self.build(actor, filename, upsert_result, duplicate_report)

        report_id = None
        try:
            report_id = self.repository.insert(report)
        except psycopg.Error as e:
            record_side_effect_failure("upload_report")
            logger.warning(
                f"Upload report not persisted for {filename}: {e}",
                extra={"upload_name": filename, "processed": report.processed},
                exc_info=True,
            )

        self.activity_recorder.record(
            actor,
            UPLOAD_CONTACTS,
            filename=filename,
            processed=report.processed,
            inserted=report.inserted,
            updated=report.updated,
            report_id=report_id,
        )

        if report_id is not None:
            report = report.model_copy(update={"report_id": report_id})

        return RecordedReport(
            report_id=report_id,
            persisted=report_id is not None,
            report=report,
        )
