"""
Upload ingestion pipeline orchestration.

Coordinates the flow: read → normalize → detect duplicates → upsert → report
"""

import os
from pathlib import Path
from uuid import UUID

from pydantic import BaseModel
from pyspark.sql import SparkSession

from contactsync.batch.dedup import DuplicateDetector
from contactsync.batch.readers import FileReader, detect_format
from contactsync.batch.report_recorder import UploadReportRecorder
from contactsync.core.errors import UnsupportedFileFormatError
from contactsync.core.models import Actor
from contactsync.core.schema.normalizer import RowNormalizer
from contactsync.observability.logger import get_logger, log_operation
from contactsync.observability.metrics import (
    increment_counter,
    record_ingestion,
    track_duration,
    upload_duration_seconds,
    uploads_total,
)
from contactsync.warehouse.connection import DatabaseConnectionPool
from contactsync.warehouse.contact_store import ContactStore

logger = get_logger(__name__)


class IngestionResult(BaseModel):
    processed: int = 0
    inserted: int = 0
    updated: int = 0
    report_id: UUID | None = None
    duplicates_in_file_count: int = 0
    duplicates_existing_count: int = 0
    report_persisted: bool = False

    def to_dict(self) -> dict:
        """External response shape."""
        return {
            "processed": self.processed,
            "inserted": self.inserted,
            "updated": self.updated,
            "reportId": str(self.report_id) if self.report_id else None,
            "duplicatesInFileCount": self.duplicates_in_file_count,
            "duplicatesExistingCount": self.duplicates_existing_count,
        }


class IngestionPipeline:
    """
    Orchestrates contact upload ingestion.

    Flow:
    1. Check the original file name is CSV or XLSX
    2. Read rows (Spark for CSV, openpyxl for XLSX)
    3. Normalize every row to the canonical schema
    4. Detect duplicate keys, in the file and against the store
    5. Upsert the batch in one transaction
    6. Record the upload report and activity entry
    7. Delete the uploaded file
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        spark: SparkSession | None = None,
        aliases_path: str | None = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            pool: Database connection pool
            spark: Active Spark session (created on first CSV upload if omitted)
            aliases_path: Path to header alias YAML file
        """
        self.pool = pool
        self.file_reader = FileReader(spark)
        self.normalizer = RowNormalizer.from_config(aliases_path)
        self.store = ContactStore(pool)
        self.duplicate_detector = DuplicateDetector(self.store)
        self.report_recorder = UploadReportRecorder(pool)

    def process_upload(
        self,
        file_path: str,
        original_name: str,
        actor: Actor | None = None,
    ) -> IngestionResult:
        """
        Ingest one uploaded file.

        Args:
            file_path: Location of the uploaded file on disk
            original_name: File name as uploaded (decides the format)
            actor: Operator running the import

        Returns:
            IngestionResult with counts and the report id

        Raises:
            UnsupportedFileFormatError: If the file is not CSV or XLSX
            IngestionError: If the duplicate lookup or the upsert fails
        """
        actor = actor or Actor()
        try:
            try:
                file_format = detect_format(original_name)
            except UnsupportedFileFormatError:
                increment_counter(uploads_total, 1, file_format="unknown", status="rejected")
                logger.warning(
                    f"Rejected upload with unsupported format: {original_name}",
                    extra={"upload_name": original_name, "username": actor.username},
                )
                raise

            with log_operation(
                "Ingesting upload", logger=logger,
                upload_name=original_name, file_format=file_format,
            ), track_duration(upload_duration_seconds, file_format=file_format):
                try:
                    return self._ingest(file_path, original_name, file_format, actor)
                except Exception:
                    increment_counter(uploads_total, 1, file_format=file_format, status="failure")
                    raise
        finally:
            self._remove_upload(file_path)

    def _ingest(
        self,
        file_path: str,
        original_name: str,
        file_format: str,
        actor: Actor,
    ) -> IngestionResult:
        raw_rows = self.file_reader.read(file_path, file_format)
        logger.info(f"Read {len(raw_rows)} rows from {original_name}")

        records = self.normalizer.normalize_batch(raw_rows)

        duplicates = self.duplicate_detector.detect(records)
        upsert_result = self.store.upsert_batch(records)

        recorded = self.report_recorder.record(
            actor, original_name, upsert_result, duplicates
        )

        record_ingestion(
            file_format,
            processed=upsert_result.processed,
            inserted=upsert_result.inserted,
            updated=upsert_result.updated,
            duplicates_in_file=len(duplicates.in_batch),
            duplicates_existing=len(duplicates.existing),
        )

        return IngestionResult(
            processed=upsert_result.processed,
            inserted=upsert_result.inserted,
            updated=upsert_result.updated,
            report_id=recorded.report_id,
            duplicates_in_file_count=len(duplicates.in_batch),
            duplicates_existing_count=len(duplicates.existing),
            report_persisted=recorded.persisted,
        )

    @staticmethod
    def _remove_upload(file_path: str) -> None:
        try:
            os.remove(file_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete uploaded file {Path(file_path).name}: {e}")
