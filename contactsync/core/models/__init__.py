"""
Core data models for contact ingestion and export.

All models use Pydantic for runtime validation and type safety.
"""

from .activity import Activity, Actor
from .contact_record import ContactRecord, columns_to_fields
from .export_snapshot import ExportSnapshot, SnapshotListing, SnapshotPage, SnapshotSummary
from .upload_report import DuplicateKey, UploadReport
from .upsert_result import BatchUpsertResult, RowOutcome, UpsertOutcome

__all__ = [
    "Activity",
    "Actor",
    "BatchUpsertResult",
    "ContactRecord",
    "DuplicateKey",
    "ExportSnapshot",
    "RowOutcome",
    "SnapshotListing",
    "SnapshotPage",
    "SnapshotSummary",
    "UploadReport",
    "UpsertOutcome",
    "columns_to_fields",
]
