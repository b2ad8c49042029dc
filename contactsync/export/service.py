"""
Contact export service.

Flow: validate format and fields → query matches → project → write file →
capture snapshot → record activity
"""

from typing import Any
from uuid import UUID

import psycopg
from pydantic import BaseModel, Field, field_validator

from contactsync.core.errors import ExportError, UnsupportedExportFormatError
from contactsync.core.filters import FilterSpec
from contactsync.core.models import Actor
from contactsync.core.schema.fields import FIELD_COLUMNS, ID_FIELD
from contactsync.export.projection import project_row, resolve_export_fields
from contactsync.export.redaction import RedactionContext, redact
from contactsync.export.snapshot import SnapshotEngine
from contactsync.export.writers import MEDIA_TYPES, WRITERS
from contactsync.observability.activity import EXPORT_CONTACTS, ActivityRecorder
from contactsync.observability.logger import get_logger, log_operation
from contactsync.observability.metrics import (
    exported_records_total,
    exports_total,
    increment_counter,
    record_side_effect_failure,
)
from contactsync.warehouse.connection import DatabaseConnectionPool
from contactsync.warehouse.contact_store import ContactStore

logger = get_logger(__name__)


class ExportRequest(BaseModel):
    """
    Export parameters.

    Attributes:
        format: "csv" or "xlsx"
        search: Free-text search term
        filters: Field filters, ``{"City": "Austin"}`` or ``{"Country": "US,CA"}``
        fields: Explicit projection (comma string or list); empty for the default
    """

    format: str = "csv"
    search: str = ""
    filters: dict[str, Any] = Field(default_factory=dict)
    fields: str | list[str] | None = None

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, value: Any) -> str:
        return str(value or "").strip().lower()


class ExportResult(BaseModel):
    content: bytes
    media_type: str
    filename: str
    total: int
    snapshot_id: UUID | None = None


class ExportService:
    """
    Produces export files and captures a snapshot of each export.

    Only the file itself is required to succeed; snapshot capture and the
    activity entry are best-effort.
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        snapshot_engine: SnapshotEngine | None = None,
        activity_recorder: ActivityRecorder | None = None,
    ):
        self.store = ContactStore(pool)
        self.snapshot_engine = snapshot_engine or SnapshotEngine(pool, store=self.store)
        self.activity_recorder = activity_recorder or ActivityRecorder(pool)

    def export(self, actor: Actor, request: ExportRequest) -> ExportResult:
        """
        Build an export file for the matching contacts.

        Returns:
            ExportResult with the file bytes and the snapshot id (None when
            the snapshot could not be stored)

        Raises:
            UnsupportedExportFormatError: If the format is not csv or xlsx
            InvalidFieldError: If a requested field is not permitted
            InvalidFilterError: If a filter names an unknown field
            ExportError: If the store query fails
        """
        export_format = request.format
        if export_format not in WRITERS:
            increment_counter(exports_total, 1, format="unknown", status="failure")
            raise UnsupportedExportFormatError(export_format)

        fields = resolve_export_fields(request.fields)
        spec = FilterSpec.from_params({**request.filters, "search": request.search})

        with log_operation(
            "Exporting contacts", logger=logger,
            format=export_format, username=actor.username,
        ):
            try:
                rows = self.store.find_matching(spec, fields)
            except psycopg.Error as e:
                increment_counter(exports_total, 1, format=export_format, status="failure")
                raise ExportError(f"Export query failed: {e}") from e

            record_ids = [row[FIELD_COLUMNS[ID_FIELD]] for row in rows]
            projected = [
                redact(project_row(row, fields), RedactionContext.EXPORT)
                for row in rows
            ]
            content = WRITERS[export_format](fields, projected)

            snapshot_id = self._capture(actor, export_format, fields, spec, record_ids)

            self.activity_recorder.record(
                actor,
                EXPORT_CONTACTS,
                format=export_format,
                fields=fields,
                filters=spec.to_params(),
                total=len(record_ids),
                snapshot_id=snapshot_id,
            )

        increment_counter(exports_total, 1, format=export_format, status="success")
        increment_counter(exported_records_total, len(record_ids), format=export_format)

        return ExportResult(
            content=content,
            media_type=MEDIA_TYPES[export_format],
            filename=f"contacts.{export_format}",
            total=len(record_ids),
            snapshot_id=snapshot_id,
        )

    def _capture(
        self,
        actor: Actor,
        export_format: str,
        fields: list[str],
        spec: FilterSpec,
        record_ids: list[UUID],
    ) -> UUID | None:
        try:
            snapshot = self.snapshot_engine.capture(
                actor, export_format, fields, spec, record_ids
            )
        except psycopg.Error as e:
            record_side_effect_failure("export_snapshot")
            logger.warning(
                f"Export snapshot not captured: {e}",
                extra={"format": export_format, "total": len(record_ids)},
                exc_info=True,
            )
            return None
        return snapshot.snapshot_id
