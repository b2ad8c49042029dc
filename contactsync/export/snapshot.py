"""
Export snapshot capture and replay.

A snapshot freezes which records an export contained and how they were
projected. Replay reads the current state of those records, in capture
order, without re-running the export's filters.
"""

from collections.abc import Sequence
from uuid import UUID

from contactsync.core.errors import SnapshotNotFoundError, UnsupportedExportFormatError
from contactsync.core.filters import FilterSpec
from contactsync.core.models import Actor, ExportSnapshot, SnapshotListing, SnapshotPage
from contactsync.export.projection import (
    order_by_ids,
    page_window,
    project_row,
    resolve_export_fields,
)
from contactsync.export.redaction import RedactionContext, redact
from contactsync.export.writers import WRITERS
from contactsync.observability.logger import get_logger
from contactsync.observability.metrics import (
    increment_counter,
    snapshot_missing_records_total,
    snapshot_replays_total,
)
from contactsync.utils.validation import (
    validate_limit,
    validate_page,
    validate_page_size,
    validate_snapshot_id,
)
from contactsync.warehouse.connection import DatabaseConnectionPool
from contactsync.warehouse.contact_store import ContactStore
from contactsync.warehouse.snapshots import SnapshotRepository

logger = get_logger(__name__)


class SnapshotEngine:
    """
    Captures export snapshots and replays them page by page.

    Usage:
        engine = SnapshotEngine(pool)
        snapshot = engine.capture(actor, "csv", fields, spec, record_ids)
        page = engine.replay(snapshot.snapshot_id, page=1, page_size=50)
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        store: ContactStore | None = None,
        repository: SnapshotRepository | None = None,
    ):
        self.store = store or ContactStore(pool)
        self.repository = repository or SnapshotRepository(pool)

    def capture(
        self,
        actor: Actor,
        export_format: str,
        fields: Sequence[str] | str | None,
        filter_spec: FilterSpec | None,
        record_ids: Sequence[UUID],
    ) -> ExportSnapshot:
        """
        Persist a snapshot of an export in one write.

        Args:
            actor: Requesting identity
            export_format: "csv" or "xlsx"
            fields: Projection used for the export (normalized here)
            filter_spec: Filters that produced the export
            record_ids: Matched record ids in export order

        Returns:
            The stored snapshot, including its id

        Raises:
            UnsupportedExportFormatError: If the format is not csv or xlsx
            InvalidFieldError: If a field is not permitted
            psycopg.Error: If the write fails
        """
        if export_format not in WRITERS:
            raise UnsupportedExportFormatError(export_format)

        snapshot = ExportSnapshot(
            user_id=actor.user_id,
            username=actor.username,
            format=export_format,
            fields=resolve_export_fields(fields),
            filters=(filter_spec or FilterSpec()).to_params(),
            total=len(record_ids),
            item_ids=list(record_ids),
        )
        snapshot_id = self.repository.insert(snapshot)

        logger.info(
            f"Captured export snapshot {snapshot_id} ({snapshot.total} records)",
            extra={"snapshot_id": str(snapshot_id), "total": snapshot.total},
        )
        return snapshot.model_copy(update={"snapshot_id": snapshot_id})

    def get(self, snapshot_id: UUID | str) -> ExportSnapshot:
        """
        Raises:
            ValidationError: If the id is not a UUID
            SnapshotNotFoundError: If no snapshot has this id
        """
        snapshot_id = validate_snapshot_id(snapshot_id)
        snapshot = self.repository.get(snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(snapshot_id)
        return snapshot

    def replay(self, snapshot_id: UUID | str, page: int = 1, page_size: int = 100) -> SnapshotPage:
        """
        Replay one page of a snapshot.

        Items follow the captured id order and are projected to the
        snapshot's own field list. Records deleted since capture are left
        out of the page; ``total`` still reports the captured count.
        Sensitive fields are redacted.

        Raises:
            ValidationError: If page or page_size is out of range
            SnapshotNotFoundError: If no snapshot has this id
        """
        page = validate_page(page)
        page_size = validate_page_size(page_size)

        try:
            snapshot = self.get(snapshot_id)
        except SnapshotNotFoundError:
            increment_counter(snapshot_replays_total, 1, status="not_found")
            raise

        fields = list(snapshot.fields) or resolve_export_fields(None)
        window = page_window(snapshot.item_ids, page, page_size)

        rows = self.store.fetch_by_ids(window, fields)
        ordered = order_by_ids(rows, window)

        missing = len(window) - len(ordered)
        if missing:
            increment_counter(snapshot_missing_records_total, missing)
            logger.info(
                f"Snapshot {snapshot.snapshot_id} page {page}: {missing} records no longer exist",
                extra={"snapshot_id": str(snapshot.snapshot_id), "missing": missing},
            )

        items = [
            redact(project_row(row, fields), RedactionContext.VIEW)
            for row in ordered
        ]
        increment_counter(snapshot_replays_total, 1, status="success")

        return SnapshotPage(
            snapshot_id=snapshot.snapshot_id,
            fields=fields,
            total=snapshot.total,
            page=page,
            items=items,
        )

    def list_snapshots(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> SnapshotListing:
        """Snapshot metadata newest first; never carries record data."""
        return self.repository.list_snapshots(
            username=username,
            page=validate_page(page),
            limit=validate_limit(limit, max_limit=100),
        )
