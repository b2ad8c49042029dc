"""
Exception hierarchy for the ingestion and export paths.
"""


class ContactSyncError(Exception):
    """Base class for all contactsync errors."""


class UnsupportedFileFormatError(ContactSyncError):
    """Raised when an upload is neither CSV nor XLSX."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Unsupported file format for '{filename}'. Please upload CSV or XLSX."
        )


class IngestionError(ContactSyncError):
    """Raised when an ingestion run cannot complete."""


class UpsertError(IngestionError):
    """Raised when the bulk upsert fails; nothing from the batch was applied."""


class ExportError(ContactSyncError):
    """Raised when an export cannot be produced."""


class UnsupportedExportFormatError(ExportError):
    """Raised when an export format other than csv or xlsx is requested."""

    def __init__(self, export_format: str):
        self.export_format = export_format
        super().__init__(f"Unsupported export format: {export_format!r} (expected csv or xlsx)")


class InvalidFieldError(ContactSyncError, ValueError):
    """Raised when a field name is outside the canonical schema."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Unknown field: {field_name!r}")


class InvalidFilterError(ContactSyncError, ValueError):
    """Raised when a filter specification cannot be translated to a query."""


class SnapshotNotFoundError(ContactSyncError):
    """Raised when a snapshot id does not exist."""

    def __init__(self, snapshot_id):
        self.snapshot_id = snapshot_id
        super().__init__(f"Export snapshot not found: {snapshot_id}")
