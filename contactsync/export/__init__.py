"""
Contact export: projection, redaction, file writers and snapshots.
"""

from .projection import resolve_export_fields
from .redaction import SENTINEL, RedactionContext, redact
from .service import ExportRequest, ExportResult, ExportService
from .snapshot import SnapshotEngine
from .writers import MEDIA_TYPES, write_csv, write_xlsx

__all__ = [
    "ExportRequest",
    "ExportResult",
    "ExportService",
    "MEDIA_TYPES",
    "RedactionContext",
    "SENTINEL",
    "SnapshotEngine",
    "redact",
    "resolve_export_fields",
    "write_csv",
    "write_xlsx",
]
