"""
ExportSnapshot model: frozen description of one export.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .clock import utc_now


class ExportSnapshot(BaseModel):
    """
    Point-in-time capture of an export's matched records and projection.

    ``item_ids`` is the source of truth for what the export contained; it is
    never recomputed from ``filters``.

    Attributes:
        snapshot_id: Primary key (assigned by the store)
        user_id: Requesting identity, if known
        username: Requesting user name
        format: Declared output format
        fields: Ordered field names used for projection
        filters: Filter parameters that produced the export
        total: Number of matched records at capture time
        item_ids: Matched record identifiers in capture order
        created_at: Capture time
    """

    snapshot_id: UUID | None = None
    user_id: str | None = None
    username: str = "unknown"
    format: Literal["csv", "xlsx"]
    fields: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
    total: int = Field(0, ge=0)
    item_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    class Config:
        frozen = True


class SnapshotPage(BaseModel):
    """One replayed page of a snapshot."""

    snapshot_id: UUID
    fields: list[str]
    total: int
    page: int
    items: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "snapshotId": str(self.snapshot_id),
            "fields": list(self.fields),
            "total": self.total,
            "page": self.page,
            "items": self.items,
        }


class SnapshotSummary(BaseModel):
    """Snapshot metadata for listings; the captured ids are left out."""

    snapshot_id: UUID
    user_id: str | None = None
    username: str = "unknown"
    format: Literal["csv", "xlsx"]
    fields: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
    total: int = Field(0, ge=0)
    created_at: datetime

    class Config:
        frozen = True


class SnapshotListing(BaseModel):
    """Paginated snapshot metadata, newest first."""

    items: list[SnapshotSummary]
    total: int
    page: int
    pages: int
