"""
Per-row outcome tracking for bulk upserts.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class UpsertOutcome(str, Enum):
    """What the store did with one batch row."""

    INSERTED = "inserted"
    UPDATED = "updated"


class RowOutcome(BaseModel):
    """
    Outcome of a single batch row, as confirmed by the store.

    Attributes:
        position: Zero-based index of the row in the batch
        email_id: Natural key of the row ("" for keyless rows)
        record_id: Identifier of the stored record that was written
        outcome: INSERTED or UPDATED
    """

    position: int = Field(..., ge=0)
    email_id: str = ""
    record_id: UUID
    outcome: UpsertOutcome

    class Config:
        frozen = True


class BatchUpsertResult(BaseModel):
    """
    Result of applying one batch, counted from per-row outcomes.
    """

    rows: list[RowOutcome] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def processed(self) -> int:
        return len(self.rows)

    @property
    def inserted(self) -> int:
        return sum(1 for row in self.rows if row.outcome is UpsertOutcome.INSERTED)

    @property
    def updated(self) -> int:
        return sum(1 for row in self.rows if row.outcome is UpsertOutcome.UPDATED)

    @property
    def keyless_inserted(self) -> int:
        return sum(
            1 for row in self.rows
            if row.outcome is UpsertOutcome.INSERTED and not row.email_id
        )
