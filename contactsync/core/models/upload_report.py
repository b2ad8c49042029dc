"""
UploadReport model: immutable audit record of one ingestion run.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .clock import utc_now


class DuplicateKey(BaseModel):
    """A natural key repeated inside one uploaded file."""

    email_id: str = Field(..., min_length=1)
    count: int = Field(..., ge=2)

    class Config:
        frozen = True


class UploadReport(BaseModel):
    """
    Immutable audit record of one ingestion run.

    Attributes:
        report_id: Primary key (assigned by the store)
        user_id: Identifier of the operator who ran the import, if known
        username: Operator name ("unknown" when not provided)
        filename: Original name of the uploaded file
        processed: Rows applied by the upsert engine
        inserted: Rows that created a new record
        updated: Rows that overwrote an existing record
        duplicates_in_file: Keys repeated inside the file, first-seen order
        duplicates_existing: Keys already stored before the run
        created_at: When the report was written
    """

    report_id: UUID | None = None
    user_id: str | None = None
    username: str = "unknown"
    filename: str
    processed: int = Field(0, ge=0)
    inserted: int = Field(0, ge=0)
    updated: int = Field(0, ge=0)
    duplicates_in_file: list[DuplicateKey] = Field(default_factory=list)
    duplicates_existing: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "username": "ops.jane",
                "filename": "contacts-march.csv",
                "processed": 3,
                "inserted": 2,
                "updated": 1,
                "duplicates_in_file": [{"email_id": "a@example.com", "count": 2}],
                "duplicates_existing": ["a@example.com"],
            }
        }
