"""
Activity model: append-only audit event.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from .clock import utc_now


class Actor(BaseModel):
    """The identity on whose behalf an import or export runs."""

    user_id: str | None = None
    username: str = "unknown"

    class Config:
        frozen = True


class Activity(BaseModel):
    """
    Audit event referencing an actor, an action and contextual metadata.

    Attributes:
        activity_id: Primary key (assigned by the store)
        user_id: Acting user id, if known
        username: Acting user name
        action: Action kind (e.g. "UPLOAD_CONTACTS", "EXPORT_CONTACTS")
        metadata: Context such as counts, filename or snapshot id
        created_at: When the event happened
    """

    activity_id: UUID | None = None
    user_id: str | None = None
    username: str = "unknown"
    action: str = Field(..., min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)

    class Config:
        json_schema_extra = {
            "example": {
                "username": "ops.jane",
                "action": "EXPORT_CONTACTS",
                "metadata": {"snapshot_id": "5b0c...", "total": 120},
            }
        }
