"""
Best-effort activity recording.

Activity entries accompany imports and exports but are never required for
those operations to succeed: a failed write is logged and counted, and the
caller carries on.
"""

from typing import Any
from uuid import UUID

import psycopg

from contactsync.core.models.activity import Activity, Actor
from contactsync.observability.logger import get_logger
from contactsync.observability.metrics import record_side_effect_failure
from contactsync.warehouse.activity import insert_activity
from contactsync.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)

UPLOAD_CONTACTS = "UPLOAD_CONTACTS"
EXPORT_CONTACTS = "EXPORT_CONTACTS"


class ActivityRecorder:
    """
    Writes Activity entries without ever failing the surrounding operation.

    Usage:
        recorder = ActivityRecorder(pool)
        recorder.record(actor, EXPORT_CONTACTS, snapshot_id=str(snap_id), total=12)
    """

    def __init__(self, pool: DatabaseConnectionPool | None = None):
        """
        Args:
            pool: Database connection pool (None disables persistence)
        """
        self.pool = pool

    def build(self, actor: Actor, action: str, **metadata: Any) -> Activity:
        return Activity(
            user_id=actor.user_id,
            username=actor.username,
            action=action,
            metadata={k: self._jsonable(v) for k, v in metadata.items()},
        )

    def record(self, actor: Actor, action: str, **metadata: Any) -> UUID | None:
        """
        Persist one activity entry.

        Returns:
            The activity id, or None if nothing was written
        """
        activity = self.build(actor, action, **metadata)
        if self.pool is None:
            return None

        try:
            return insert_activity(self.pool, activity)
        except psycopg.Error as e:
            record_side_effect_failure("activity")
            logger.warning(
                f"Activity log error: {e}",
                extra={"action": action, "username": actor.username},
            )
            return None

    @staticmethod
    def _jsonable(value: Any) -> Any:
        if isinstance(value, UUID):
            return str(value)
        return value
