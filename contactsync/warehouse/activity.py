"""
Activity log operations.

Insert and query helpers for the append-only activity_log table.
"""

from typing import Any
from uuid import UUID

import psycopg
from psycopg.types.json import Jsonb

from contactsync.core.models.activity import Activity
from contactsync.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)


def insert_activity(pool: DatabaseConnectionPool, activity: Activity) -> UUID:
    """
    Insert a single activity entry.

    Args:
        pool: Database connection pool
        activity: Activity model instance

    Returns:
        activity_id: Generated id

    Raises:
        psycopg.DatabaseError: If insert fails
    """
    insert_sql = """
        INSERT INTO activity_log (user_id, username, action, metadata, created_at)
        VALUES (%(user_id)s, %(username)s, %(action)s, %(metadata)s, %(created_at)s)
        RETURNING activity_id;
    """

    try:
        with pool.transaction() as cur:
            cur.execute(
                insert_sql,
                {
                    "user_id": activity.user_id,
                    "username": activity.username,
                    "action": activity.action,
                    "metadata": Jsonb(activity.metadata),
                    "created_at": activity.created_at,
                },
            )
            activity_id = cur.fetchone()["activity_id"]

    except psycopg.DatabaseError as e:
        logger.error(f"Failed to insert activity: {e}")
        raise

    logger.debug(f"Inserted activity {activity_id}: action={activity.action}")
    return activity_id


def query_activities(
    pool: DatabaseConnectionPool,
    action: str | None = None,
    username: str | None = None,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """
    Query activity entries, newest first.

    Args:
        pool: Database connection pool
        action: Optional action kind to filter by
        username: Optional user name to filter by
        limit: Maximum number of entries to return
    """
    clauses = []
    if action:
        clauses.append("action = %(action)s")
    if username:
        clauses.append("username = %(username)s")
    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

    return pool.execute_query(
        "SELECT activity_id, user_id, username, action, metadata, created_at "
        f"FROM activity_log{where} ORDER BY created_at DESC LIMIT %(limit)s",
        {"action": action, "username": username, "limit": limit},
    )
