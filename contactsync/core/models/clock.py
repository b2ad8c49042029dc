"""
Timestamp defaults for stored models.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time, safe to bind to TIMESTAMPTZ columns."""
    return datetime.now(timezone.utc)
