"""
Duplicate detection for uploaded batches.

Both results are informational: they feed the upload report and never
stop a batch from being applied.
"""

from collections.abc import Sequence

import psycopg
from pydantic import BaseModel, Field

from contactsync.core.errors import IngestionError
from contactsync.core.models import ContactRecord, DuplicateKey
from contactsync.observability.logger import get_logger
from contactsync.warehouse.contact_store import ContactStore

logger = get_logger(__name__)


def count_keys(records: Sequence[ContactRecord]) -> dict[str, int]:
    """Occurrences of each non-empty natural key, in first-seen order."""
    counts: dict[str, int] = {}
    for record in records:
        key = record.natural_key
        if not key:
            continue
        counts[key] = counts.get(key, 0) + 1
    return counts


def distinct_keys(records: Sequence[ContactRecord]) -> list[str]:
    return list(count_keys(records))


def find_in_batch_duplicates(records: Sequence[ContactRecord]) -> list[DuplicateKey]:
    """
    Keys that occur more than once in the batch.

    Returns:
        One DuplicateKey per repeated key, in first-seen order
    """
    return [
        DuplicateKey(email_id=key, count=count)
        for key, count in count_keys(records).items()
        if count > 1
    ]


class DuplicateReport(BaseModel):
    in_batch: list[DuplicateKey] = Field(default_factory=list)
    existing: list[str] = Field(default_factory=list)


class DuplicateDetector:
    """
    Computes in-batch duplicates and cross-references the store.
    """

    def __init__(self, store: ContactStore):
        self.store = store

    def detect(self, records: Sequence[ContactRecord]) -> DuplicateReport:
        """
        Must run before the batch is applied so ``existing`` reflects the
        store as it was.

        Raises:
            IngestionError: If the existence lookup fails
        """
        in_batch = find_in_batch_duplicates(records)
        keys = distinct_keys(records)
        existing: list[str] = []
        if keys:
            try:
                existing = self.store.find_existing_keys(keys)
            except psycopg.Error as e:
                raise IngestionError(f"Duplicate lookup failed: {e}") from e

        # store order is arbitrary; report keys in file order
        stored = set(existing)
        existing = [key for key in keys if key in stored]

        if in_batch or existing:
            logger.info(
                f"Duplicate keys: {len(in_batch)} repeated in file, {len(existing)} already stored",
                extra={
                    "duplicates_in_file": len(in_batch),
                    "duplicates_existing": len(existing),
                },
            )

        return DuplicateReport(in_batch=in_batch, existing=existing)
