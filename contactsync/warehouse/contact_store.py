"""
Idempotent upsert and read operations on the contact store.

The upsert engine is the only writer of contact_record rows. It uses
INSERT ... ON CONFLICT DO UPDATE keyed by the partial unique index on
non-empty email_id, and asks PostgreSQL for the outcome of every row.
"""

from collections.abc import Iterable, Sequence
from typing import Any
from uuid import UUID

import psycopg
from psycopg import sql

from contactsync.core.errors import UpsertError
from contactsync.core.filters import FilterSpec
from contactsync.core.models import BatchUpsertResult, ContactRecord, RowOutcome, UpsertOutcome
from contactsync.core.schema.fields import CANONICAL_FIELDS, FIELD_COLUMNS
from contactsync.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .query_builder import CONTACT_TABLE, select_list, where_clause

logger = get_logger(__name__)

CANONICAL_COLUMNS: tuple[str, ...] = tuple(FIELD_COLUMNS[f] for f in CANONICAL_FIELDS)


def _build_upsert_statement() -> sql.Composed:
    columns = [sql.Identifier(c) for c in CANONICAL_COLUMNS]
    return sql.SQL(
        """
        INSERT INTO {table} ({columns})
        VALUES ({values})
        ON CONFLICT (email_id) WHERE email_id <> '' DO UPDATE SET
            {assignments},
            updated_at = now()
        RETURNING record_id, (xmax = 0) AS inserted
        """
    ).format(
        table=sql.Identifier(CONTACT_TABLE),
        columns=sql.SQL(", ").join(columns),
        values=sql.SQL(", ").join(sql.Placeholder(c) for c in CANONICAL_COLUMNS),
        assignments=sql.SQL(",\n            ").join(
            sql.SQL("{col} = EXCLUDED.{col}").format(col=col) for col in columns
        ),
    )


UPSERT_STATEMENT = _build_upsert_statement()


class ContactStore:
    """
    Access to contact_record rows.

    Writes happen only through ``upsert_batch``; everything else is read-only.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize contact store.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def upsert_batch(self, records: Sequence[ContactRecord]) -> BatchUpsertResult:
        """
        Apply a normalized batch as one all-or-nothing bulk upsert.

        Rows run in batch order inside a single transaction, so on an
        intra-batch key collision the last row wins. Rows with an empty
        EmailID always insert. Every row's outcome comes from the store
        (``xmax = 0`` marks a fresh insert).

        Args:
            records: Normalized rows in batch order

        Returns:
            BatchUpsertResult with one tagged outcome per row

        Raises:
            UpsertError: If the bulk operation fails; nothing is applied
        """
        if not records:
            return BatchUpsertResult()

        params = []
        for record in records:
            row = record.to_columns()
            row["email_id"] = record.natural_key
            params.append(row)

        returned: list[dict[str, Any]] = []
        try:
            with self.pool.transaction() as cur:
                cur.executemany(UPSERT_STATEMENT, params, returning=True)
                while True:
                    returned.append(cur.fetchone())
                    if not cur.nextset():
                        break
        except psycopg.Error as e:
            logger.error(
                f"Bulk upsert failed, batch rolled back: {e}",
                extra={"batch_size": len(records)},
            )
            raise UpsertError(f"Bulk upsert of {len(records)} rows failed: {e}") from e

        rows = [
            RowOutcome(
                position=position,
                email_id=params[position]["email_id"],
                record_id=result["record_id"],
                outcome=UpsertOutcome.INSERTED if result["inserted"] else UpsertOutcome.UPDATED,
            )
            for position, result in enumerate(returned)
        ]
        result = BatchUpsertResult(rows=rows)

        logger.info(
            f"Upserted {result.processed} rows: {result.inserted} inserted, {result.updated} updated",
            extra={
                "processed": result.processed,
                "inserted": result.inserted,
                "updated": result.updated,
                "keyless_inserted": result.keyless_inserted,
            },
        )
        return result

    def find_existing_keys(self, keys: Iterable[str]) -> list[str]:
        """
        Which of the given non-empty keys are already stored.

        Args:
            keys: Candidate EmailID values

        Returns:
            Stored keys (order not significant)
        """
        candidates = sorted({k for k in keys if k})
        if not candidates:
            return []

        query = sql.SQL("SELECT email_id FROM {table} WHERE email_id = ANY(%s)").format(
            table=sql.Identifier(CONTACT_TABLE)
        )
        rows = self.pool.execute_query(query, (candidates,))
        return [row["email_id"] for row in rows]

    def find_matching(self, spec: FilterSpec, fields: Sequence[str]) -> list[dict[str, Any]]:
        """
        Rows matching a filter, projected to ``fields`` plus record_id.

        Ordered by creation time so repeated calls agree on order.
        """
        where, params = where_clause(spec)
        query = sql.SQL(
            "SELECT {columns} FROM {table}{where} ORDER BY created_at, record_id"
        ).format(
            columns=select_list(fields),
            table=sql.Identifier(CONTACT_TABLE),
            where=where,
        )
        return self.pool.execute_query(query, params)

    def fetch_by_ids(self, record_ids: Sequence[UUID], fields: Sequence[str]) -> list[dict[str, Any]]:
        """
        Fetch records by id in one read. Storage order is not guaranteed;
        ids that no longer exist are simply absent.
        """
        if not record_ids:
            return []

        query = sql.SQL("SELECT {columns} FROM {table} WHERE record_id = ANY(%s)").format(
            columns=select_list(fields),
            table=sql.Identifier(CONTACT_TABLE),
        )
        return self.pool.execute_query(query, (list(record_ids),))

    def get_by_email(self, email_id: str) -> ContactRecord | None:
        query = sql.SQL("SELECT * FROM {table} WHERE email_id = %s").format(
            table=sql.Identifier(CONTACT_TABLE)
        )
        rows = self.pool.execute_query(query, (email_id,))
        return ContactRecord.from_columns(rows[0]) if rows else None
