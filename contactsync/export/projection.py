"""
Field resolution and row projection for exports and snapshot replay.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any
from uuid import UUID

from contactsync.core.errors import InvalidFieldError
from contactsync.core.schema.fields import (
    FIELD_COLUMNS,
    ID_FIELD,
    PERMITTED_FIELDS,
    default_export_fields,
)


def resolve_export_fields(requested: str | Iterable[str] | None = None) -> list[str]:
    """
    Ordered field list for an export.

    Args:
        requested: Comma-separated string or list of field names; empty
            means the default order

    Returns:
        Field names, stripped and de-duplicated in first-seen order

    Raises:
        InvalidFieldError: If a name is not a permitted field
    """
    if requested is None:
        return default_export_fields()
    if isinstance(requested, str):
        requested = requested.split(",")

    fields: list[str] = []
    for name in requested:
        name = str(name).strip()
        if not name or name in fields:
            continue
        if name not in PERMITTED_FIELDS:
            raise InvalidFieldError(name)
        fields.append(name)

    return fields or default_export_fields()


def render_value(value: Any) -> Any:
    """Plain text for identifiers and timestamps; None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def project_row(row: dict[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    """
    Project a storage row (column names) onto canonical ``fields``.

    Missing values come back as "".
    """
    return {
        field_name: render_value(row.get(FIELD_COLUMNS[field_name]))
        for field_name in fields
    }


def order_by_ids(rows: Iterable[dict[str, Any]], record_ids: Sequence[UUID]) -> list[dict[str, Any]]:
    """
    Arrange storage rows in ``record_ids`` order; ids with no row are skipped.
    """
    by_id = {str(row[FIELD_COLUMNS[ID_FIELD]]): row for row in rows}
    ordered = []
    for record_id in record_ids:
        row = by_id.get(str(record_id))
        if row is not None:
            ordered.append(row)
    return ordered


def page_window(item_ids: Sequence[UUID], page: int, page_size: int) -> list[UUID]:
    """1-based page slice of a snapshot's id list."""
    start = (page - 1) * page_size
    return list(item_ids[start:start + page_size])
