"""
Translation of FilterSpec and field projections into SQL.

Only identifiers from the canonical column table and bound parameters are
ever placed in a statement.
"""

from collections.abc import Iterable

from psycopg import sql

from contactsync.core.errors import InvalidFieldError, InvalidFilterError
from contactsync.core.filters import FilterSpec, MatchOperator
from contactsync.core.schema.fields import FIELD_COLUMNS, ID_FIELD, SEARCH_FIELDS

CONTACT_TABLE = "contact_record"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(field_name: str) -> sql.Identifier:
    try:
        return sql.Identifier(FIELD_COLUMNS[field_name])
    except KeyError:
        raise InvalidFieldError(field_name) from None


def select_list(fields: Iterable[str]) -> sql.Composable:
    """
    Columns for a projection; the record id is always selected so rows can
    be matched back to snapshot ids.
    """
    columns = [FIELD_COLUMNS[ID_FIELD]]
    for field_name in fields:
        column = FIELD_COLUMNS.get(field_name)
        if column is None:
            raise InvalidFieldError(field_name)
        if column not in columns:
            columns.append(column)
    return sql.SQL(", ").join(sql.Identifier(c) for c in columns)


def where_clause(spec: FilterSpec) -> tuple[sql.Composable, list]:
    """
    Build a WHERE clause (possibly empty) and its parameters.

    Raises:
        InvalidFilterError: If an operator is not supported
    """
    clauses: list[sql.Composable] = []
    params: list = []

    if spec.search:
        pattern = f"%{escape_like(spec.search)}%"
        clauses.append(
            sql.SQL("({})").format(
                sql.SQL(" OR ").join(
                    sql.SQL("{} ILIKE %s").format(_column(f)) for f in SEARCH_FIELDS
                )
            )
        )
        params.extend([pattern] * len(SEARCH_FIELDS))

    for condition in spec.conditions:
        column = _column(condition.field)
        if condition.operator is MatchOperator.EQUALS:
            clauses.append(sql.SQL("{} = %s").format(column))
            params.append(condition.values[0])
        elif condition.operator is MatchOperator.CONTAINS:
            clauses.append(sql.SQL("{} ILIKE %s").format(column))
            params.append(f"%{escape_like(condition.values[0])}%")
        elif condition.operator is MatchOperator.ONE_OF:
            clauses.append(sql.SQL("lower({}) = ANY(%s)").format(column))
            params.append([v.lower() for v in condition.values])
        else:
            raise InvalidFilterError(f"Unsupported operator: {condition.operator}")

    if not clauses:
        return sql.SQL(""), params

    return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params
