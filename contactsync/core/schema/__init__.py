"""
Canonical contact schema and header alias tables.

Import the normalizer from ``contactsync.core.schema.normalizer``.
"""

from .aliases import BUILTIN_HEADER_ALIASES, merge_aliases
from .fields import (
    CANONICAL_FIELDS,
    FIELD_COLUMNS,
    ID_FIELD,
    NATURAL_KEY_FIELD,
    PERMITTED_FIELDS,
    SENSITIVE_FIELDS,
    TIMESTAMP_FIELDS,
    default_export_fields,
)

__all__ = [
    "BUILTIN_HEADER_ALIASES",
    "CANONICAL_FIELDS",
    "FIELD_COLUMNS",
    "ID_FIELD",
    "NATURAL_KEY_FIELD",
    "PERMITTED_FIELDS",
    "SENSITIVE_FIELDS",
    "TIMESTAMP_FIELDS",
    "default_export_fields",
    "merge_aliases",
]
