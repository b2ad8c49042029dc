"""
Redaction of sensitive contact fields.

Export files carry data verbatim. Every other read path that returns record
data (snapshot replay) masks the sensitive fields.
"""

from enum import Enum
from typing import Any, Mapping

from contactsync.core.schema.fields import SENSITIVE_FIELDS

SENTINEL = "NA"


class RedactionContext(str, Enum):
    EXPORT = "export"
    VIEW = "view"


def redact(row: Mapping[str, Any], context: RedactionContext) -> dict[str, Any]:
    """
    Copy of ``row`` with sensitive fields masked for ``context``.

    In VIEW context, sensitive fields present in the row are replaced with
    the sentinel; absent fields are not added. EXPORT returns an equal copy.
    """
    redacted = dict(row)
    if context is RedactionContext.EXPORT:
        return redacted

    for field_name in SENSITIVE_FIELDS:
        if field_name in redacted:
            redacted[field_name] = SENTINEL
    return redacted
