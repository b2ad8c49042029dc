"""
Row normalization: arbitrary spreadsheet headers → canonical ContactRecord.
"""

import math
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from contactsync.core.models.contact_record import ContactRecord
from contactsync.core.schema.alias_config import AliasConfigLoader
from contactsync.core.schema.aliases import BUILTIN_HEADER_ALIASES, merge_aliases
from contactsync.core.schema.fields import CANONICAL_FIELDS, column_for
from contactsync.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ALIASES_PATH = "config/header_aliases.yaml"


def _cell_text(value: Any) -> str:
    """Render a cell as text; None and NaN count as empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


class RowNormalizer:
    """
    Maps a raw row onto the canonical schema.

    For each canonical field the accepted header spellings are tried in
    priority order and the first present, non-empty value wins. Fields with
    no match are "". Unrecognized columns are ignored. Never raises.
    """

    def __init__(self, aliases: Mapping[str, tuple[str, ...]] | None = None):
        self.aliases = merge_aliases(base=aliases) if aliases else merge_aliases()
        # Precomputed (column, spellings) pairs in canonical order
        self._plan = [
            (column_for(field), self.aliases[field]) for field in CANONICAL_FIELDS
        ]

    @classmethod
    def from_config(cls, aliases_path: str | Path | None = None) -> "RowNormalizer":
        """
        Build a normalizer with built-in aliases plus those in a YAML file.

        Args:
            aliases_path: YAML file (defaults to env var HEADER_ALIASES_PATH
                or config/header_aliases.yaml)
        """
        path = aliases_path or os.getenv("HEADER_ALIASES_PATH", DEFAULT_ALIASES_PATH)
        if Path(path).exists():
            return cls(AliasConfigLoader(path).load_aliases())

        logger.warning(f"Header alias file not found: {path}; using built-in aliases")
        return cls(BUILTIN_HEADER_ALIASES)

    def normalize(self, raw: Mapping[str, Any]) -> ContactRecord:
        """
        Produce a ContactRecord from one raw row.

        Args:
            raw: Mapping of source header to cell value

        Returns:
            ContactRecord with every canonical field populated
        """
        values: dict[str, str] = {}
        for column, spellings in self._plan:
            values[column] = ""
            for spelling in spellings:
                text = _cell_text(raw.get(spelling))
                if text:
                    values[column] = text
                    break
        return ContactRecord(**values)

    def normalize_batch(self, rows: Iterable[Mapping[str, Any]]) -> list[ContactRecord]:
        """Normalize rows, preserving their order."""
        return [self.normalize(row) for row in rows]
