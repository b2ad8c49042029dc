"""
Query filter specifications.
"""

from .filter_spec import RESERVED_PARAMS, FieldCondition, FilterSpec, MatchOperator

__all__ = [
    "FieldCondition",
    "FilterSpec",
    "MatchOperator",
    "RESERVED_PARAMS",
]
