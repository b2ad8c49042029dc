"""
Unit tests for FilterSpec construction and SQL parameter building.
"""

import pytest

from contactsync.core.errors import InvalidFieldError, InvalidFilterError
from contactsync.core.filters import FieldCondition, FilterSpec, MatchOperator
from contactsync.core.schema import CANONICAL_FIELDS
from contactsync.warehouse.query_builder import escape_like, select_list, where_clause


@pytest.mark.unit
class TestFilterSpec:
    """Tests for FilterSpec"""

    def test_single_value_becomes_contains(self):
        spec = FilterSpec.from_params({"City": "London"})
        assert spec.conditions == [
            FieldCondition(field="City", operator=MatchOperator.CONTAINS, values=["London"])
        ]

    def test_comma_list_becomes_one_of(self):
        spec = FilterSpec.from_params({"Country": "US, CA,"})
        condition = spec.conditions[0]
        assert condition.operator is MatchOperator.ONE_OF
        assert condition.values == ["US", "CA"]

    def test_list_value_becomes_one_of(self):
        spec = FilterSpec.from_params({"Level": ["VP", "Director"]})
        assert spec.conditions[0].operator is MatchOperator.ONE_OF

    def test_reserved_and_empty_params_skipped(self):
        spec = FilterSpec.from_params({
            "search": " ada ",
            "format": "csv",
            "fields": "FirstName",
            "page": "2",
            "limit": "10",
            "City": "",
            "State": None,
        })
        assert spec.search == "ada"
        assert spec.conditions == []

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidFilterError, match="Nickname"):
            FilterSpec.from_params({"Nickname": "Ace"})

    def test_unknown_operator_rejected(self):
        with pytest.raises(InvalidFilterError):
            FilterSpec.build(conditions=[{"field": "City", "operator": "regex", "values": ["L.*"]}])

    def test_equals_takes_one_value(self):
        with pytest.raises(InvalidFilterError):
            FilterSpec.build(conditions=[
                {"field": "City", "operator": "equals", "values": ["a", "b"]}
            ])

    def test_to_params_is_json_ready(self):
        spec = FilterSpec.from_params({"search": "ada", "City": "London"})
        assert spec.to_params() == {
            "search": "ada",
            "conditions": [{"field": "City", "operator": "contains", "values": ["London"]}],
        }


@pytest.mark.unit
class TestQueryBuilder:
    """Tests for query parameter construction"""

    def test_escape_like(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"

    def test_empty_spec_has_no_params(self):
        _, params = where_clause(FilterSpec())
        assert params == []

    def test_search_binds_one_pattern_per_field(self):
        _, params = where_clause(FilterSpec(search="100%"))
        assert params == ["%100\\%%"] * 6

    def test_condition_params(self):
        spec = FilterSpec.build(conditions=[
            {"field": "City", "operator": "equals", "values": ["London"]},
            {"field": "JobTitle", "operator": "contains", "values": ["Head_of"]},
            {"field": "Country", "operator": "one_of", "values": ["UK", "Us"]},
        ])
        _, params = where_clause(spec)
        assert params == ["London", "%Head\\_of%", ["uk", "us"]]

    def test_select_list_rejects_unknown_field(self):
        with pytest.raises(InvalidFieldError):
            select_list(["FirstName", "DROP TABLE"])

    def test_every_canonical_field_selectable(self):
        select_list(CANONICAL_FIELDS)
