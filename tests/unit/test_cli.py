"""
Unit tests for CLI helpers.
"""

import json
from datetime import datetime
from uuid import uuid4

import pytest

from contactsync.cli.admin_cli import parse_filters
from contactsync.cli.common import print_json
from contactsync.core.models import Actor
from contactsync.utils.validation import ValidationError


@pytest.mark.unit
class TestParseFilters:

    def test_pairs_become_mapping(self):
        assert parse_filters(["City=London", "Country=United Kingdom"]) == {
            "City": "London",
            "Country": "United Kingdom",
        }

    def test_repeated_field_joins_values(self):
        assert parse_filters(["City=London", "City=Paris"]) == {"City": "London,Paris"}

    def test_value_may_contain_equals(self):
        assert parse_filters(["Notes=a=b"]) == {"Notes": "a=b"}

    def test_none_is_empty(self):
        assert parse_filters(None) == {}

    @pytest.mark.parametrize("pair", ["City", "=London", "  =x"])
    def test_malformed_pair(self, pair):
        with pytest.raises(ValidationError, match="FIELD=VALUE"):
            parse_filters([pair])


@pytest.mark.unit
def test_print_json_handles_ids_dates_and_models(capsys):
    record_id = uuid4()
    print_json({
        "id": record_id,
        "at": datetime(2024, 1, 2, 3, 4, 5),
        "actor": Actor(username="jane"),
    })

    data = json.loads(capsys.readouterr().out)
    assert data["id"] == str(record_id)
    assert data["at"] == "2024-01-02T03:04:05"
    assert data["actor"]["username"] == "jane"
