"""
Unit tests for input validation utilities.
"""

import pytest
from uuid import uuid4

from contactsync.utils.validation import (
    ValidationError,
    validate_file_path,
    validate_limit,
    validate_page,
    validate_page_size,
    validate_snapshot_id,
    validate_username,
    validate_uuid,
)


@pytest.mark.unit
class TestPaging:
    """Tests for page and size validation"""

    def test_valid_page(self):
        assert validate_page(3) == 3

    @pytest.mark.parametrize("page", [0, -1, "1", 1.0, True])
    def test_invalid_page(self, page):
        with pytest.raises(ValidationError):
            validate_page(page)

    def test_page_size_bounds(self):
        assert validate_page_size(1) == 1
        assert validate_page_size(1000) == 1000
        with pytest.raises(ValidationError):
            validate_page_size(0)
        with pytest.raises(ValidationError):
            validate_page_size(1001)

    def test_limit_max(self):
        with pytest.raises(ValidationError, match="maximum of 50"):
            validate_limit(51, max_limit=50)

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)


@pytest.mark.unit
class TestIdentifiers:
    """Tests for UUID and username validation"""

    def test_uuid_from_string(self):
        value = uuid4()
        assert validate_uuid(f" {value} ") == value
        assert validate_snapshot_id(str(value)) == value

    def test_uuid_passthrough(self):
        value = uuid4()
        assert validate_snapshot_id(value) is value

    @pytest.mark.parametrize("value", ["", "not-a-uuid", None, 42])
    def test_invalid_uuid(self, value):
        with pytest.raises(ValidationError):
            validate_uuid(value)

    def test_username_defaults(self):
        assert validate_username(None) == "unknown"
        assert validate_username("   ") == "unknown"
        assert validate_username(" ops.jane ") == "ops.jane"

    def test_username_rejects_spaces(self):
        with pytest.raises(ValidationError):
            validate_username("ops jane")

    def test_file_path(self):
        assert validate_file_path(" /data/contacts.csv ") == "/data/contacts.csv"
        with pytest.raises(ValidationError, match="traversal"):
            validate_file_path("../../etc/passwd")
        with pytest.raises(ValidationError, match="null"):
            validate_file_path("/data/a\x00.csv")
