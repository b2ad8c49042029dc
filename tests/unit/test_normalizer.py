"""
Unit tests for header alias resolution and row normalization.

Includes property-based testing with hypothesis for normalizer totality.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from contactsync.core.models import ContactRecord
from contactsync.core.schema import BUILTIN_HEADER_ALIASES, CANONICAL_FIELDS, merge_aliases
from contactsync.core.schema.alias_config import AliasConfigLoader
from contactsync.core.schema.normalizer import RowNormalizer


@pytest.mark.unit
class TestRowNormalizer:
    """Tests for RowNormalizer"""

    def setup_method(self):
        self.normalizer = RowNormalizer()

    def test_canonical_headers(self):
        record = self.normalizer.normalize({"FirstName": "Ada", "EmailID": "ada@example.com"})
        assert record.first_name == "Ada"
        assert record.email_id == "ada@example.com"

    def test_spaced_aliases(self):
        record = self.normalizer.normalize({
            "First Name": "Ada",
            "Department": "Research",
            "Main Industry": "Computing",
        })
        assert record.first_name == "Ada"
        assert record.dept == "Research"
        assert record.main_industry == "Computing"

    def test_canonical_spelling_wins(self):
        record = self.normalizer.normalize({"FirstName": "Ada", "First Name": "Augusta"})
        assert record.first_name == "Ada"

    def test_blank_canonical_falls_through_to_alias(self):
        record = self.normalizer.normalize({"FirstName": "", "First Name": "Augusta"})
        assert record.first_name == "Augusta"

    def test_missing_fields_are_empty(self):
        record = self.normalizer.normalize({"FirstName": "Ada"})
        assert record.city == ""
        assert record.company_link == ""

    def test_unknown_columns_ignored(self):
        record = self.normalizer.normalize({"Notes": "call back", "FirstName": "Ada"})
        assert "Notes" not in record.model_dump(by_alias=True)

    def test_integral_float_loses_fraction(self):
        record = self.normalizer.normalize({"Employee Size": 250.0, "PostalCode": 2000})
        assert record.employee_size == "250"
        assert record.postal_code == "2000"

    def test_non_integral_float_kept(self):
        record = self.normalizer.normalize({"RevenueSize": 2.5})
        assert record.revenue_size == "2.5"

    def test_nan_counts_as_blank(self):
        record = self.normalizer.normalize({"City": float("nan"), "EmailID": None})
        assert record.city == ""
        assert record.email_id == ""

    def test_batch_preserves_order(self):
        rows = [{"FirstName": name} for name in ("c", "a", "b")]
        records = self.normalizer.normalize_batch(rows)
        assert [r.first_name for r in records] == ["c", "a", "b"]

    @given(st.dictionaries(
        st.text(max_size=20),
        st.one_of(st.none(), st.text(), st.integers(), st.floats(), st.booleans()),
        max_size=30,
    ))
    def test_normalize_is_total(self, raw):
        record = self.normalizer.normalize(raw)
        assert isinstance(record, ContactRecord)
        assert all(isinstance(v, str) for v in record.to_columns().values())

    @given(st.sampled_from(CANONICAL_FIELDS), st.text(min_size=1).filter(lambda s: s.strip() != ""))
    def test_canonical_value_round_trips(self, field_name, value):
        record = self.normalizer.normalize({field_name: value})
        assert record.model_dump(by_alias=True)[field_name] == value


@pytest.mark.unit
class TestAliases:
    """Tests for alias tables and YAML configuration"""

    def test_builtin_covers_every_field(self):
        assert set(BUILTIN_HEADER_ALIASES) == set(CANONICAL_FIELDS)
        for field_name, spellings in BUILTIN_HEADER_ALIASES.items():
            assert spellings[0] == field_name

    def test_merge_appends_after_builtin(self):
        merged = merge_aliases({"EmailID": ["Email", "EmailID"]})
        assert merged["EmailID"] == ("EmailID", "Email ID", "Email")

    def test_merge_rejects_unknown_field(self):
        with pytest.raises(KeyError):
            merge_aliases({"Nickname": ["Nick"]})

    def test_loader_reads_yaml(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text('aliases:\n  EmailID:\n    - "E-mail Address"\n')
        extra = AliasConfigLoader(path).load_extra_aliases()
        assert extra == {"EmailID": ["E-mail Address"]}

    def test_loader_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AliasConfigLoader(tmp_path / "nope.yaml")

    def test_loader_requires_aliases_section(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text("rules: []\n")
        with pytest.raises(ValueError, match="aliases"):
            AliasConfigLoader(path).load_extra_aliases()

    def test_loader_rejects_unknown_field(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text('aliases:\n  Nickname:\n    - "Nick"\n')
        with pytest.raises(ValueError, match="Nickname"):
            AliasConfigLoader(path).load_extra_aliases()

    def test_loader_rejects_non_list(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text('aliases:\n  EmailID: "Email"\n')
        with pytest.raises(ValueError, match="must be a list"):
            AliasConfigLoader(path).load_extra_aliases()

    def test_from_config_uses_extra_aliases(self, tmp_path):
        path = tmp_path / "aliases.yaml"
        path.write_text('aliases:\n  DirectNumber:\n    - "Direct Phone"\n')
        normalizer = RowNormalizer.from_config(path)
        record = normalizer.normalize({"Direct Phone": "+1 555 0100"})
        assert record.direct_number == "+1 555 0100"

    def test_from_config_missing_file_uses_builtin(self, tmp_path):
        normalizer = RowNormalizer.from_config(tmp_path / "missing.yaml")
        record = normalizer.normalize({"Direct Phone": "+1 555 0100", "Direct Number": "42"})
        assert record.direct_number == "42"

    def test_shipped_alias_file_loads(self, aliases_path):
        normalizer = RowNormalizer.from_config(aliases_path)
        record = normalizer.normalize({"Email": "ada@example.com"})
        assert record.email_id == "ada@example.com"
