"""
Integration tests for the contact store upsert engine and read queries.
"""

from uuid import uuid4

import pytest

from contactsync.core.errors import UpsertError
from contactsync.core.filters import FilterSpec
from contactsync.core.models import ContactRecord, UpsertOutcome
from contactsync.warehouse.contact_store import ContactStore
from contactsync.warehouse.query_builder import where_clause


def _count(pool):
    return pool.execute_query("SELECT COUNT(*) AS n FROM contact_record")[0]["n"]


@pytest.mark.integration
class TestUpsertBatch:
    """Tests for ContactStore.upsert_batch"""

    def test_first_load_inserts(self, pool):
        store = ContactStore(pool)
        result = store.upsert_batch([
            ContactRecord(EmailID="a@x.io", FirstName="Ada"),
            ContactRecord(EmailID="b@x.io", FirstName="Bea"),
        ])
        assert (result.processed, result.inserted, result.updated) == (2, 2, 0)
        assert _count(pool) == 2

    def test_idempotent_reapply(self, pool):
        store = ContactStore(pool)
        batch = [
            ContactRecord(EmailID="a@x.io", FirstName="Ada"),
            ContactRecord(EmailID="b@x.io", FirstName="Bea"),
        ]
        first = store.upsert_batch(batch)
        second = store.upsert_batch(batch)

        assert second.inserted == 0
        assert second.updated == 2
        assert _count(pool) == 2
        assert [r.record_id for r in first.rows] == [r.record_id for r in second.rows]

    def test_keyless_rows_never_collapse(self, pool):
        store = ContactStore(pool)
        result = store.upsert_batch([
            ContactRecord(FirstName="One"),
            ContactRecord(FirstName="Two", EmailID="   "),
            ContactRecord(FirstName="Three"),
        ])
        assert result.inserted == 3
        assert result.keyless_inserted == 3
        assert len({r.record_id for r in result.rows}) == 3
        assert _count(pool) == 3

    def test_keyless_rows_insert_on_every_load(self, pool):
        store = ContactStore(pool)
        store.upsert_batch([ContactRecord(FirstName="One")])
        result = store.upsert_batch([ContactRecord(FirstName="One")])
        assert result.inserted == 1
        assert _count(pool) == 2

    def test_last_row_wins_within_batch(self, pool):
        store = ContactStore(pool)
        result = store.upsert_batch([
            ContactRecord(EmailID="a@x.io", FirstName="First", City="Paris"),
            ContactRecord(EmailID="a@x.io", FirstName="Second", City=""),
        ])

        assert [r.outcome for r in result.rows] == [UpsertOutcome.INSERTED, UpsertOutcome.UPDATED]
        assert result.rows[0].record_id == result.rows[1].record_id

        stored = store.get_by_email("a@x.io")
        assert stored.first_name == "Second"
        assert stored.city == ""

    def test_update_overwrites_all_fields(self, pool):
        store = ContactStore(pool)
        store.upsert_batch([ContactRecord(EmailID="a@x.io", JobTitle="Engineer", Country="UK")])
        store.upsert_batch([ContactRecord(EmailID="a@x.io", JobTitle="Director")])

        stored = store.get_by_email("a@x.io")
        assert stored.job_title == "Director"
        assert stored.country == ""

    def test_key_is_stripped(self, pool):
        store = ContactStore(pool)
        store.upsert_batch([ContactRecord(EmailID="  a@x.io ")])
        result = store.upsert_batch([ContactRecord(EmailID="a@x.io")])
        assert result.updated == 1
        assert store.get_by_email("a@x.io") is not None

    def test_updated_at_moves(self, pool):
        store = ContactStore(pool)
        store.upsert_batch([ContactRecord(EmailID="a@x.io")])
        before = pool.execute_query("SELECT created_at, updated_at FROM contact_record")[0]
        store.upsert_batch([ContactRecord(EmailID="a@x.io", City="Oslo")])
        after = pool.execute_query("SELECT created_at, updated_at FROM contact_record")[0]
        assert after["created_at"] == before["created_at"]
        assert after["updated_at"] >= before["updated_at"]

    def test_empty_batch(self, pool):
        result = ContactStore(pool).upsert_batch([])
        assert result.processed == 0

    def test_failed_batch_applies_nothing(self, pool):
        store = ContactStore(pool)
        with pytest.raises(UpsertError):
            store.upsert_batch([
                ContactRecord(EmailID="a@x.io"),
                ContactRecord(EmailID="b@x.io", FirstName="bad\x00value"),
            ])
        assert _count(pool) == 0


@pytest.mark.integration
class TestContactQueries:
    """Tests for lookups and filtered reads"""

    @pytest.fixture
    def store(self, pool):
        store = ContactStore(pool)
        store.upsert_batch([
            ContactRecord(EmailID="ada@x.io", FirstName="Ada", Country="UK", JobTitle="Head of Data"),
            ContactRecord(EmailID="grace@x.io", FirstName="Grace", Country="US", JobTitle="Admiral"),
            ContactRecord(EmailID="alan@x.io", FirstName="Alan", Country="uk", JobTitle="50%_Researcher"),
            ContactRecord(FirstName="Keyless", Country="FR"),
        ])
        return store

    def test_find_existing_keys(self, store):
        existing = store.find_existing_keys(["ada@x.io", "nobody@x.io", "", "grace@x.io"])
        assert sorted(existing) == ["ada@x.io", "grace@x.io"]

    def test_find_existing_keys_empty(self, store):
        assert store.find_existing_keys([]) == []

    def test_search_is_case_insensitive(self, store):
        rows = store.find_matching(FilterSpec(search="ADA"), ["FirstName"])
        assert [r["first_name"] for r in rows] == ["Ada"]

    def test_search_escapes_like_characters(self, store):
        rows = store.find_matching(FilterSpec(search="50%_"), ["FirstName"])
        assert [r["first_name"] for r in rows] == ["Alan"]

    def test_one_of_is_case_insensitive(self, store):
        spec = FilterSpec.from_params({"Country": "UK,fr"})
        rows = store.find_matching(spec, ["FirstName"])
        assert sorted(r["first_name"] for r in rows) == ["Ada", "Alan", "Keyless"]

    def test_list_entries_match_whole_values(self, store):
        spec = FilterSpec.from_params({"JobTitle": "head,admiral"})
        rows = store.find_matching(spec, ["FirstName"])
        assert [r["first_name"] for r in rows] == ["Grace"]

    def test_contains(self, store):
        spec = FilterSpec.from_params({"JobTitle": "head"})
        assert len(store.find_matching(spec, ["FirstName"])) == 1

    def test_equals_is_exact(self, store):
        spec = FilterSpec.build(conditions=[{"field": "Country", "operator": "equals", "values": ["UK"]}])
        assert len(store.find_matching(spec, ["FirstName"])) == 1

    def test_no_filter_matches_all(self, store):
        assert len(store.find_matching(FilterSpec(), ["FirstName"])) == 4

    def test_record_id_always_selected(self, store):
        rows = store.find_matching(FilterSpec(), ["City"])
        assert all("record_id" in row for row in rows)

    def test_fetch_by_ids_skips_unknown(self, store):
        rows = store.find_matching(FilterSpec(), ["FirstName"])
        wanted = [rows[0]["record_id"], uuid4()]
        fetched = store.fetch_by_ids(wanted, ["FirstName"])
        assert [r["record_id"] for r in fetched] == [rows[0]["record_id"]]

    def test_where_clause_renders(self, store, clean_db):
        where, _ = where_clause(FilterSpec.from_params({"City": "Oslo"}))
        assert where.as_string(clean_db) == ' WHERE "city" ILIKE %s'
