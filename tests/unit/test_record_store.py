"""Tests for the file-backed record store and entry validation."""

import json
from datetime import date

import pytest

from freelancetax.sdk import records
from freelancetax.sdk.records import RecordStore, ValidationError, validate_entry


@pytest.fixture
def store(tmp_path):
    return RecordStore.open(tmp_path / "ledger.json")


class TestValidateEntry:

    def test_normalizes_fields(self):
        parsed = validate_entry("2026-03-04", "150.5", "  Workshop  ")
        assert parsed == (date(2026, 3, 4), 150.5, "Workshop", "income")

    def test_accepts_date_object(self):
        parsed_date, _, _, _ = validate_entry(date(2026, 1, 2), 1, "x")
        assert parsed_date == date(2026, 1, 2)

    def test_collects_all_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry("04/03/2026", -5, "", "refund")
        errors = exc_info.value.errors
        assert len(errors) == 4
        assert any("YYYY-MM-DD" in e for e in errors)
        assert any("negative" in e for e in errors)
        assert any("description" in e for e in errors)
        assert any("type" in e for e in errors)

    @pytest.mark.parametrize("amount", ["abc", None, True, float("nan"), float("inf")])
    def test_rejects_non_numeric_amount(self, amount):
        with pytest.raises(ValidationError):
            validate_entry("2026-03-04", amount, "x")

    def test_zero_amount_allowed(self):
        assert validate_entry("2026-03-04", 0, "x")[1] == 0.0


class TestRecordStore:

    def test_missing_file_is_empty_ledger(self, store):
        assert store.records() == ()
        assert len(store) == 0

    def test_add_prepends(self, store):
        first = store.add("2026-03-01", 100, "First")
        second = store.add("2026-02-01", 200, "Second")
        assert [r.id for r in store.records()] == [second.id, first.id]

    def test_ids_unique(self, store):
        ids = {store.add("2026-03-01", 1, "Same").id for _ in range(5)}
        assert len(ids) == 5

    def test_persists_across_instances(self, tmp_path, store):
        added = store.add("2026-03-01", 123.45, "Persisted", "expense")

        reopened = RecordStore.open(tmp_path / "ledger.json")
        assert reopened.records() == (added,)

        raw = json.loads((tmp_path / "ledger.json").read_text())
        assert raw["version"] == 1
        assert raw["records"][0]["date"] == "2026-03-01"
        assert raw["records"][0]["type"] == "expense"

    def test_invalid_entry_not_stored(self, tmp_path, store):
        with pytest.raises(ValidationError):
            store.add("2026-03-01", -1, "Bad")
        assert store.records() == ()
        assert not (tmp_path / "ledger.json").exists()

    def test_remove(self, store):
        keep = store.add("2026-03-01", 1, "Keep")
        drop = store.add("2026-03-02", 2, "Drop")

        assert store.remove(drop.id) is True
        assert store.remove(drop.id) is False
        assert store.records() == (keep,)

    def test_get(self, store):
        record = store.add("2026-03-01", 1, "Find me")
        assert store.get(record.id) == record
        assert store.get("missing") is None

    def test_snapshot_unaffected_by_later_changes(self, store):
        store.add("2026-03-01", 1, "One")
        snapshot = store.records()
        store.add("2026-03-02", 2, "Two")
        assert len(snapshot) == 1

    def test_filter(self, store):
        store.add("2026-03-01", 1, "March")
        store.add("2026-04-01", 2, "April")
        store.add("2025-03-01", 3, "Last year")
        store.add("2026-03-09", 4, "March expense", "expense")

        assert len(store.filter(year=2026)) == 3
        assert [r.amount for r in store.filter(year=2026, month=3)] == [4, 1]
        assert [r.amount for r in store.filter(type_filter="expense")] == [4]

    def test_filter_month_requires_year(self, store):
        with pytest.raises(ValueError):
            store.filter(month=3)

    def test_clear(self, tmp_path, store):
        store.add("2026-03-01", 1, "One")
        store.add("2026-03-02", 2, "Two")
        assert store.clear() == 2
        assert RecordStore.open(tmp_path / "ledger.json").records() == ()

    def test_autosave_off_defers_write(self, tmp_path):
        path = tmp_path / "ledger.json"
        store = RecordStore.open(path, autosave=False)
        store.add("2026-03-01", 1, "Pending")
        assert not path.exists()

        store.save()
        assert len(RecordStore.open(path)) == 1

    def test_corrupt_ledger(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Corrupt ledger"):
            RecordStore.open(path)

    def test_ledger_with_invalid_record(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"records": [{"id": "x", "date": "2026-03-01", "amount": -1,
                                                 "description": "bad", "type": "income"}]}))
        with pytest.raises(ValueError, match="Corrupt ledger"):
            RecordStore.open(path)

    def test_find_by_prefix(self, store):
        record = store.add("2026-03-01", 1, "One")
        assert records.find_by_prefix(store, record.id[:8]) == [record]
        assert records.find_by_prefix(store, "zzzz") == []


class TestDefaultLocation:

    def test_ledger_in_configured_data_dir(self, isolated_env):
        store = RecordStore.open()
        assert store.path == isolated_env["ledger"]
        store.add("2026-03-01", 1, "One")
        assert isolated_env["ledger"].exists()
