"""Tests for the records CLI commands."""

import json

import click
import pytest
from click.testing import CliRunner

from freelancetax.cli.records_commands import parse_period_filters, records_cli
from freelancetax.sdk.config import set_setting
from freelancetax.sdk.records import RecordStore


@pytest.fixture
def runner(isolated_env):
    return CliRunner()


def add(runner, *args):
    result = runner.invoke(records_cli, ["add", *args])
    assert result.exit_code == 0, result.output
    return result


class TestParsePeriodFilters:

    def test_none(self):
        assert parse_period_filters(()) == (None, None)

    def test_year_and_month_any_order(self):
        assert parse_period_filters(("2026", "3")) == (2026, 3)
        assert parse_period_filters(("3", "2026")) == (2026, 3)

    @pytest.mark.parametrize("filters", [("13",), ("3",), ("2026", "2025"), ("abc",), ("2026", "3", "4")])
    def test_invalid(self, filters):
        with pytest.raises(click.BadParameter):
            parse_period_filters(filters)


class TestRecordsAdd:

    def test_add_stores_eur(self, runner, isolated_env):
        result = add(runner, "1200", "Monthly subscription", "--date", "2026-03-04")
        assert "1,200.00 EUR" in result.output

        (record,) = RecordStore.open().records()
        assert record.amount == 1200
        assert record.description == "Monthly subscription"
        assert record.date.isoformat() == "2026-03-04"
        assert record.type == "income"

    def test_add_in_bgn_converts_for_storage(self, runner):
        add(runner, "195.583", "Workshop", "--date", "2026-03-04", "--currency", "BGN")
        (record,) = RecordStore.open().records()
        assert record.amount == pytest.approx(100)

    def test_add_uses_saved_display_currency(self, runner):
        set_setting("display_currency", "BGN")

        add(runner, "195.583", "Workshop", "--date", "2026-03-04")
        (record,) = RecordStore.open().records()
        assert record.amount == pytest.approx(100)

    def test_rejects_bad_date(self, runner):
        result = runner.invoke(records_cli, ["add", "100", "x", "--date", "2026/03/04"])
        assert result.exit_code != 0
        assert "YYYY-MM-DD" in result.output
        assert RecordStore.open().records() == ()

    def test_rejects_negative_amount(self, runner):
        result = runner.invoke(records_cli, ["add", "--", "-5", "Refund"])
        assert result.exit_code != 0
        assert "negative" in result.output

    def test_rejects_non_numeric_amount(self, runner):
        result = runner.invoke(records_cli, ["add", "ten", "x"])
        assert result.exit_code == 2
        assert "AMOUNT must be a number" in result.output

    def test_rejects_blank_description(self, runner):
        result = runner.invoke(records_cli, ["add", "10", "   "])
        assert result.exit_code != 0
        assert "description is required" in result.output


class TestRecordsList:

    def test_empty(self, runner):
        result = runner.invoke(records_cli, ["list"])
        assert result.exit_code == 0
        assert "No records found" in result.output

    def test_count_with_filters(self, runner):
        add(runner, "100", "A", "--date", "2026-03-01")
        add(runner, "200", "B", "--date", "2026-03-20")
        add(runner, "300", "C", "--date", "2026-04-01")

        assert runner.invoke(records_cli, ["list", "--count"]).output.strip() == "3"
        assert runner.invoke(records_cli, ["list", "2026", "3", "--count"]).output.strip() == "2"
        assert runner.invoke(records_cli, ["list", "2025", "--count"]).output.strip() == "0"

    def test_json_most_recent_first(self, runner):
        add(runner, "100", "First", "--date", "2026-03-01")
        add(runner, "200", "Second", "--date", "2026-03-02")

        result = runner.invoke(records_cli, ["list", "--format", "json"])
        data = json.loads(result.output)
        assert [r["description"] for r in data] == ["Second", "First"]
        assert data[0]["amount"] == 200

    def test_text_total(self, runner):
        add(runner, "100", "First", "--date", "2026-03-01")
        add(runner, "50.5", "Second", "--date", "2026-03-02")

        result = runner.invoke(records_cli, ["list"])
        assert result.exit_code == 0
        assert "Total: 2 record(s), 150.50 EUR" in result.output

    def test_text_total_in_bgn(self, runner):
        add(runner, "100", "First", "--date", "2026-03-01")
        result = runner.invoke(records_cli, ["list", "--currency", "BGN"])
        assert "195.58 BGN" in result.output


class TestRecordsShowRemove:

    def test_show_by_prefix(self, runner):
        add(runner, "100", "Find me", "--date", "2026-03-01")
        record_id = RecordStore.open().records()[0].id

        result = runner.invoke(records_cli, ["show", record_id[:8]])
        assert result.exit_code == 0
        assert record_id in result.output
        assert "Find me" in result.output
        assert "195.58 BGN" in result.output

    def test_show_json(self, runner):
        add(runner, "100", "Find me", "--date", "2026-03-01")
        record_id = RecordStore.open().records()[0].id

        result = runner.invoke(records_cli, ["show", record_id, "--format", "json"])
        assert json.loads(result.output)["id"] == record_id

    def test_show_missing(self, runner):
        result = runner.invoke(records_cli, ["show", "nope"])
        assert result.exit_code == 1
        assert "Record not found" in result.output

    def test_remove_force(self, runner):
        add(runner, "100", "Drop me", "--date", "2026-03-01")
        record_id = RecordStore.open().records()[0].id

        result = runner.invoke(records_cli, ["remove", record_id, "--force"])
        assert result.exit_code == 0
        assert RecordStore.open().records() == ()

    def test_remove_confirmation_declined(self, runner):
        add(runner, "100", "Keep me", "--date", "2026-03-01")
        record_id = RecordStore.open().records()[0].id

        result = runner.invoke(records_cli, ["remove", record_id], input="n\n")
        assert result.exit_code == 1
        assert len(RecordStore.open().records()) == 1
