"""End-to-end tests for the add → summary → report → clear workflow.

Drives the top-level CLI against a temp config/data directory:
- Real ledger persistence (ledger.json)
- Real tax rules loading (packaged YAML)
- Real PDF export (reportlab) and read-back (PyPDF2)

Test scenario:
- 2026-01-10: 9000.00 EUR (earlier month, counts toward VAT only)
- 2026-03-04: 1000.00 EUR (the summarized month)
"""

import json

import pytest
from click.testing import CliRunner

from freelancetax.cli.__main__ import cli
from freelancetax.sdk.config import set_setting
from freelancetax.sdk.records import RecordStore


@pytest.fixture
def runner(isolated_env):
    runner = CliRunner()
    for args in (
        ["records", "add", "9000", "January retainer", "--date", "2026-01-10"],
        ["records", "add", "1000", "March sessions", "--date", "2026-03-04"],
    ):
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
    return runner


class TestSummary:

    def test_json_breakdown(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "2026-03-15", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["year"] == 2026
        assert data["month"] == 3
        assert data["total_income"] == pytest.approx(1000)
        assert data["statutory_expenses"] == pytest.approx(250)
        assert data["social_security_base"] == pytest.approx(750)
        assert data["social_security"] == pytest.approx(208.5)
        assert data["income_tax"] == pytest.approx(54.15)
        assert data["net_income"] == pytest.approx(737.35)
        assert data["total_taxes"] == pytest.approx(262.65)
        assert data["vat_turnover"] == pytest.approx(10000)
        assert data["vat_progress_percent"] == pytest.approx(10000 / 51130 * 100)

    def test_text_output(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "2026-03-15"])
        assert result.exit_code == 0, result.output
        assert "NET INCOME" in result.output
        assert "737.35 EUR" in result.output
        assert "19.6%" in result.output

    def test_text_output_bgn(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "2026-03-15", "--currency", "BGN"])
        assert result.exit_code == 0, result.output
        assert "1,955.83 BGN" in result.output

    def test_empty_month_uses_zero_base(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "2026-02-01", "--format", "json"])
        data = json.loads(result.output)
        assert data["total_income"] == 0
        assert data["social_security_base"] == 0
        assert data["social_security"] == 0
        assert data["net_income"] == 0
        assert data["vat_turnover"] == pytest.approx(10000)

    def test_empty_month_text_notice(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "2026-02-01"])
        assert result.exit_code == 0
        assert "No records for 2026-02." in result.output

    def test_elected_base_mode(self, runner):
        assert runner.invoke(cli, ["profile", "set", "insurance_income", "1200"]).exit_code == 0
        assert runner.invoke(cli, ["profile", "set", "insurance_base_mode", "elected"]).exit_code == 0

        data = json.loads(runner.invoke(cli, ["summary", "--date", "2026-03-15", "--format", "json"]).output)
        assert data["social_security_base"] == pytest.approx(1200)
        assert data["social_security"] == pytest.approx(1200 * 0.278)

    def test_bad_date(self, runner):
        result = runner.invoke(cli, ["summary", "--date", "15.03.2026"])
        assert result.exit_code == 2
        assert "YYYY-MM-DD" in result.output


class TestProfileAndSettings:

    def test_insurance_income_below_minimum_rejected(self, runner):
        result = runner.invoke(cli, ["profile", "set", "insurance_income", "100"])
        assert result.exit_code == 2
        assert "insurance_income must be between" in result.output

    def test_unknown_key_rejected(self, runner):
        result = runner.invoke(cli, ["profile", "set", "employer", "Acme"])
        assert result.exit_code == 2
        assert "Unknown profile key" in result.output

    def test_profile_set_then_show(self, runner, isolated_env):
        result = runner.invoke(cli, ["profile", "set", "name", "Ivan Ivanov"])
        assert result.exit_code == 0
        assert "Set name: Ivan Ivanov" in result.output
        assert isolated_env["profile"].exists()

        shown = runner.invoke(cli, ["profile", "show"]).output
        assert "name: Ivan Ivanov" in shown
        assert "insurance_base_mode: actual" in shown

    def test_currency_setting(self, runner):
        result = runner.invoke(cli, ["settings", "currency", "bgn"])
        assert result.exit_code == 0
        assert "Set display_currency: BGN" in result.output

        listing = runner.invoke(cli, ["records", "list", "2026"]).output
        assert "19,558.30 BGN" in listing

    def test_settings_show(self, runner, isolated_env):
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 0
        assert str(isolated_env["ledger"]) in result.output


class TestReport:

    def test_export_then_verify(self, runner, tmp_path):
        pdf = tmp_path / "march.pdf"
        result = runner.invoke(cli, ["report", "export", str(pdf), "2026", "3"])
        assert result.exit_code == 0, result.output
        assert "Wrote 1 record(s)" in result.output
        assert "Total: 1,000.00 EUR" in result.output
        assert pdf.exists()

        result = runner.invoke(cli, ["report", "verify", str(pdf), "2026", "3"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output

    def test_verify_detects_later_changes(self, runner, tmp_path):
        pdf = tmp_path / "year.pdf"
        assert runner.invoke(cli, ["report", "export", str(pdf), "2026"]).exit_code == 0
        runner.invoke(cli, ["records", "add", "50", "Late invoice", "--date", "2026-03-30"])

        result = runner.invoke(cli, ["report", "verify", str(pdf), "2026"])
        assert result.exit_code == 1
        assert "Report total: 10,000.00 EUR" in result.output
        assert "Ledger total: 10,050.00 EUR" in result.output
        assert "MISMATCH" in result.output


class TestClear:

    def test_clear_force(self, runner, isolated_env):
        runner.invoke(cli, ["profile", "set", "name", "Ivan Ivanov"])

        result = runner.invoke(cli, ["clear", "--force"])
        assert result.exit_code == 0
        assert "Deleted 2 record(s)" in result.output
        assert RecordStore.open().records() == ()

        shown = runner.invoke(cli, ["profile", "show"]).output
        assert "Ivan Ivanov" not in shown

    def test_clear_declined(self, runner):
        result = runner.invoke(cli, ["clear"], input="n\n")
        assert result.exit_code == 1
        assert len(RecordStore.open().records()) == 2


class TestReportFontSetting:

    def test_unloadable_font_rejected(self, runner, tmp_path):
        bad = tmp_path / "bad.ttf"
        bad.write_bytes(b"not a font")

        result = runner.invoke(cli, ["settings", "report-font", str(bad)])
        assert result.exit_code == 1
        assert "Cannot load report font" in result.output
        assert "report_font: auto" in runner.invoke(cli, ["settings", "show"]).output

    def test_clear_when_unset(self, runner):
        result = runner.invoke(cli, ["settings", "report-font", "--clear"])
        assert result.exit_code == 0
        assert "report_font was not set." in result.output

    def test_export_with_missing_configured_font(self, runner, tmp_path):
        set_setting("report_font", str(tmp_path / "gone.ttf"))

        result = runner.invoke(cli, ["report", "export", str(tmp_path / "r.pdf"), "2026"])
        assert result.exit_code == 1
        assert "Report font not found" in result.output
