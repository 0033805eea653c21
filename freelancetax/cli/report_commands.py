"""Report CLI commands: PDF export and reconciliation."""

from pathlib import Path
from typing import Tuple

import click

from freelancetax.sdk import get_setting, load_user_settings
from freelancetax.sdk import report as sdk_report
from .records_commands import open_store, parse_period_filters


@click.group()
def report():
    """Export the income report as PDF and check exported reports."""
    pass


@report.command("export")
@click.argument("output", type=click.Path(dir_okay=False))
@click.argument("filters", nargs=-1)
def report_export(output: str, filters: Tuple[str, ...]):
    """Write the income report to OUTPUT.

    FILTERS can be a year and optionally a month (1-12). Without filters
    every record is included. Amounts are always EUR. The font comes from
    'settings report-font', else an installed DejaVu Sans, else Helvetica.

    \b
    Examples:
      freelance-tax report export report.pdf
      freelance-tax report export march.pdf 2026 3
    """
    year, month = parse_period_filters(filters)
    store = open_store()

    try:
        settings = load_user_settings()
    except ValueError as e:
        raise click.ClickException(str(e))

    font = get_setting("report_font")
    rows = sdk_report.build_report_rows(store.records(), year, month)
    try:
        path = sdk_report.export_report_pdf(
            Path(output), store.records(), settings, year, month,
            font_path=Path(font) if font else None,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Wrote {len(rows['rows'])} record(s) to {path}")
    click.echo(f"Total: {rows['total']:,.2f} EUR")


@report.command("verify")
@click.argument("pdf", type=click.Path(exists=True, dir_okay=False))
@click.argument("filters", nargs=-1)
def report_verify(pdf: str, filters: Tuple[str, ...]):
    """Check that a report's total matches the ledger for the same period.

    Exits with status 1 when the totals differ.
    """
    year, month = parse_period_filters(filters)
    store = open_store()

    try:
        result = sdk_report.reconcile_report(Path(pdf), store.records(), year, month)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Report total: {result['report_total']:,.2f} EUR")
    click.echo(f"Ledger total: {result['ledger_total']:,.2f} EUR")

    if not result["match"]:
        click.echo(click.style("MISMATCH", fg="red"))
        raise SystemExit(1)

    click.echo(click.style("OK", fg="green"))
