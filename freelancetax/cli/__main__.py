"""Freelance Tax CLI - Command-line interface for monthly tax estimates."""

import json
from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console

from freelancetax import __version__
from freelancetax.sdk import compute_tax_summary, load_tax_rules, load_user_settings, records
from freelancetax.sdk.currency import SUPPORTED_CURRENCIES

from .profile_commands import profile as profile_group
from .records_commands import records_cli as records_group, open_store, resolve_currency
from .report_commands import report as report_group
from .settings_commands import settings as settings_group
from .renderers.summary_renderer import render_tax_summary


@click.group()
@click.version_option(version=__version__, prog_name="freelance-tax")
def cli():
    """Freelance Tax - Monthly tax estimates for the self-employed.

    Records income, estimates statutory expenses, social security and
    income tax for the month, and tracks the yearly VAT threshold.

    Configuration is loaded from (in order):

    \b
    1. FREELANCE_TAX_CONFIG_PATH environment variable
    2. ~/.config/freelance-tax/ (XDG default)

    Run 'freelance-tax settings show' to see effective paths.
    """
    pass


cli.add_command(records_group, name="records")
cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(report_group)


def _parse_reference_date(value: Optional[str]) -> date:
    if value is None:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Expected YYYY-MM-DD.")


@cli.command("summary")
@click.option("--date", "reference_date", default=None,
              help="Any day of the month to summarize (YYYY-MM-DD). Defaults to today.")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False),
              default=None, help="Display currency.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format (json amounts are unrounded EUR).")
def summary(reference_date: Optional[str], currency: Optional[str], output_format: str):
    """Show the tax breakdown for a month and VAT progress for its year.

    \b
    Examples:
      freelance-tax summary
      freelance-tax summary --date 2026-03-01 --currency BGN
      freelance-tax summary --format json
    """
    ref = _parse_reference_date(reference_date)
    currency = resolve_currency(currency)

    store = open_store()
    try:
        settings = load_user_settings()
        rules = load_tax_rules(ref.year)
    except ValueError as e:
        raise click.ClickException(str(e))

    result = compute_tax_summary(store.records(), reference_date=ref, rules=rules, settings=settings)

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    if not store.filter(year=ref.year, month=ref.month):
        click.echo(f"No records for {ref.year}-{ref.month:02d}.")

    render_tax_summary(Console(), result, rules, currency=currency)


@cli.command("clear")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def clear(force: bool):
    """Delete all records and reset the profile to defaults."""
    if not force:
        click.confirm("Delete ALL records and reset the profile?", abort=True)

    result = records.clear_data(open_store())
    click.echo(f"Deleted {result['records_deleted']} record(s). Profile reset to defaults.")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
