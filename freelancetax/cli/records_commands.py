"""Records command group for the income ledger."""

import json
from datetime import date
from typing import Optional, Tuple

import click
from rich.console import Console

from freelancetax.sdk import records
from freelancetax.sdk.config import get_display_currency
from freelancetax.sdk.currency import SUPPORTED_CURRENCIES, convert_for_storage, display
from .renderers.summary_renderer import render_records_table


def parse_period_filters(filters: Tuple[str, ...]) -> Tuple[Optional[int], Optional[int]]:
    """Parse flexible year/month filters.

    Args:
        filters: 0-2 arguments: a 4-digit year, then optionally a month (1-12)

    Returns:
        (year, month) tuple - either can be None if not specified
    """
    year = None
    month = None

    if len(filters) > 2:
        raise click.BadParameter(f"Expected at most YEAR and MONTH, got: {' '.join(filters)}")

    for f in filters:
        if f.isdigit() and len(f) == 4:
            if year is not None:
                raise click.BadParameter(f"Multiple years specified: {year} and {f}")
            year = int(f)
        elif f.isdigit() and 1 <= int(f) <= 12:
            if month is not None:
                raise click.BadParameter(f"Multiple months specified: {month} and {f}")
            month = int(f)
        else:
            raise click.BadParameter(
                f"Invalid filter '{f}'. Expected 4-digit year or month (1-12)."
            )

    if month is not None and year is None:
        raise click.BadParameter("A month filter needs a year, e.g. '2026 3'.")

    return year, month


def resolve_currency(currency: Optional[str]) -> str:
    """Explicit --currency wins over the saved display currency."""
    return (currency or get_display_currency()).upper()


def open_store() -> records.RecordStore:
    try:
        return records.RecordStore.open()
    except ValueError as e:
        raise click.ClickException(str(e))


def _lookup(store: records.RecordStore, record_id: str):
    """Find a single record by full id or unambiguous prefix."""
    matches = records.find_by_prefix(store, record_id)
    if not matches:
        raise click.ClickException(f"Record not found: {record_id}")
    if len(matches) > 1:
        raise click.ClickException(f"Ambiguous id '{record_id}' matches {len(matches)} records.")
    return matches[0]


@click.group()
def records_cli():
    """Manage income records (the ledger).

    Amounts are stored in EUR. Use --currency BGN to enter or view BGN;
    conversion uses the fixed rate and never changes stored values.
    """
    pass


@records_cli.command("add")
@click.argument("amount")
@click.argument("description")
@click.option("--date", "entry_date", default=None, help="Date (YYYY-MM-DD). Defaults to today.")
@click.option("--type", "record_type", type=click.Choice(["income", "expense"]),
              default="income", show_default=True, help="Record kind.")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False),
              default=None, help="Currency AMOUNT is given in (default: display currency).")
def records_add(amount: str, description: str, entry_date: Optional[str], record_type: str,
                currency: Optional[str]):
    """Add a record.

    \b
    Examples:
      freelance-tax records add 1200 "Monthly subscription"
      freelance-tax records add 150 "Personal training" --date 2026-03-04
      freelance-tax records add 500 "Workshop" --currency BGN
    """
    currency = resolve_currency(currency)
    if entry_date is None:
        entry_date = date.today().isoformat()

    try:
        value = float(amount)
    except ValueError:
        raise click.BadParameter(f"AMOUNT must be a number, got: {amount}")

    store = open_store()
    try:
        record = store.add(entry_date, convert_for_storage(value, currency), description, record_type)
    except records.ValidationError as e:
        raise click.ClickException("; ".join(e.errors))

    click.echo(f"Added {record.id[:8]}: {record.date} {record.description} {display(record.amount, currency)}")


@records_cli.command("list")
@click.argument("filters", nargs=-1)
@click.option("--type", "type_filter", type=click.Choice(["income", "expense"]),
              help="Filter by record type.")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False),
              default=None, help="Display currency.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
@click.option("--count", is_flag=True, help="Only print the number of matching records.")
def records_list(filters: Tuple[str, ...], type_filter: Optional[str], currency: Optional[str],
                 output_format: str, count: bool):
    """List records, most recent entry first.

    FILTERS can be a year (4 digits) and optionally a month (1-12).

    \b
    Examples:
      freelance-tax records list            # All records
      freelance-tax records list 2026       # All of 2026
      freelance-tax records list 2026 3     # March 2026
      freelance-tax records list --format json
    """
    year, month = parse_period_filters(filters)
    currency = resolve_currency(currency)

    store = open_store()
    matches = store.filter(year=year, month=month, type_filter=type_filter)

    if count:
        click.echo(str(len(matches)))
        return

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in matches], indent=2))
        return

    if not matches:
        filter_desc = "/".join(str(f) for f in (year, month) if f is not None) or "any filters"
        click.echo(f"No records found for {filter_desc}")
        click.echo("\nRun 'freelance-tax records add AMOUNT DESCRIPTION' to add one.")
        return

    console = Console()
    render_records_table(console, list(matches), currency=currency)
    total = sum(r.amount for r in matches)
    click.echo(f"Total: {len(matches)} record(s), {display(total, currency)}")


@records_cli.command("show")
@click.argument("record_id")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def records_show(record_id: str, output_format: str):
    """Show a single record by id (or id prefix)."""
    record = _lookup(open_store(), record_id)

    if output_format == "json":
        click.echo(json.dumps(record.model_dump(mode="json"), indent=2))
        return

    click.echo(f"ID:          {record.id}")
    click.echo(f"Date:        {record.date.isoformat()}")
    click.echo(f"Type:        {record.type}")
    click.echo(f"Description: {record.description}")
    click.echo(f"Amount:      {display(record.amount, 'EUR')} ({display(record.amount, 'BGN')})")


@records_cli.command("remove")
@click.argument("record_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def records_remove(record_id: str, force: bool):
    """Remove a record by id (or id prefix)."""
    store = open_store()
    record = _lookup(store, record_id)

    if not force:
        click.confirm(
            f"Remove {record.date} {record.description} ({display(record.amount, 'EUR')})?",
            abort=True,
        )

    store.remove(record.id)
    click.echo(f"Removed {record.id[:8]}")
