"""Settings CLI commands for Freelance Tax.

Manages settings.json - data directory, display currency, paths.
"""

import click
from pathlib import Path

from freelancetax.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_data_path,
    get_display_currency,
    SUPPORTED_CURRENCIES,
)
from freelancetax.sdk.records import get_ledger_path
from freelancetax.sdk.report import find_font_file, resolve_report_fonts


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - data_dir: custom data directory path
    - display_currency: EUR or BGN
    - profile: path to profile.yaml
    - report_font: TTF font embedded in exported PDF reports
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  data_dir: {get_data_path()}")
    click.echo(f"  ledger: {get_ledger_path()}")
    click.echo(f"  display_currency: {get_display_currency()}")
    click.echo(f"  report_font: {get_setting('report_font') or 'auto'}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom data_dir, revert to default")
def settings_data_dir(path, clear):
    """Set or clear the custom data directory.

    PATH is the directory where freelance-tax stores the ledger.

    Examples:
        freelance-tax settings data-dir ~/Documents/freelance-tax
        freelance-tax settings data-dir --clear
    """
    if clear:
        current = load_settings()
        if "data_dir" in current:
            del current["data_dir"]
            save_settings(current)
            click.echo("Cleared data_dir setting.")
            click.echo(f"Data directory is now: {get_data_path()} (default)")
        else:
            click.echo("data_dir was not set.")
        return

    if not path:
        current_data_dir = get_setting("data_dir")
        if current_data_dir:
            click.echo(f"Current data_dir: {current_data_dir}")
        else:
            click.echo(f"No custom data_dir set. Using default: {get_data_path()}")
        return

    data_path = Path(path).expanduser().resolve()

    if data_path.exists():
        if not data_path.is_dir():
            raise click.ClickException(f"Path exists but is not a directory: {data_path}")
    else:
        try:
            data_path.mkdir(parents=True, exist_ok=True)
            click.echo(f"Created directory: {data_path}")
        except OSError as e:
            raise click.ClickException(f"Cannot create directory: {data_path}\n{e}")

    # Check it's writable
    test_file = data_path / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        raise click.ClickException(f"Directory is not writable: {data_path}\n{e}")

    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("currency")
@click.argument("currency", required=False,
                type=click.Choice(SUPPORTED_CURRENCIES, case_sensitive=False))
def settings_currency(currency):
    """Show or set the display currency (EUR or BGN).

    Stored amounts stay in EUR; this only changes how they are shown and
    which currency 'records add' assumes.
    """
    if not currency:
        click.echo(f"Display currency: {get_display_currency()}")
        return

    set_setting("display_currency", currency.upper())
    click.echo(f"Set display_currency: {currency.upper()}")


@settings.command("report-font")
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--clear", is_flag=True, help="Clear report_font, revert to auto-detection")
def settings_report_font(path, clear):
    """Show or set the TTF font embedded in PDF reports.

    Helvetica has no Cyrillic glyphs; point this at a Unicode TTF (for
    example DejaVuSans.ttf) when no DejaVu Sans is found automatically.

    Examples:
        freelance-tax settings report-font ~/fonts/DejaVuSans.ttf
        freelance-tax settings report-font --clear
    """
    if clear:
        current = load_settings()
        if "report_font" in current:
            del current["report_font"]
            save_settings(current)
            click.echo("Cleared report_font setting.")
        else:
            click.echo("report_font was not set.")
        return

    if not path:
        current_font = get_setting("report_font")
        if current_font:
            click.echo(f"Report font: {current_font}")
        else:
            detected = find_font_file()
            click.echo(f"No report_font set. Using: {detected or 'Helvetica (built-in)'}")
        return

    font_path = Path(path).expanduser().resolve()
    try:
        resolve_report_fonts(font_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    set_setting("report_font", str(font_path))
    click.echo(f"Set report_font: {font_path}")
