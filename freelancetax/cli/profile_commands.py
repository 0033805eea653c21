"""Profile CLI commands for Freelance Tax.

Manages user profile data (profile.yaml) - identity shown on reports and
social security preferences.
"""

from datetime import date

import click
import yaml

from freelancetax.sdk import (
    get_profile_path,
    load_profile,
    load_user_settings,
    update_user_settings,
    reset_user_settings,
    validate_profile_key,
    ProfileNotFoundError,
)
from freelancetax.sdk.taxes import load_tax_rules


def check_insurance_income(value: float, year: int) -> None:
    """Elected insurance income must lie within the year's bounds.

    Raises:
        click.BadParameter: If value is outside [min, max]
    """
    ss_rules = load_tax_rules(year).social_security
    if not ss_rules.min_insurance_income <= value <= ss_rules.max_insurance_income:
        raise click.BadParameter(
            f"insurance_income must be between {ss_rules.min_insurance_income:.2f} "
            f"and {ss_rules.max_insurance_income:.2f} for {year}, got {value:.2f}"
        )


@click.group()
def profile():
    """Manage the user profile (profile.yaml).

    \b
    Keys:
      name, eic                   shown on exported reports
      insurance_income            elected monthly insurance income (EUR)
      insurance_base_mode         'actual' (taxable income) or 'elected'
      is_self_insured             stored only
      use_personal_bank_details   stored only
    """
    pass


@profile.command("show")
def profile_show():
    """Show profile location and effective values."""
    path = get_profile_path()
    click.echo(f"Profile: {path}")

    try:
        load_profile(require_exists=True)
    except ProfileNotFoundError:
        click.echo("No profile saved yet (using defaults).")

    try:
        settings = load_user_settings()
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo()
    click.echo(yaml.dump(settings.model_dump(mode="json"), default_flow_style=False, sort_keys=False).rstrip())

    if settings.insurance_base_mode == "actual":
        click.echo()
        click.echo(
            "Note: insurance_income is not used while insurance_base_mode is 'actual'; "
            "contributions follow the month's taxable income."
        )


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key: str, value: str):
    """Set a profile value.

    \b
    Examples:
      freelance-tax profile set name "Ivan Ivanov"
      freelance-tax profile set eic 123456789
      freelance-tax profile set insurance_income 1200
      freelance-tax profile set insurance_base_mode elected
    """
    is_valid, error = validate_profile_key(key)
    if not is_valid:
        raise click.BadParameter(error)

    if key == "insurance_income":
        try:
            amount = float(value)
        except ValueError:
            raise click.BadParameter(f"insurance_income must be a number, got: {value}")
        check_insurance_income(amount, date.today().year)

    try:
        settings = update_user_settings(**{key: value})
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set {key}: {getattr(settings, key)}")
    click.echo(f"Saved to: {get_profile_path()}")


@profile.command("reset")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def profile_reset(force: bool):
    """Reset the profile to defaults (records are kept)."""
    if not force:
        click.confirm("Reset profile to defaults?", abort=True)
    reset_user_settings()
    click.echo("Profile reset to defaults.")
