"""Tax rules loading.

Rules live in freelancetax/tax_rules/YYYY.yaml. A year without its own file
uses the most recent earlier year; if none exists the built-in defaults
(2026) apply.
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from .schemas import TaxRules

logger = logging.getLogger(__name__)


def _get_tax_rules_dir() -> Path:
    """Get the tax_rules directory path."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> freelancetax
    return package_root / "tax_rules"


def get_available_years() -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def parse_tax_rules(raw: dict, source: str = "<dict>") -> TaxRules:
    """Validate a raw rules dictionary.

    Raises:
        ValueError: If the rules fail schema validation
    """
    try:
        return TaxRules.model_validate(raw or {})
    except ValidationError as e:
        raise ValueError(f"Invalid tax rules in {source}: {e}") from e


@lru_cache(maxsize=None)
def load_tax_rules(year: int) -> TaxRules:
    """Load tax rules for a year with fallback to prior years.

    Args:
        year: Tax year (e.g., 2026)

    Returns:
        Validated TaxRules for the year

    Raises:
        ValueError: If the matching YAML file is invalid
    """
    year = int(year)
    candidates = [y for y in get_available_years() if y <= year]

    if not candidates:
        logger.debug("No tax rules on file for %s or earlier, using built-in defaults", year)
        return TaxRules(tax_year=year)

    check_year = candidates[0]
    config_file = _get_tax_rules_dir() / f"{check_year}.yaml"
    if check_year != year:
        logger.debug("No tax rules for %s, falling back to %s", year, check_year)

    with open(config_file, "r") as f:
        raw = yaml.safe_load(f)

    return parse_tax_rules(raw, source=str(config_file))
