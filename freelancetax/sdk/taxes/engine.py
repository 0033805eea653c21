"""Monthly tax computation for the self-employed flat-expense regime.

Pure functions over immutable record snapshots: no I/O, no clock reads
except the ``date.today()`` default of compute_tax_summary.

Calculation for a reference month:

    statutory_expenses   = income * statutory_expense_rate
    taxable_income_base  = income - statutory_expenses
    social_security_base = taxable_income_base clamped to [MIN, MAX],
                           or 0 when the month has no income
    social_security      = social_security_base * rate
    tax_base             = taxable_income_base - social_security
    income_tax           = tax_base * income_tax_rate, never negative
    net_income           = income - social_security - income_tax

Months are numbered 1-12 like ``datetime.date.month``.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from ..schemas import IncomeRecord, TaxSummary, UserSettings
from .rules import load_tax_rules
from .schemas import (
    MAX_INSURANCE_INCOME,
    MIN_INSURANCE_INCOME,
    TaxRules,
)

logger = logging.getLogger(__name__)


def aggregate_period(
    records: Iterable[IncomeRecord],
    year: int,
    month: Optional[int] = None,
) -> float:
    """Sum record amounts for a calendar month, or a whole year if month is None.

    Record type is not branched on; future-dated records count if they fall
    in the period.

    Raises:
        ValueError: If month is outside 1-12
    """
    if month is not None and not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got: {month}")

    total = 0.0
    for record in records:
        if record.date.year != year:
            continue
        if month is not None and record.date.month != month:
            continue
        total += record.amount
    return total


def resolve_social_security_base(
    taxable_income_base: float,
    monthly_income: float,
    min_insurance_income: float = MIN_INSURANCE_INCOME,
    max_insurance_income: float = MAX_INSURANCE_INCOME,
) -> float:
    """Clamp the taxable base to the insurance income bounds.

    A month with zero gross income has no contribution base at all; this
    override wins over the minimum clamp.
    """
    base = taxable_income_base
    if base < min_insurance_income:
        base = min_insurance_income
    elif base > max_insurance_income:
        base = max_insurance_income

    if monthly_income == 0:
        base = 0.0

    return base


def calculate_income_tax(tax_base: float, rate: float) -> float:
    """Flat income tax. A negative base yields zero tax, not a credit."""
    return tax_base * rate if tax_base > 0 else 0.0


def calculate_month(
    monthly_income: float,
    rules: Optional[TaxRules] = None,
    elected_base: Optional[float] = None,
) -> dict:
    """Compute the monthly breakdown for a gross income figure.

    Args:
        monthly_income: Gross income for the month (EUR)
        rules: Regime parameters (defaults to built-in constants)
        elected_base: When set, used instead of the taxable income base as the
            input to the social security base clamp

    Returns:
        Dict with statutory_expenses, taxable_income_base, social_security_base,
        social_security, tax_base, income_tax and net_income
    """
    if rules is None:
        rules = TaxRules()
    ss_rules = rules.social_security

    statutory_expenses = monthly_income * rules.statutory_expense_rate
    taxable_income_base = monthly_income - statutory_expenses

    base_input = taxable_income_base if elected_base is None else elected_base
    social_security_base = resolve_social_security_base(
        base_input,
        monthly_income,
        min_insurance_income=ss_rules.min_insurance_income,
        max_insurance_income=ss_rules.max_insurance_income,
    )
    social_security = social_security_base * ss_rules.rate

    tax_base = taxable_income_base - social_security
    income_tax = calculate_income_tax(tax_base, rules.income_tax_rate)
    net_income = monthly_income - social_security - income_tax

    return {
        "statutory_expenses": statutory_expenses,
        "taxable_income_base": taxable_income_base,
        "social_security_base": social_security_base,
        "social_security": social_security,
        "tax_base": tax_base,
        "income_tax": income_tax,
        "net_income": net_income,
    }


def vat_progress(yearly_income: float, vat_threshold: float) -> float:
    """Yearly turnover as a percentage of the VAT threshold. May exceed 100."""
    return yearly_income / vat_threshold * 100


def compute_tax_summary(
    records: Iterable[IncomeRecord],
    reference_date: Optional[date] = None,
    rules: Optional[TaxRules] = None,
    settings: Optional[UserSettings] = None,
) -> TaxSummary:
    """Compute the tax summary for the month and year of reference_date.

    Args:
        records: Snapshot of the ledger
        reference_date: Day selecting the month/year (default: today)
        rules: Regime parameters (default: rules for the reference year)
        settings: User settings; only insurance_base_mode and
            insurance_income are read

    Returns:
        TaxSummary with full-precision EUR amounts
    """
    if reference_date is None:
        reference_date = date.today()
    if rules is None:
        rules = load_tax_rules(reference_date.year)

    records = tuple(records)
    monthly_income = aggregate_period(records, reference_date.year, reference_date.month)
    yearly_income = aggregate_period(records, reference_date.year)

    elected_base = None
    if settings is not None and settings.insurance_base_mode == "elected":
        elected_base = settings.insurance_income

    month = calculate_month(monthly_income, rules=rules, elected_base=elected_base)

    logger.debug(
        "Summary %04d-%02d: income=%s yearly=%s ss_base=%s",
        reference_date.year, reference_date.month,
        monthly_income, yearly_income, month["social_security_base"],
    )

    return TaxSummary(
        year=reference_date.year,
        month=reference_date.month,
        total_income=monthly_income,
        vat_turnover=yearly_income,
        vat_progress_percent=vat_progress(yearly_income, rules.vat_threshold),
        **month,
    )
