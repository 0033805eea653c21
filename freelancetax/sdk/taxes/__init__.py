"""taxes - Tax rules and the monthly tax computation.

Scope:
- Regime parameters per year (insurance income bounds, rates, VAT threshold)
- Period aggregation of the ledger
- Social security base resolution
- Monthly summary: expenses, contributions, income tax, net income

Constraints:
- Pure calculation - no records storage, no config access
- Receives record snapshots, returns results
- Year-specific rules loaded from tax_rules/{year}.yaml

Usage:
    from freelancetax.sdk.taxes import compute_tax_summary

    summary = compute_tax_summary(store.records(), reference_date=date(2026, 3, 1))
"""

from .schemas import (
    TaxRules,
    SocialSecurityRules,
    MIN_INSURANCE_INCOME,
    MAX_INSURANCE_INCOME,
    SS_RATE,
    STATUTORY_EXPENSE_RATE,
    INCOME_TAX_RATE,
    VAT_THRESHOLD,
)

from .rules import (
    load_tax_rules,
    parse_tax_rules,
    get_available_years,
)

from .engine import (
    aggregate_period,
    resolve_social_security_base,
    calculate_income_tax,
    calculate_month,
    vat_progress,
    compute_tax_summary,
)

__all__ = [
    # Rules
    "TaxRules",
    "SocialSecurityRules",
    "MIN_INSURANCE_INCOME",
    "MAX_INSURANCE_INCOME",
    "SS_RATE",
    "STATUTORY_EXPENSE_RATE",
    "INCOME_TAX_RATE",
    "VAT_THRESHOLD",
    "load_tax_rules",
    "parse_tax_rules",
    "get_available_years",
    # Engine
    "aggregate_period",
    "resolve_social_security_base",
    "calculate_income_tax",
    "calculate_month",
    "vat_progress",
    "compute_tax_summary",
]
