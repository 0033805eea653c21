"""Pydantic schemas for freelance-tax data validation.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in the ledger or profile cause clear errors rather than silent ignoring.
"""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


RecordType = Literal["income", "expense"]
InsuranceBaseMode = Literal["actual", "elected"]


# =============================================================================
# Ledger
# =============================================================================


class IncomeRecord(BaseModel):
    """A single dated amount in the ledger.

    Amounts are always stored in EUR. Entry in another currency is converted
    before the record is created (see currency.to_eur).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Opaque unique key, assigned at creation")
    date: dt.date = Field(..., description="Day the income belongs to")
    amount: float = Field(..., ge=0, description="Amount in EUR")
    description: str = Field(..., min_length=1, description="Free-form label")
    type: RecordType = Field(
        default="income",
        description=(
            "Record kind. Expense records are kept for forward compatibility "
            "but are summed like income by the current formulas."
        ),
    )


# =============================================================================
# User settings (profile.yaml)
# =============================================================================


class UserSettings(BaseModel):
    """User profile: identity passthrough plus insurance preferences."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="", description="Full name, shown on reports")
    eic: str = Field(default="", description="Registration / tax id, shown on reports")
    is_self_insured: bool = Field(default=True, description="Not used by the calculation")
    insurance_income: float = Field(
        default=933,
        ge=0,
        description=(
            "Elected monthly insurance income for advance contributions. "
            "Only used by the calculation when insurance_base_mode is 'elected'."
        ),
    )
    use_personal_bank_details: bool = Field(default=False, description="Not used by the calculation")
    insurance_base_mode: InsuranceBaseMode = Field(
        default="actual",
        description=(
            "'actual': contributions follow the month's taxable income. "
            "'elected': contributions follow insurance_income."
        ),
    )


DEFAULT_SETTINGS = UserSettings()


# =============================================================================
# Derived summary
# =============================================================================


class TaxSummary(BaseModel):
    """Monthly tax breakdown plus yearly VAT turnover. Never stored.

    All amounts are full-precision EUR; rounding is a display concern.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    month: int = Field(..., ge=1, le=12)
    total_income: float = Field(..., description="Gross income for the month")
    statutory_expenses: float
    taxable_income_base: float
    social_security_base: float
    social_security: float
    tax_base: float
    income_tax: float
    net_income: float
    vat_turnover: float = Field(..., description="Gross income for the year")
    vat_progress_percent: float = Field(..., description="vat_turnover as % of the VAT threshold, unclamped")

    @computed_field
    @property
    def total_taxes(self) -> float:
        """Social security plus income tax."""
        return self.social_security + self.income_tax
