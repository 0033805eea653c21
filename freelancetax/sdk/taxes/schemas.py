"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to the regime parameters: insurance income bounds, contribution rate,
statutory expense rate, income tax rate and the VAT registration threshold.

Every field defaults to the 2026 value, so ``TaxRules()`` is always usable
and a YAML file only needs the keys that changed.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# 2026 regime constants (EUR). Change per regulatory year via tax_rules/*.yaml.
MIN_INSURANCE_INCOME = 550.66
MAX_INSURANCE_INCOME = 2111.64
SS_RATE = 0.278
STATUTORY_EXPENSE_RATE = 0.25
INCOME_TAX_RATE = 0.10
VAT_THRESHOLD = 51130.0


class SocialSecurityRules(BaseModel):
    """Social security contribution rules (monthly amounts)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    min_insurance_income: float = Field(default=MIN_INSURANCE_INCOME, ge=0, description="Minimum monthly insurance income")
    max_insurance_income: float = Field(default=MAX_INSURANCE_INCOME, gt=0, description="Maximum monthly insurance income")
    rate: float = Field(default=SS_RATE, ge=0, le=1, description="Composite contribution rate")

    @model_validator(mode="after")
    def check_bounds(self) -> "SocialSecurityRules":
        if self.min_insurance_income > self.max_insurance_income:
            raise ValueError(
                f"min_insurance_income ({self.min_insurance_income}) exceeds "
                f"max_insurance_income ({self.max_insurance_income})"
            )
        return self


class TaxRules(BaseModel):
    """Complete tax rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    tax_year: Optional[int] = None
    statutory_expense_rate: float = Field(default=STATUTORY_EXPENSE_RATE, ge=0, le=1)
    social_security: SocialSecurityRules = Field(default_factory=SocialSecurityRules)
    income_tax_rate: float = Field(default=INCOME_TAX_RATE, ge=0, le=1)
    vat_threshold: float = Field(default=VAT_THRESHOLD, gt=0, description="Yearly turnover for VAT registration")
