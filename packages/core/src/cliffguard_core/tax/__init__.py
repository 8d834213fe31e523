"""Federal income tax computation."""

from .calculator import TaxCalculator, bracket_tax, calculate_tax, self_employment_tax
from .credits import (
    CreditCaps,
    additional_child_tax_credit,
    child_tax_credit,
    credit_caps,
    dependent_care_credit,
    dependent_care_rate,
    earned_income_credit,
    education_credits,
    education_phase_out_fraction,
)

__all__ = [
    "TaxCalculator",
    "bracket_tax",
    "calculate_tax",
    "self_employment_tax",
    "CreditCaps",
    "additional_child_tax_credit",
    "child_tax_credit",
    "credit_caps",
    "dependent_care_credit",
    "dependent_care_rate",
    "earned_income_credit",
    "education_credits",
    "education_phase_out_fraction",
]
