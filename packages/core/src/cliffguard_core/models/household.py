"""Household input model.

A HouseholdInput is created once per request and never mutated. Income and
tax fields are annual, living costs are monthly, and every amount is an
integer number of cents.
"""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..exceptions import InvalidInputError
from ..money import MONTHS_PER_YEAR, round_cents


# =============================================================================
# ENUMERATIONS
# =============================================================================

class FilingStatus(str, Enum):
    """IRS filing status options."""
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_SURVIVING_SPOUSE = "qualifying_surviving_spouse"


class MedicaidCategory(str, Enum):
    """Medicaid eligibility pathway used for the FPL threshold lookup."""
    ADULT = "adult"
    CHILD = "child"
    PREGNANT = "pregnant"
    AGED_BLIND_DISABLED = "aged_blind_disabled"


# Aliases accepted from intake forms and the external calculator.
_FILING_STATUS_ALIASES = {
    "married_joint": FilingStatus.MARRIED_FILING_JOINTLY,
    "joint": FilingStatus.MARRIED_FILING_JOINTLY,
    "mfj": FilingStatus.MARRIED_FILING_JOINTLY,
    "married_separate": FilingStatus.MARRIED_FILING_SEPARATELY,
    "separate": FilingStatus.MARRIED_FILING_SEPARATELY,
    "mfs": FilingStatus.MARRIED_FILING_SEPARATELY,
    "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
    "qualifying_widow": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    "surviving_spouse": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
}


def _cents(description: str) -> Any:
    return Field(default=0, ge=0, description=description)


class HouseholdInput(BaseModel):
    """Financial and demographic inputs for one household evaluation."""

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "wages": 4500000,
                    "adults": 1,
                    "filing_status": "single",
                    "tax_year": 2024,
                    "state_code": "MD",
                }
            ]
        },
    }

    # Annual income (cents)
    wages: int = _cents("Annual W-2 wages")
    self_employment_gross: int = _cents("Annual Schedule C gross receipts")
    self_employment_expenses: int = _cents("Annual Schedule C business expenses")
    unearned_income: int = _cents("Annual interest, dividends, unemployment and other unearned income")
    federal_withholding: int = _cents("Federal income tax already withheld")
    itemized_deductions: int = _cents("Total itemized deductions (Schedule A)")
    education_expenses: int = _cents("Annual qualified education expenses")

    # Resources (cents)
    asset_value: int = _cents("Countable liquid assets")

    # Monthly living costs (cents)
    shelter_costs: int = _cents("Monthly rent or mortgage, property tax and insurance")
    utility_costs: int = _cents("Monthly utility costs")
    medical_costs: int = _cents("Monthly out-of-pocket medical costs")
    childcare_costs: int = _cents("Monthly dependent care costs")

    # Composition
    adults: int = Field(default=1, ge=0, description="Adults in the household")
    children: int = Field(default=0, ge=0, description="Children in the household")
    elderly_or_disabled: int = Field(
        default=0,
        ge=0,
        description="Members who are 60+ or have a disability",
    )
    pregnant: bool = Field(default=False, description="A household member is pregnant")

    # Tax unit
    filing_status: FilingStatus = FilingStatus.SINGLE
    qualifying_children: int = Field(default=0, ge=0, description="EITC/CTC qualifying children")
    dependents: int = Field(default=0, ge=0, description="Total dependents claimed")
    care_dependents: Optional[int] = Field(
        default=None,
        ge=0,
        description="Qualifying persons for the dependent care credit (defaults to qualifying children)",
    )
    students: int = Field(default=0, ge=0, description="Students eligible for the American Opportunity Credit")

    # Program context
    receives_ssi: bool = False
    receives_tanf: bool = False
    medicaid_category: Optional[MedicaidCategory] = None

    tax_year: int = Field(default=2024, ge=1900, le=2200)
    state_code: str = Field(default="MD", min_length=2, max_length=2)

    @field_validator("filing_status", mode="before")
    @classmethod
    def normalize_filing_status(cls, v):
        """Accept common aliases ("married_joint", "hoh", ...)."""
        if isinstance(v, str):
            key = v.strip().lower()
            return _FILING_STATUS_ALIASES.get(key, key)
        return v

    @field_validator("state_code", mode="before")
    @classmethod
    def normalize_state_code(cls, v):
        """Upper-case and strip the state code."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def check_composition(self) -> "HouseholdInput":
        if self.household_size < 1:
            raise ValueError("household size must be at least 1")
        if self.elderly_or_disabled > self.household_size:
            raise ValueError("elderly_or_disabled cannot exceed household size")
        return self

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(cls, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> "HouseholdInput":
        """Validate raw data into a HouseholdInput.

        Raises:
            InvalidInputError: On any malformed or out-of-range field. The
                first offending field is reported; all errors are attached
                under ``details["errors"]``.
        """
        payload = dict(data or {})
        payload.update(fields)
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            errors = e.errors(include_url=False)
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise InvalidInputError(
                f"Invalid household input: {first.get('msg', 'validation failed')}",
                field=field,
                value=first.get("input") if not isinstance(first.get("input"), dict) else None,
                constraint=first.get("type"),
                details={"errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors
                ]},
            ) from e

    def with_changes(self, **changes: Any) -> "HouseholdInput":
        """Return a validated copy with some fields replaced."""
        return HouseholdInput.build(self.model_dump(), **changes)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def household_size(self) -> int:
        return self.adults + self.children

    @property
    def self_employment_net(self) -> int:
        """Schedule C net profit; negative for a loss."""
        return self.self_employment_gross - self.self_employment_expenses

    @property
    def earned_income(self) -> int:
        """Annual earned income for credit and benefit purposes (losses ignored)."""
        return self.wages + max(0, self.self_employment_net)

    @property
    def market_income(self) -> int:
        """Annual wages, business profit or loss, and unearned income."""
        return self.wages + self.self_employment_net + self.unearned_income

    @property
    def monthly_earned_income(self) -> int:
        return round_cents(Decimal(self.earned_income) / MONTHS_PER_YEAR)

    @property
    def monthly_unearned_income(self) -> int:
        return round_cents(Decimal(self.unearned_income) / MONTHS_PER_YEAR)

    @property
    def monthly_gross_income(self) -> int:
        return self.monthly_earned_income + self.monthly_unearned_income

    @property
    def has_elderly_or_disabled(self) -> bool:
        return self.elderly_or_disabled > 0

    @property
    def categorically_eligible(self) -> bool:
        """Receipt of SSI or TANF confers SNAP categorical eligibility."""
        return self.receives_ssi or self.receives_tanf

    @property
    def effective_care_dependents(self) -> int:
        if self.care_dependents is not None:
            return self.care_dependents
        return self.qualifying_children

    @property
    def effective_medicaid_category(self) -> MedicaidCategory:
        if self.medicaid_category is not None:
            return self.medicaid_category
        if self.pregnant:
            return MedicaidCategory.PREGNANT
        return MedicaidCategory.ADULT
