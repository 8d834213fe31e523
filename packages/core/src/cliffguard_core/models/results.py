"""Result models produced by the tax, benefit, cliff and radar components.

All results are frozen pydantic models holding integer cents. Fractions are
Decimal values in [0, 1]; the ``*_percent`` computed fields convert them to
0-100 for the boundary.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from ..money import MONTHS_PER_YEAR, fraction_to_percent
from .household import FilingStatus, HouseholdInput

_FROZEN = {"frozen": True}


# =============================================================================
# AUDIT TRAIL
# =============================================================================

class CalculationStep(BaseModel):
    """Audit log entry for calculation transparency."""

    model_config = _FROZEN

    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


# =============================================================================
# TAX RESULTS
# =============================================================================

class DeductionBreakdown(BaseModel):
    """Standard vs. itemized deduction selection."""

    model_config = _FROZEN

    standard: int
    itemized: int
    used_standard: bool

    @computed_field
    @property
    def amount(self) -> int:
        """The deduction actually taken."""
        return self.standard if self.used_standard else self.itemized


class SelfEmploymentTax(BaseModel):
    """Schedule C / Schedule SE detail."""

    model_config = _FROZEN

    gross_income: int = 0
    expenses: int = 0
    net_profit: int = 0
    net_earnings: int = 0
    se_tax: int = 0
    deductible_portion: int = 0


class EducationCredits(BaseModel):
    """Form 8863 credits after the MAGI phase-out."""

    model_config = _FROZEN

    american_opportunity_credit: int = 0
    aoc_refundable_portion: int = 0
    lifetime_learning_credit: int = 0
    phase_out_fraction: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        le=1,
        description="Share of the credit kept after the MAGI phase-out",
    )

    @computed_field
    @property
    def nonrefundable_portion(self) -> int:
        return self.american_opportunity_credit - self.aoc_refundable_portion + self.lifetime_learning_credit

    @computed_field
    @property
    def total(self) -> int:
        return self.american_opportunity_credit + self.lifetime_learning_credit


class TaxResult(BaseModel):
    """Federal Form 1040 style liability breakdown."""

    model_config = _FROZEN

    tax_year: int
    filing_status: FilingStatus

    # Income
    total_income: int
    agi: int
    deduction: DeductionBreakdown
    taxable_income: int
    tax_before_credits: int
    marginal_rate: Decimal

    # Credits
    eitc: int = 0
    ctc: int = 0
    ctc_nonrefundable: int = 0
    additional_ctc: int = 0
    cdcc: int = 0
    education: EducationCredits = Field(default_factory=EducationCredits)
    self_employment: SelfEmploymentTax = Field(default_factory=SelfEmploymentTax)

    # Totals
    nonrefundable_credits: int = 0
    refundable_credits: int = 0
    income_tax_after_credits: int = 0
    total_tax: int = 0
    federal_withholding: int = 0
    refund_or_owed: int = Field(default=0, description="Positive = refund, negative = amount owed")

    steps: tuple[CalculationStep, ...] = ()
    source: str = "in_process"

    @model_validator(mode="after")
    def check_invariants(self) -> "TaxResult":
        if self.taxable_income != max(0, self.agi - self.deduction.amount):
            raise ValueError("taxable_income must equal max(0, agi - deduction)")
        for name in ("eitc", "ctc", "ctc_nonrefundable", "additional_ctc", "cdcc"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        return self

    @property
    def net_tax(self) -> int:
        """Total tax less refundable credits; negative when credits exceed tax."""
        return self.total_tax - self.refundable_credits

    @computed_field
    @property
    def marginal_rate_percent(self) -> Decimal:
        return fraction_to_percent(self.marginal_rate)


# =============================================================================
# BENEFIT RESULTS
# =============================================================================

class ProgramId(str, Enum):
    """Programs tracked by the engine."""
    SNAP = "snap"
    TANF = "tanf"
    SSI = "ssi"
    MEDICAID = "medicaid"
    EITC = "eitc"
    CTC = "ctc"

    @property
    def label(self) -> str:
        return _PROGRAM_LABELS[self]


_PROGRAM_LABELS = {
    ProgramId.SNAP: "SNAP",
    ProgramId.TANF: "TANF",
    ProgramId.SSI: "SSI",
    ProgramId.MEDICAID: "Medicaid",
    ProgramId.EITC: "EITC",
    ProgramId.CTC: "Child Tax Credit",
}


class IneligibilityReason(str, Enum):
    """Closed set of reasons a program evaluation can fail."""
    GROSS_INCOME_TOO_HIGH = "gross_income_too_high"
    NET_INCOME_TOO_HIGH = "net_income_too_high"
    INCOME_TOO_HIGH = "income_too_high"
    ASSETS_TOO_HIGH = "assets_too_high"
    NO_CHILD_OR_PREGNANCY = "no_child_or_pregnancy"
    NOT_AGED_BLIND_DISABLED = "not_aged_blind_disabled"
    NO_BENEFIT_DUE = "no_benefit_due"
    CATEGORY_NOT_COVERED = "category_not_covered"


class ProgramEligibility(BaseModel):
    """Eligibility flag and amount for one program."""

    model_config = _FROZEN

    program: ProgramId
    eligible: bool
    monthly_amount: int = Field(default=0, ge=0)
    annual_amount: int = Field(default=0, ge=0)
    reason: Optional[IneligibilityReason] = None

    @model_validator(mode="after")
    def check_amounts(self) -> "ProgramEligibility":
        if not self.eligible and (self.monthly_amount or self.annual_amount):
            raise ValueError("amounts must be zero when not eligible")
        if self.annual_amount != self.monthly_amount * MONTHS_PER_YEAR:
            raise ValueError("annual_amount must be twelve times monthly_amount")
        return self

    @classmethod
    def granted(cls, program: ProgramId, monthly_amount: int) -> "ProgramEligibility":
        return cls(
            program=program,
            eligible=True,
            monthly_amount=monthly_amount,
            annual_amount=monthly_amount * MONTHS_PER_YEAR,
        )

    @classmethod
    def denied(cls, program: ProgramId, reason: IneligibilityReason) -> "ProgramEligibility":
        return cls(program=program, eligible=False, reason=reason)


# =============================================================================
# CLIFF COMPARISON
# =============================================================================

class CliffSeverity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return list(CliffSeverity).index(self)


class NoticeCode(str, Enum):
    """Closed set of conditions that produce cliff warnings and recommendations."""
    # Warnings
    BENEFIT_CLIFF = "benefit_cliff"
    MEDICAID_LOST = "medicaid_lost"
    PROGRAM_ENDED = "program_ended"
    PROGRAM_REDUCED = "program_reduced"
    EITC_PHASED_OUT = "eitc_phased_out"
    # Recommendations
    NEGOTIATE_HIGHER_WAGE = "negotiate_higher_wage"
    TRANSITIONAL_BENEFITS = "transitional_benefits"
    WEIGH_NON_FINANCIAL_VALUE = "weigh_non_financial_value"
    PRETAX_DEDUCTIONS = "pretax_deductions"
    FUTURE_GROWTH = "future_growth"
    MODEST_NET_GAIN = "modest_net_gain"
    STRONG_NET_GAIN = "strong_net_gain"
    SECURE_HEALTH_COVERAGE = "secure_health_coverage"
    CLAIM_TAX_CREDITS = "claim_tax_credits"


class Notice(BaseModel):
    """A warning or recommendation from the enumerated trigger set."""

    model_config = _FROZEN

    code: NoticeCode
    message: str
    program: Optional[ProgramId] = None


class ProgramImpact(BaseModel):
    """Per-program monthly change between two scenarios."""

    model_config = _FROZEN

    program: ProgramId
    current_monthly: int
    proposed_monthly: int
    current_eligible: bool
    proposed_eligible: bool

    @computed_field
    @property
    def delta(self) -> int:
        return self.proposed_monthly - self.current_monthly

    @property
    def eligibility_lost(self) -> bool:
        return self.current_eligible and not self.proposed_eligible


class ScenarioResult(BaseModel):
    """One side of a cliff comparison."""

    model_config = _FROZEN

    household: HouseholdInput
    tax: TaxResult
    programs: tuple[ProgramEligibility, ...]
    market_income: int
    net_tax: int
    total_benefits: int = Field(description="Annual sum of program benefits")
    net_income: int = Field(description="Market income - net tax + benefits, annual")

    @property
    def total_monthly_benefits(self) -> int:
        return sum(p.monthly_amount for p in self.programs)


class CliffComparison(BaseModel):
    """Comparison of a current and a proposed income scenario."""

    model_config = _FROZEN

    current: ScenarioResult
    proposed: ScenarioResult

    wage_increase: int
    wage_increase_fraction: Decimal
    benefit_loss: int
    net_income_change: int
    net_income_change_fraction: Decimal

    is_cliff: bool
    severity: CliffSeverity
    thresholds_version: str

    program_impacts: tuple[ProgramImpact, ...] = ()
    recommendations: tuple[Notice, ...] = ()
    warnings: tuple[Notice, ...] = ()

    @computed_field
    @property
    def wage_increase_percent(self) -> Decimal:
        return fraction_to_percent(self.wage_increase_fraction)

    @computed_field
    @property
    def net_income_change_percent(self) -> Decimal:
        return fraction_to_percent(self.net_income_change_fraction)


class WagePoint(BaseModel):
    """One point of an income sweep."""

    model_config = _FROZEN

    wages: int
    net_income: int
    total_benefits: int
    net_tax: int


class OptimalWage(BaseModel):
    """Result of sweeping wages to find the highest net income."""

    model_config = _FROZEN

    optimal_wages: int
    max_net_income: int
    points: tuple[WagePoint, ...]


__all__ = [
    "CalculationStep",
    "DeductionBreakdown",
    "SelfEmploymentTax",
    "EducationCredits",
    "TaxResult",
    "ProgramId",
    "IneligibilityReason",
    "ProgramEligibility",
    "CliffSeverity",
    "Notice",
    "NoticeCode",
    "ProgramImpact",
    "ScenarioResult",
    "CliffComparison",
    "WagePoint",
    "OptimalWage",
]
