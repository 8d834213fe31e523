"""Federal credit computations: EITC, CTC/ACTC, CDCC and education credits.

Each function is pure and works on integer cents. Phase-in and phase-out
amounts are rounded to the cent once, at the end of each computation.
"""

from dataclasses import dataclass
from decimal import Decimal

from ..models.household import FilingStatus
from ..models.results import EducationCredits, TaxResult
from ..money import apply_rate, ceil_div, clamp, ratio, round_cents
from ..parameters.federal import (
    ChildTaxCreditParams,
    DependentCareParams,
    EducationCreditParams,
    FederalTaxTables,
)


# =============================================================================
# EARNED INCOME TAX CREDIT
# =============================================================================

def earned_income_credit(
    tables: FederalTaxTables,
    filing_status: FilingStatus,
    qualifying_children: int,
    earned_income: int,
    agi: int,
    investment_income: int,
) -> int:
    """EITC per IRC §32.

    The credit is the phase-in amount on earned income, limited by the
    maximum credit less the phase-out on the greater of AGI and earned
    income.
    """
    if filing_status == FilingStatus.MARRIED_FILING_SEPARATELY:
        return 0
    if earned_income <= 0:
        return 0
    if investment_income > tables.eitc_investment_income_limit:
        return 0

    row = tables.eitc_row(qualifying_children)
    phase_in = min(
        row.max_credit,
        apply_rate(min(earned_income, row.earned_income_amount), row.credit_rate),
    )

    joint = filing_status == FilingStatus.MARRIED_FILING_JOINTLY
    start = row.phase_out_start_joint if joint else row.phase_out_start
    phase_out_base = max(agi, earned_income)
    reduction = apply_rate(max(0, phase_out_base - start), row.phase_out_rate)
    ceiling = max(0, row.max_credit - reduction)

    return max(0, min(phase_in, ceiling))


# =============================================================================
# CHILD TAX CREDIT
# =============================================================================

def child_tax_credit(
    params: ChildTaxCreditParams,
    filing_status: FilingStatus,
    qualifying_children: int,
    agi: int,
) -> int:
    """Total CTC after the AGI phase-out, before the liability limit."""
    if qualifying_children <= 0:
        return 0
    base = params.per_child * qualifying_children
    threshold = (
        params.phase_out_threshold_joint
        if filing_status == FilingStatus.MARRIED_FILING_JOINTLY
        else params.phase_out_threshold
    )
    steps = ceil_div(max(0, agi - threshold), params.phase_out_step)
    return max(0, base - steps * params.phase_out_per_step)


def additional_child_tax_credit(
    params: ChildTaxCreditParams,
    qualifying_children: int,
    unused_ctc: int,
    earned_income: int,
) -> int:
    """Refundable ACTC: least of unused CTC, per-child limit and 15% of earnings over the floor."""
    if qualifying_children <= 0 or unused_ctc <= 0:
        return 0
    earned_limit = apply_rate(max(0, earned_income - params.refundable_earned_floor), params.refundable_rate)
    return max(0, min(unused_ctc, params.refundable_limit * qualifying_children, earned_limit))


# =============================================================================
# CHILD AND DEPENDENT CARE CREDIT
# =============================================================================

def dependent_care_rate(params: DependentCareParams, agi: int) -> Decimal:
    steps = ceil_div(max(0, agi - params.agi_threshold), params.agi_step)
    return max(params.min_rate, params.max_rate - params.rate_step * steps)


def dependent_care_credit(
    params: DependentCareParams,
    care_dependents: int,
    annual_care_expenses: int,
    earned_income: int,
    agi: int,
) -> int:
    """Tentative CDCC (Form 2441), before the liability limit."""
    if care_dependents <= 0 or annual_care_expenses <= 0 or earned_income <= 0:
        return 0
    limit = params.expense_limit_one if care_dependents == 1 else params.expense_limit_two_or_more
    qualified = min(annual_care_expenses, limit, earned_income)
    return apply_rate(qualified, dependent_care_rate(params, agi))


# =============================================================================
# EDUCATION CREDITS
# =============================================================================

def education_phase_out_fraction(
    params: EducationCreditParams,
    filing_status: FilingStatus,
    magi: int,
) -> Decimal:
    """Share of the education credit kept, continuous and clipped to [0, 1]."""
    if filing_status == FilingStatus.MARRIED_FILING_SEPARATELY:
        return Decimal("0")
    if filing_status == FilingStatus.MARRIED_FILING_JOINTLY:
        lower, upper = params.phase_out_lower_joint, params.phase_out_upper_joint
    else:
        lower, upper = params.phase_out_lower, params.phase_out_upper
    if magi >= upper:
        return Decimal("0")
    return clamp(ratio(upper - magi, upper - lower))


def _aoc_per_student(params: EducationCreditParams, expenses: int) -> int:
    full = min(expenses, params.aoc_full_expenses)
    partial = min(max(0, expenses - params.aoc_full_expenses), params.aoc_partial_expenses)
    return full + apply_rate(partial, params.aoc_partial_rate)


def education_credits(
    params: EducationCreditParams,
    filing_status: FilingStatus,
    students: int,
    expenses: int,
    magi: int,
) -> EducationCredits:
    """American Opportunity (students > 0) or Lifetime Learning credit."""
    fraction = education_phase_out_fraction(params, filing_status, magi)
    if expenses <= 0 or fraction == 0:
        return EducationCredits(phase_out_fraction=fraction)

    if students > 0:
        share = expenses // students
        tentative = _aoc_per_student(params, share) * students
        aoc = round_cents(Decimal(tentative) * fraction)
        return EducationCredits(
            american_opportunity_credit=aoc,
            aoc_refundable_portion=apply_rate(aoc, params.aoc_refundable_rate),
            phase_out_fraction=fraction,
        )

    qualified = min(expenses, params.llc_expense_limit)
    llc = round_cents(Decimal(qualified) * params.llc_rate * fraction)
    return EducationCredits(lifetime_learning_credit=llc, phase_out_fraction=fraction)


# =============================================================================
# STATUTORY CAPS
# =============================================================================

@dataclass(frozen=True)
class CreditCaps:
    """Largest amount each credit can reach for a household's composition."""
    eitc: int
    ctc: int
    additional_ctc: int
    american_opportunity_credit: int
    lifetime_learning_credit: int

    def violations(self, result: TaxResult) -> list[str]:
        """Names of the credits in ``result`` that exceed their cap."""
        amounts = {
            "eitc": result.eitc,
            "ctc": result.ctc,
            "additional_ctc": result.additional_ctc,
            "american_opportunity_credit": result.education.american_opportunity_credit,
            "lifetime_learning_credit": result.education.lifetime_learning_credit,
        }
        return [name for name, amount in amounts.items() if amount > getattr(self, name)]


def credit_caps(tables: FederalTaxTables, qualifying_children: int, students: int) -> CreditCaps:
    ctc = tables.ctc
    edu = tables.education
    children = max(0, qualifying_children)
    return CreditCaps(
        eitc=tables.eitc_row(children).max_credit,
        ctc=ctc.per_child * children,
        additional_ctc=ctc.refundable_limit * children,
        american_opportunity_credit=(
            _aoc_per_student(edu, edu.aoc_full_expenses + edu.aoc_partial_expenses) * max(0, students)
        ),
        lifetime_learning_credit=apply_rate(edu.llc_expense_limit, edu.llc_rate),
    )
