"""SNAP eligibility and allotment (7 CFR 273.9 - 273.10).

Monthly computation:

1. Gross income test at 130% FPL, waived for households with an elderly or
   disabled member and for categorically eligible households.
2. Resource test, waived for categorically eligible households.
3. Deductions: standard, 20% earned income, dependent care, medical over
   $35 (elderly/disabled only), and excess shelter (capped unless
   elderly/disabled).
4. Net income test at 100% FPL, waived for categorically eligible households.
5. Allotment = maximum allotment - 30% of net income.
"""

import structlog

from ..models.household import HouseholdInput
from ..models.results import IneligibilityReason, ProgramEligibility, ProgramId
from ..money import apply_rate, round_cents
from ..parameters.registry import ProgramTables

logger = structlog.get_logger()


def snap_net_income(household: HouseholdInput, tables: ProgramTables) -> int:
    """Monthly net income after all SNAP deductions."""
    snap = tables.federal.snap
    size = household.household_size
    elderly = household.has_elderly_or_disabled

    gross = household.monthly_gross_income
    earned_deduction = apply_rate(household.monthly_earned_income, snap.earned_income_deduction_rate)
    medical = max(0, household.medical_costs - snap.medical_expense_threshold) if elderly else 0

    adjusted = max(
        0,
        gross
        - snap.standard_deduction(size)
        - earned_deduction
        - household.childcare_costs
        - medical,
    )

    shelter = household.shelter_costs + household.utility_costs
    excess_shelter = max(0, shelter - apply_rate(adjusted, snap.shelter_income_share))
    if not elderly:
        excess_shelter = min(excess_shelter, snap.shelter_cap)

    return max(0, adjusted - excess_shelter)


def evaluate_snap(household: HouseholdInput, tables: ProgramTables) -> ProgramEligibility:
    snap = tables.federal.snap
    size = household.household_size
    fpl = tables.federal.poverty.monthly(size)
    categorical = household.categorically_eligible
    elderly = household.has_elderly_or_disabled

    if not (elderly or categorical):
        gross_limit = round_cents(fpl * snap.gross_income_limit)
        if household.monthly_gross_income > gross_limit:
            return ProgramEligibility.denied(ProgramId.SNAP, IneligibilityReason.GROSS_INCOME_TOO_HIGH)

    if not categorical:
        asset_limit = snap.asset_limit_elderly_disabled if elderly else snap.asset_limit
        if household.asset_value > asset_limit:
            return ProgramEligibility.denied(ProgramId.SNAP, IneligibilityReason.ASSETS_TOO_HIGH)

    net_income = snap_net_income(household, tables)
    if not categorical:
        net_limit = round_cents(fpl * snap.net_income_limit)
        if net_income > net_limit:
            return ProgramEligibility.denied(ProgramId.SNAP, IneligibilityReason.NET_INCOME_TOO_HIGH)

    max_allotment = snap.max_allotment(size)
    benefit = max_allotment - apply_rate(net_income, snap.benefit_reduction_rate)
    if size <= snap.minimum_benefit_max_size:
        benefit = max(benefit, snap.minimum_benefit)
    benefit = min(benefit, max_allotment)

    logger.debug(
        "snap_allotment",
        household_size=size,
        net_income=net_income,
        max_allotment=max_allotment,
        benefit=benefit,
    )

    if benefit <= 0:
        return ProgramEligibility.denied(ProgramId.SNAP, IneligibilityReason.NO_BENEFIT_DUE)
    return ProgramEligibility.granted(ProgramId.SNAP, benefit)


__all__ = ["evaluate_snap", "snap_net_income"]
