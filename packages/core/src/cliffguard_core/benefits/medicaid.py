"""Medicaid eligibility by MAGI as a share of the poverty guideline.

Medicaid produces an eligibility flag only; amounts are always zero.
"""

from decimal import Decimal

import structlog

from ..models.household import HouseholdInput, MedicaidCategory
from ..models.results import IneligibilityReason, ProgramEligibility, ProgramId
from ..money import round_cents
from ..parameters.registry import ProgramTables

logger = structlog.get_logger()


def medicaid_income_limit(household: HouseholdInput, tables: ProgramTables) -> int:
    """Annual MAGI limit in cents for the household's category and size."""
    fpl = tables.federal.poverty.annual(household.household_size)
    threshold = tables.state.medicaid.limit_for(household.effective_medicaid_category)
    return round_cents(Decimal(fpl) * threshold)


def evaluate_medicaid(household: HouseholdInput, tables: ProgramTables) -> ProgramEligibility:
    medicaid = tables.state.medicaid
    category = household.effective_medicaid_category

    if medicaid.limit_for(category) <= 0:
        return ProgramEligibility.denied(ProgramId.MEDICAID, IneligibilityReason.CATEGORY_NOT_COVERED)

    if category == MedicaidCategory.AGED_BLIND_DISABLED:
        if not household.has_elderly_or_disabled:
            return ProgramEligibility.denied(ProgramId.MEDICAID, IneligibilityReason.NOT_AGED_BLIND_DISABLED)
        if medicaid.abd_asset_limit is not None and household.asset_value > medicaid.abd_asset_limit:
            return ProgramEligibility.denied(ProgramId.MEDICAID, IneligibilityReason.ASSETS_TOO_HIGH)

    magi = max(0, household.market_income)
    limit = medicaid_income_limit(household, tables)
    logger.debug(
        "medicaid_income_test",
        state_code=tables.state_code,
        category=category.value,
        magi=magi,
        limit=limit,
    )
    if magi > limit:
        return ProgramEligibility.denied(ProgramId.MEDICAID, IneligibilityReason.INCOME_TOO_HIGH)
    return ProgramEligibility(program=ProgramId.MEDICAID, eligible=True)
