"""TANF cash assistance with state payment standards and earned income disregards."""

import structlog

from ..models.household import HouseholdInput
from ..models.results import IneligibilityReason, ProgramEligibility, ProgramId
from ..money import apply_rate
from ..parameters.registry import ProgramTables

logger = structlog.get_logger()


def tanf_countable_income(household: HouseholdInput, tables: ProgramTables) -> int:
    """Monthly countable income after the state's earned income disregards."""
    tanf = tables.state.tanf
    earned = household.monthly_earned_income
    disregarded = apply_rate(earned, tanf.earned_disregard_rate) + tanf.earned_disregard_flat
    return max(0, earned - disregarded) + household.monthly_unearned_income


def evaluate_tanf(household: HouseholdInput, tables: ProgramTables) -> ProgramEligibility:
    tanf = tables.state.tanf

    if household.children <= 0 and not household.pregnant:
        return ProgramEligibility.denied(ProgramId.TANF, IneligibilityReason.NO_CHILD_OR_PREGNANCY)

    if tanf.asset_limit is not None and household.asset_value > tanf.asset_limit:
        return ProgramEligibility.denied(ProgramId.TANF, IneligibilityReason.ASSETS_TOO_HIGH)

    payment_standard = tanf.payment_standard(household.household_size)
    countable = tanf_countable_income(household, tables)
    benefit = payment_standard - countable

    logger.debug(
        "tanf_benefit",
        state_code=tables.state_code,
        payment_standard=payment_standard,
        countable_income=countable,
        benefit=benefit,
    )

    if benefit <= 0:
        return ProgramEligibility.denied(ProgramId.TANF, IneligibilityReason.INCOME_TOO_HIGH)
    return ProgramEligibility.granted(ProgramId.TANF, benefit)
