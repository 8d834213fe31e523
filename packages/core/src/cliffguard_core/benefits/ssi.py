"""Supplemental Security Income (20 CFR 416 Subparts K and L).

Countable income applies the $20 general exclusion to unearned income
first; any unused part carries to earned income, which then loses a
further $65 and one half of the remainder. The federal benefit rate is
reduced dollar for dollar by countable income and the state supplement is
added when a federal payment remains.
"""

import structlog

from ..models.household import HouseholdInput
from ..models.results import IneligibilityReason, ProgramEligibility, ProgramId
from ..money import apply_rate
from ..parameters.registry import ProgramTables

logger = structlog.get_logger()


def _is_couple(household: HouseholdInput) -> bool:
    return household.adults >= 2 and household.elderly_or_disabled >= 2


def ssi_countable_income(household: HouseholdInput, tables: ProgramTables) -> int:
    ssi = tables.federal.ssi
    unearned = household.monthly_unearned_income
    earned = household.monthly_earned_income

    countable_unearned = max(0, unearned - ssi.general_income_exclusion)
    leftover_exclusion = max(0, ssi.general_income_exclusion - unearned)
    countable_earned = apply_rate(
        max(0, earned - leftover_exclusion - ssi.earned_income_exclusion),
        ssi.earned_income_share_counted,
    )
    return countable_unearned + countable_earned


def evaluate_ssi(household: HouseholdInput, tables: ProgramTables) -> ProgramEligibility:
    ssi = tables.federal.ssi

    if not household.has_elderly_or_disabled:
        return ProgramEligibility.denied(ProgramId.SSI, IneligibilityReason.NOT_AGED_BLIND_DISABLED)

    couple = _is_couple(household)
    resource_limit = ssi.resource_limit_couple if couple else ssi.resource_limit
    if household.asset_value > resource_limit:
        return ProgramEligibility.denied(ProgramId.SSI, IneligibilityReason.ASSETS_TOO_HIGH)

    fbr = ssi.federal_benefit_rate_couple if couple else ssi.federal_benefit_rate
    countable = ssi_countable_income(household, tables)
    federal_payment = fbr - countable
    if federal_payment <= 0:
        return ProgramEligibility.denied(ProgramId.SSI, IneligibilityReason.INCOME_TOO_HIGH)

    supplement = tables.state.ssi_supplement_couple if couple else tables.state.ssi_supplement
    logger.debug(
        "ssi_benefit",
        couple=couple,
        countable_income=countable,
        federal_payment=federal_payment,
        state_supplement=supplement,
    )
    return ProgramEligibility.granted(ProgramId.SSI, federal_payment + supplement)
