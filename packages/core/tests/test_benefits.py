"""Tests for SNAP, TANF, SSI and Medicaid evaluation."""

import pytest

from cliffguard_core.benefits import (
    evaluate_benefits,
    evaluate_medicaid,
    evaluate_programs,
    evaluate_snap,
    evaluate_ssi,
    evaluate_tanf,
    medicaid_income_limit,
    snap_net_income,
)
from cliffguard_core.exceptions import UnsupportedStateError, UnsupportedYearError
from cliffguard_core.models import (
    HouseholdInput,
    IneligibilityReason,
    MedicaidCategory,
    ProgramId,
)


class TestSnap:
    def test_single_parent_allotment(self, md_2024, single_parent):
        assert snap_net_income(single_parent, md_2024) == 13000

        result = evaluate_snap(single_parent, md_2024)

        assert result.eligible is True
        assert result.monthly_amount == 49600
        assert result.annual_amount == 49600 * 12

    def test_gross_income_test(self, md_2024, single_parent_raise):
        result = evaluate_snap(single_parent_raise, md_2024)

        assert result.eligible is False
        assert result.reason == IneligibilityReason.GROSS_INCOME_TOO_HIGH
        assert result.monthly_amount == 0

    def test_elderly_member_skips_gross_test_and_shelter_cap(self, md_2024, single_parent_raise):
        household = single_parent_raise.with_changes(elderly_or_disabled=1)

        result = evaluate_snap(household, md_2024)

        assert result.eligible is True
        assert result.monthly_amount == 44410

    def test_maximum_allotment_with_no_income(self, md_2024):
        result = evaluate_snap(HouseholdInput(adults=1), md_2024)

        assert result.monthly_amount == 29100

    def test_minimum_benefit_for_small_household(self, md_2024):
        household = HouseholdInput(adults=1, unearned_income=1440000)

        result = evaluate_snap(household, md_2024)

        assert result.eligible is True
        assert result.monthly_amount == 2300

    def test_asset_limit(self, md_2024):
        household = HouseholdInput(adults=1, asset_value=300000)

        assert evaluate_snap(household, md_2024).reason == IneligibilityReason.ASSETS_TOO_HIGH
        assert evaluate_snap(household.with_changes(elderly_or_disabled=1), md_2024).eligible is True

    def test_categorical_eligibility_waives_tests(self, md_2024, single_parent_raise):
        household = single_parent_raise.with_changes(receives_tanf=True, asset_value=1000000)

        result = evaluate_snap(household, md_2024)

        assert result.eligible is True


class TestTanf:
    def test_no_income_gets_payment_standard(self, md_2024):
        household = HouseholdInput(adults=1, children=1)

        result = evaluate_tanf(household, md_2024)

        assert result.monthly_amount == 59600

    def test_requires_child_or_pregnancy(self, md_2024):
        result = evaluate_tanf(HouseholdInput(adults=1), md_2024)

        assert result.reason == IneligibilityReason.NO_CHILD_OR_PREGNANCY

    def test_pregnancy_qualifies(self, md_2024):
        result = evaluate_tanf(HouseholdInput(adults=1, pregnant=True), md_2024)

        assert result.monthly_amount == 43800

    def test_earnings_over_standard(self, md_2024, single_parent):
        result = evaluate_tanf(single_parent, md_2024)

        assert result.reason == IneligibilityReason.INCOME_TOO_HIGH

    def test_flat_and_percentage_disregards(self, registry):
        household = HouseholdInput(adults=1, children=2, wages=360000, state_code="TX")

        result = evaluate_tanf(household, registry.programs("TX", 2024))

        # $300 - (33.33% + $120) leaves $80.01 countable against $330
        assert result.monthly_amount == 24999

    def test_asset_limit(self, registry):
        household = HouseholdInput(adults=1, children=1, asset_value=200000)

        result = evaluate_tanf(household, registry.programs("PA", 2024))

        assert result.reason == IneligibilityReason.ASSETS_TOO_HIGH


class TestSsi:
    def test_requires_aged_blind_disabled(self, md_2024):
        result = evaluate_ssi(HouseholdInput(adults=1), md_2024)

        assert result.reason == IneligibilityReason.NOT_AGED_BLIND_DISABLED

    def test_full_federal_benefit(self, md_2024):
        result = evaluate_ssi(HouseholdInput(adults=1, elderly_or_disabled=1), md_2024)

        assert result.monthly_amount == 94300

    def test_unearned_income_reduces_benefit(self, md_2024):
        household = HouseholdInput(adults=1, elderly_or_disabled=1, unearned_income=720000)

        assert evaluate_ssi(household, md_2024).monthly_amount == 36300

    def test_earned_income_exclusions(self, md_2024):
        household = HouseholdInput(adults=1, elderly_or_disabled=1, wages=600000)

        assert evaluate_ssi(household, md_2024).monthly_amount == 73550

    def test_state_supplement(self, registry):
        household = HouseholdInput(adults=1, elderly_or_disabled=1, state_code="CA")

        result = evaluate_ssi(household, registry.programs("CA", 2024))

        assert result.monthly_amount == 94300 + 16072

    def test_couple_rate(self, md_2024):
        household = HouseholdInput(adults=2, elderly_or_disabled=2)

        assert evaluate_ssi(household, md_2024).monthly_amount == 141500

    def test_resource_limit(self, md_2024):
        household = HouseholdInput(adults=1, elderly_or_disabled=1, asset_value=250000)

        assert evaluate_ssi(household, md_2024).reason == IneligibilityReason.ASSETS_TOO_HIGH


class TestMedicaid:
    def test_income_limit(self, md_2024, single_parent):
        assert medicaid_income_limit(single_parent, md_2024) == 2820720

    def test_eligibility_is_flag_only(self, md_2024, single_parent):
        result = evaluate_medicaid(single_parent, md_2024)

        assert result.eligible is True
        assert result.monthly_amount == 0
        assert result.annual_amount == 0

    def test_loses_eligibility_after_raise(self, md_2024, single_parent_raise):
        result = evaluate_medicaid(single_parent_raise, md_2024)

        assert result.reason == IneligibilityReason.INCOME_TOO_HIGH

    def test_non_expansion_state_adult(self, registry):
        household = HouseholdInput(adults=1, children=1, wages=500000, state_code="TX")

        result = evaluate_medicaid(household, registry.programs("TX", 2024))

        assert result.eligible is False

    def test_child_category(self, registry):
        household = HouseholdInput(
            adults=1,
            children=2,
            wages=4000000,
            medicaid_category=MedicaidCategory.CHILD,
            state_code="TX",
        )

        assert evaluate_medicaid(household, registry.programs("TX", 2024)).eligible is True

    def test_aged_blind_disabled_needs_member(self, md_2024):
        household = HouseholdInput(adults=1, medicaid_category=MedicaidCategory.AGED_BLIND_DISABLED)

        result = evaluate_medicaid(household, md_2024)

        assert result.reason == IneligibilityReason.NOT_AGED_BLIND_DISABLED


class TestEvaluatePrograms:
    def test_order(self, md_2024, single_parent):
        results = evaluate_programs(single_parent, md_2024)

        assert [r.program for r in results] == [
            ProgramId.SNAP,
            ProgramId.TANF,
            ProgramId.SSI,
            ProgramId.MEDICAID,
        ]

    def test_resolves_tables_from_household(self, single_parent):
        results = evaluate_benefits(single_parent)

        assert results[0].monthly_amount == 49600

    def test_unsupported_state(self, single_parent):
        with pytest.raises(UnsupportedStateError):
            evaluate_benefits(single_parent, state_code="ZZ")

    def test_unsupported_year(self, single_parent):
        with pytest.raises(UnsupportedYearError):
            evaluate_benefits(single_parent, year=2030)
