"""Tests for household input and result models."""

import pytest
from pydantic import ValidationError

from cliffguard_core.exceptions import InvalidInputError
from cliffguard_core.models import (
    CliffSeverity,
    FilingStatus,
    HouseholdInput,
    MedicaidCategory,
    ProgramEligibility,
    ProgramId,
)


class TestHouseholdInput:
    """Test suite for HouseholdInput validation and derived values."""

    def test_defaults(self):
        household = HouseholdInput()

        assert household.household_size == 1
        assert household.filing_status == FilingStatus.SINGLE
        assert household.tax_year == 2024
        assert household.state_code == "MD"

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            HouseholdInput.build(wages=-1)

        assert exc_info.value.field == "wages"
        assert "errors" in exc_info.value.details

    def test_empty_household_rejected(self):
        with pytest.raises(InvalidInputError):
            HouseholdInput.build(adults=0, children=0)

    def test_elderly_cannot_exceed_size(self):
        with pytest.raises(InvalidInputError):
            HouseholdInput.build(adults=1, elderly_or_disabled=2)

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidInputError):
            HouseholdInput.build({"wages": 100, "salary": 100})

    def test_unknown_filing_status_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            HouseholdInput.build(filing_status="complicated")
        assert exc_info.value.field == "filing_status"

    def test_filing_status_aliases(self):
        assert HouseholdInput.build(filing_status="married_joint").filing_status == (
            FilingStatus.MARRIED_FILING_JOINTLY
        )
        assert HouseholdInput.build(filing_status="HOH").filing_status == FilingStatus.HEAD_OF_HOUSEHOLD

    def test_state_code_normalized(self):
        assert HouseholdInput.build(state_code=" md ").state_code == "MD"

    def test_is_frozen(self):
        household = HouseholdInput(wages=100)
        with pytest.raises(ValidationError):
            household.wages = 200

    def test_with_changes_returns_new_instance(self):
        household = HouseholdInput(wages=100, children=2)
        changed = household.with_changes(wages=500)

        assert changed.wages == 500
        assert changed.children == 2
        assert household.wages == 100

    def test_self_employment_loss(self):
        household = HouseholdInput(
            wages=1000000,
            self_employment_gross=100000,
            self_employment_expenses=300000,
        )

        assert household.self_employment_net == -200000
        assert household.earned_income == 1000000
        assert household.market_income == 800000

    def test_monthly_income(self):
        household = HouseholdInput(wages=2400000, unearned_income=120000)

        assert household.monthly_earned_income == 200000
        assert household.monthly_unearned_income == 10000
        assert household.monthly_gross_income == 210000

    def test_categorical_eligibility(self):
        assert HouseholdInput(receives_tanf=True).categorically_eligible is True
        assert HouseholdInput(receives_ssi=True).categorically_eligible is True
        assert HouseholdInput().categorically_eligible is False

    def test_effective_defaults(self):
        household = HouseholdInput(qualifying_children=2, pregnant=True)

        assert household.effective_care_dependents == 2
        assert household.effective_medicaid_category == MedicaidCategory.PREGNANT
        assert HouseholdInput(care_dependents=1, qualifying_children=2).effective_care_dependents == 1


class TestProgramEligibility:
    """Amounts must be consistent with eligibility."""

    def test_granted(self):
        result = ProgramEligibility.granted(ProgramId.SNAP, 49600)

        assert result.eligible is True
        assert result.monthly_amount == 49600
        assert result.annual_amount == 595200
        assert result.reason is None

    def test_ineligible_with_amount_rejected(self):
        with pytest.raises(ValidationError):
            ProgramEligibility(
                program=ProgramId.SNAP,
                eligible=False,
                monthly_amount=100,
                annual_amount=1200,
            )

    def test_annual_must_match_monthly(self):
        with pytest.raises(ValidationError):
            ProgramEligibility(
                program=ProgramId.TANF,
                eligible=True,
                monthly_amount=100,
                annual_amount=1000,
            )


class TestEnums:
    def test_severity_rank_ordering(self):
        ranks = [s.rank for s in (
            CliffSeverity.NONE,
            CliffSeverity.MINOR,
            CliffSeverity.MODERATE,
            CliffSeverity.SEVERE,
        )]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_program_labels(self):
        assert ProgramId.SNAP.label == "SNAP"
        assert ProgramId.CTC.label == "Child Tax Credit"
