"""Tests for the in-process federal tax calculation."""

from decimal import Decimal

import pytest

from cliffguard_core.exceptions import UnsupportedYearError
from cliffguard_core.models import FilingStatus, HouseholdInput
from cliffguard_core.tax import (
    TaxCalculator,
    additional_child_tax_credit,
    bracket_tax,
    calculate_tax,
    child_tax_credit,
    credit_caps,
    dependent_care_credit,
    dependent_care_rate,
    earned_income_credit,
    education_credits,
    education_phase_out_fraction,
    self_employment_tax,
)


class TestBracketTax:
    def test_two_brackets(self, tax_2024):
        tax, marginal = bracket_tax(3040000, tax_2024.brackets[FilingStatus.SINGLE])

        # 10% of $11,600 + 12% of $18,800
        assert tax == 341600
        assert marginal == Decimal("0.12")

    def test_zero_income(self, tax_2024):
        tax, marginal = bracket_tax(0, tax_2024.brackets[FilingStatus.SINGLE])

        assert tax == 0
        assert marginal == Decimal("0.10")

    def test_exact_bracket_boundary(self, tax_2024):
        tax, marginal = bracket_tax(1160000, tax_2024.brackets[FilingStatus.SINGLE])

        assert tax == 116000
        assert marginal == Decimal("0.10")

    def test_top_bracket(self, tax_2024):
        _, marginal = bracket_tax(100000000, tax_2024.brackets[FilingStatus.SINGLE])

        assert marginal == Decimal("0.37")

    def test_monotonic(self, tax_2024):
        brackets = tax_2024.brackets[FilingStatus.HEAD_OF_HOUSEHOLD]
        previous = -1
        for taxable in range(0, 30000000, 250000):
            tax, _ = bracket_tax(taxable, brackets)
            assert tax >= previous
            previous = tax


class TestSelfEmploymentTax:
    def test_profit(self, tax_2024):
        se = self_employment_tax(tax_2024, 3000000, 1000000)

        assert se.net_profit == 2000000
        assert se.net_earnings == 1847000
        assert se.se_tax == 282591
        assert se.deductible_portion == 141296

    def test_loss_has_no_tax(self, tax_2024):
        se = self_employment_tax(tax_2024, 500000, 800000)

        assert se.net_profit == -300000
        assert se.se_tax == 0
        assert se.deductible_portion == 0


class TestEarnedIncomeCredit:
    def test_phase_out_with_two_children_joint(self, tax_2024):
        eitc = earned_income_credit(
            tax_2024, FilingStatus.MARRIED_FILING_JOINTLY, 2, 5000000, 5000000, 0,
        )

        assert eitc == 267218

    def test_phase_in_capped_below_max_with_one_child(self, tax_2024):
        eitc = earned_income_credit(tax_2024, FilingStatus.HEAD_OF_HOUSEHOLD, 1, 1500000, 1500000, 0)

        # 34% of $12,390 is $4,212.60, under the $4,213 maximum
        assert eitc == 421260

    def test_phase_in(self, tax_2024):
        eitc = earned_income_credit(tax_2024, FilingStatus.SINGLE, 0, 400000, 400000, 0)

        assert eitc == 30600

    def test_married_filing_separately_excluded(self, tax_2024):
        eitc = earned_income_credit(
            tax_2024, FilingStatus.MARRIED_FILING_SEPARATELY, 1, 1500000, 1500000, 0,
        )

        assert eitc == 0

    def test_investment_income_limit(self, tax_2024):
        eitc = earned_income_credit(tax_2024, FilingStatus.SINGLE, 1, 1500000, 2800000, 1300000)

        assert eitc == 0

    def test_no_earnings(self, tax_2024):
        assert earned_income_credit(tax_2024, FilingStatus.SINGLE, 2, 0, 500000, 500000) == 0

    def test_never_negative(self, tax_2024):
        for wages in range(0, 10000000, 500000):
            assert earned_income_credit(tax_2024, FilingStatus.SINGLE, 3, wages, wages, 0) >= 0

    def test_non_increasing_past_phase_out_start(self, tax_2024):
        row = tax_2024.eitc_row(2)
        credits = [
            earned_income_credit(tax_2024, FilingStatus.HEAD_OF_HOUSEHOLD, 2, 1740000, agi, 0)
            for agi in range(row.phase_out_start, row.phase_out_start + 4000000, 100000)
        ]

        assert credits == sorted(credits, reverse=True)
        assert credits[-1] == 0

    def test_surviving_spouse_uses_single_phase_out_start(self, tax_2024):
        surviving = earned_income_credit(
            tax_2024, FilingStatus.QUALIFYING_SURVIVING_SPOUSE, 2, 4000000, 4000000, 0,
        )
        single = earned_income_credit(tax_2024, FilingStatus.SINGLE, 2, 4000000, 4000000, 0)

        # $6,960 less 21.06% of the $17,280 over the $22,720 start
        assert surviving == single == 332083


class TestChildTaxCredit:
    def test_full_credit(self, tax_2024):
        assert child_tax_credit(tax_2024.ctc, FilingStatus.SINGLE, 2, 5000000) == 400000

    def test_phase_out_rounds_up_per_thousand(self, tax_2024):
        # $10,500 over the threshold is 11 steps of $50
        assert child_tax_credit(tax_2024.ctc, FilingStatus.SINGLE, 1, 21050000) == 145000

    def test_joint_threshold(self, tax_2024):
        ctc = child_tax_credit(tax_2024.ctc, FilingStatus.MARRIED_FILING_JOINTLY, 1, 21050000)

        assert ctc == 200000

    def test_no_children(self, tax_2024):
        assert child_tax_credit(tax_2024.ctc, FilingStatus.SINGLE, 0, 1000000) == 0

    def test_never_exceeds_per_child_amount(self, tax_2024):
        for children in range(0, 6):
            for agi in (0, 5000000, 20000000, 41000000):
                ctc = child_tax_credit(tax_2024.ctc, FilingStatus.MARRIED_FILING_JOINTLY, children, agi)
                assert 0 <= ctc <= 200000 * children

    def test_additional_ctc_limited_by_earnings(self, tax_2024):
        actc = additional_child_tax_credit(tax_2024.ctc, 2, 400000, 1250000)

        # 15% of earnings over $2,500
        assert actc == 150000

    def test_additional_ctc_per_child_limit(self, tax_2024):
        assert additional_child_tax_credit(tax_2024.ctc, 1, 200000, 5000000) == 170000


class TestDependentCareCredit:
    @pytest.mark.parametrize("agi,rate", [
        (1500000, Decimal("0.35")),
        (1500100, Decimal("0.34")),
        (4300000, Decimal("0.21")),
        (4300100, Decimal("0.20")),
    ])
    def test_rate_steps(self, tax_2024, agi, rate):
        assert dependent_care_rate(tax_2024.dependent_care, agi) == rate

    def test_credit(self, tax_2024):
        credit = dependent_care_credit(tax_2024.dependent_care, 1, 500000, 4000000, 4000000)

        # $3,000 limit at 22%
        assert credit == 66000

    def test_limited_by_earnings(self, tax_2024):
        credit = dependent_care_credit(tax_2024.dependent_care, 2, 800000, 100000, 100000)

        assert credit == 35000

    def test_no_dependents(self, tax_2024):
        assert dependent_care_credit(tax_2024.dependent_care, 0, 500000, 4000000, 4000000) == 0


class TestEducationCredits:
    def test_phase_out_fraction(self, tax_2024):
        params = tax_2024.education

        assert education_phase_out_fraction(params, FilingStatus.SINGLE, 8000000) == Decimal("1")
        assert education_phase_out_fraction(params, FilingStatus.SINGLE, 8500000) == Decimal("0.5")
        assert education_phase_out_fraction(params, FilingStatus.SINGLE, 9000000) == Decimal("0")
        assert education_phase_out_fraction(
            params, FilingStatus.MARRIED_FILING_JOINTLY, 17000000,
        ) == Decimal("0.5")
        assert education_phase_out_fraction(
            params, FilingStatus.MARRIED_FILING_SEPARATELY, 1000000,
        ) == Decimal("0")

    def test_american_opportunity_partial_phase_out(self, tax_2024):
        credits = education_credits(tax_2024.education, FilingStatus.SINGLE, 1, 400000, 8500000)

        assert credits.american_opportunity_credit == 125000
        assert credits.aoc_refundable_portion == 50000
        assert credits.nonrefundable_portion == 75000

    def test_lifetime_learning(self, tax_2024):
        credits = education_credits(tax_2024.education, FilingStatus.SINGLE, 0, 1200000, 5000000)

        assert credits.american_opportunity_credit == 0
        assert credits.lifetime_learning_credit == 200000
        assert credits.total == 200000


class TestTaxCalculator:
    def test_single_filer(self, tax_2024):
        household = HouseholdInput(wages=4500000, tax_year=2024)

        result = TaxCalculator(tax_2024).calculate(household)

        assert result.agi == 4500000
        assert result.deduction.amount == 1460000
        assert result.deduction.used_standard is True
        assert result.taxable_income == 3040000
        assert result.tax_before_credits == 341600
        assert result.marginal_rate == Decimal("0.12")
        assert result.marginal_rate_percent == Decimal("12.00")
        assert result.eitc == 0
        assert result.total_tax == 341600
        assert result.source == "in_process"

    def test_self_employed(self, tax_2024):
        household = HouseholdInput(
            self_employment_gross=3000000,
            self_employment_expenses=1000000,
            tax_year=2024,
        )

        result = TaxCalculator(tax_2024).calculate(household)

        assert result.self_employment.se_tax == 282591
        assert result.agi == 1858704
        assert result.taxable_income == 398704
        assert result.tax_before_credits == 39870
        assert result.total_tax == 39870 + 282591
        assert result.eitc == 34

    def test_married_with_two_children(self, tax_2024):
        household = HouseholdInput(
            wages=5000000,
            adults=2,
            children=2,
            filing_status=FilingStatus.MARRIED_FILING_JOINTLY,
            qualifying_children=2,
            dependents=2,
        )

        result = TaxCalculator(tax_2024).calculate(household)

        assert result.taxable_income == 2080000
        assert result.tax_before_credits == 208000
        assert result.ctc == 400000
        assert result.ctc_nonrefundable == 208000
        assert result.additional_ctc == 192000
        assert result.eitc == 267218
        assert result.total_tax == 0
        assert result.refundable_credits == 267218 + 192000

    def test_single_parent_credits(self, tax_2024, single_parent):
        result = TaxCalculator(tax_2024).calculate(single_parent)

        assert result.tax_before_credits == 21000
        assert result.cdcc == 21000
        assert result.ctc == 200000
        assert result.ctc_nonrefundable == 0
        assert result.additional_ctc == 170000
        assert result.eitc == 400846
        assert result.refundable_credits == 570846
        assert result.total_tax == 0
        assert result.refund_or_owed == 570846
        assert result.net_tax == -570846

    def test_itemized_deduction_used_when_larger(self, tax_2024):
        household = HouseholdInput(wages=4500000, itemized_deductions=2000000)

        result = TaxCalculator(tax_2024).calculate(household)

        assert result.deduction.used_standard is False
        assert result.taxable_income == 2500000

    def test_withholding_produces_refund(self, tax_2024):
        household = HouseholdInput(wages=4500000, federal_withholding=400000)

        result = TaxCalculator(tax_2024).calculate(household)

        assert result.refund_or_owed == 400000 - 341600

    def test_audit_trail(self, tax_2024):
        result = TaxCalculator(tax_2024).calculate(HouseholdInput(wages=4500000))

        names = [step.step for step in result.steps]
        assert names[0] == "self_employment_tax"
        assert "taxable_income" in names
        assert names[-1] == "refund_or_owed"

    def test_calculate_tax_year_override(self, registry):
        household = HouseholdInput(wages=4500000, tax_year=2024)

        result = calculate_tax(household, year=2023, registry=registry)

        assert result.tax_year == 2023
        assert result.deduction.amount == 1385000

    def test_unsupported_year(self):
        with pytest.raises(UnsupportedYearError):
            calculate_tax(HouseholdInput(wages=100000, tax_year=2019))


class TestCreditCaps:
    def test_caps_follow_household_composition(self, tax_2024):
        caps = credit_caps(tax_2024, qualifying_children=2, students=1)

        assert caps.eitc == 696000
        assert caps.ctc == 400000
        assert caps.additional_ctc == 340000
        assert caps.american_opportunity_credit == 250000
        assert caps.lifetime_learning_credit == 200000

    def test_eitc_cap_stops_at_three_children(self, tax_2024):
        assert credit_caps(tax_2024, 5, 0).eitc == credit_caps(tax_2024, 3, 0).eitc == 783000

    def test_violations_name_credits_over_cap(self, tax_2024, single_parent):
        result = TaxCalculator(tax_2024).calculate(single_parent)
        caps = credit_caps(tax_2024, single_parent.qualifying_children, single_parent.students)
        inflated = result.model_copy(update={"eitc": caps.eitc + 1, "additional_ctc": caps.additional_ctc + 1})

        assert caps.violations(result) == []
        assert caps.violations(inflated) == ["eitc", "additional_ctc"]

    @pytest.mark.parametrize("children", [0, 1, 2, 3, 4])
    @pytest.mark.parametrize("status", [
        FilingStatus.SINGLE,
        FilingStatus.HEAD_OF_HOUSEHOLD,
        FilingStatus.MARRIED_FILING_JOINTLY,
        FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    ])
    def test_credits_within_caps_across_incomes(self, tax_2024, status, children):
        calculator = TaxCalculator(tax_2024)
        ctc = tax_2024.ctc

        for wages in range(0, 12000000, 250000):
            household = HouseholdInput(
                wages=wages,
                adults=2 if status == FilingStatus.MARRIED_FILING_JOINTLY else 1,
                children=children,
                qualifying_children=children,
                filing_status=status,
                students=1,
                education_expenses=500000,
            )
            result = calculator.calculate(household)

            assert 0 <= result.ctc <= ctc.per_child * children
            assert 0 <= result.additional_ctc <= ctc.refundable_limit * children
            assert 0 <= result.eitc <= tax_2024.eitc_row(children).max_credit
            assert 0 <= result.education.american_opportunity_credit <= 250000
