"""Tests for the benefit cliff comparison."""

from decimal import Decimal

import pytest

from cliffguard_core.cliff import (
    CliffEngine,
    SeverityThresholds,
    _growth_fraction,
    build_warnings,
)
from cliffguard_core.config import CliffConfig
from cliffguard_core.exceptions import InvalidInputError
from cliffguard_core.models import (
    CliffSeverity,
    HouseholdInput,
    NoticeCode,
    ProgramId,
    ProgramImpact,
)


class TestSeverityThresholds:
    @pytest.fixture
    def thresholds(self) -> SeverityThresholds:
        # Raise the absolute floor so only the fractions decide
        return SeverityThresholds(severe_floor=10**9)

    @pytest.mark.parametrize("change,expected", [
        (0, CliffSeverity.NONE),
        (10000, CliffSeverity.NONE),
        (-50000, CliffSeverity.MINOR),
        (-60000, CliffSeverity.MODERATE),
        (-240000, CliffSeverity.MODERATE),
        (-300000, CliffSeverity.SEVERE),
    ])
    def test_fractions_of_wage_increase(self, thresholds, change, expected):
        assert thresholds.classify(600000, change) == expected

    def test_severity_grows_with_loss(self, thresholds):
        ranks = [thresholds.classify(600000, -loss).rank for loss in range(0, 600000, 10000)]

        assert ranks == sorted(ranks)

    def test_absolute_floor(self):
        thresholds = SeverityThresholds()

        assert thresholds.classify(100000000, -100001) == CliffSeverity.SEVERE
        assert thresholds.classify(100000000, -100000) == CliffSeverity.MINOR

    def test_loss_without_raise(self):
        thresholds = SeverityThresholds()

        assert thresholds.classify(0, -50000) == CliffSeverity.MODERATE
        assert thresholds.classify(0, -100001) == CliffSeverity.SEVERE

    def test_from_config(self):
        config = CliffConfig(minor_loss_fraction=Decimal("0.05"), thresholds_version="2025.2")

        thresholds = SeverityThresholds.from_config(config)

        assert thresholds.version == "2025.2"
        assert thresholds.minor_below == Decimal("0.05")
        assert thresholds.severe_floor == 100000


class TestGrowthFraction:
    def test_from_zero(self):
        assert _growth_fraction(100, 0) == Decimal("1")
        assert _growth_fraction(-100, 0) == Decimal("0")
        assert _growth_fraction(0, 0) == Decimal("0")

    def test_negative_base(self):
        assert _growth_fraction(50, -100) == Decimal("0.5")


class TestBuildWarnings:
    def test_program_reduced(self):
        impact = ProgramImpact(
            program=ProgramId.TANF,
            current_monthly=30000,
            proposed_monthly=24000,
            current_eligible=True,
            proposed_eligible=True,
        )

        warnings = build_warnings(False, 100000, 5000, [impact])

        assert [w.code for w in warnings] == [NoticeCode.PROGRAM_REDUCED]
        assert warnings[0].message == "TANF would decrease by $60/month."

    def test_small_reduction_is_quiet(self):
        impact = ProgramImpact(
            program=ProgramId.SNAP,
            current_monthly=30000,
            proposed_monthly=26000,
            current_eligible=True,
            proposed_eligible=True,
        )

        assert build_warnings(False, 100000, 5000, [impact]) == []

    def test_eitc_phase_out(self):
        impact = ProgramImpact(
            program=ProgramId.EITC,
            current_monthly=1000,
            proposed_monthly=0,
            current_eligible=True,
            proposed_eligible=False,
        )

        warnings = build_warnings(False, 100000, 5000, [impact])

        assert [w.code for w in warnings] == [NoticeCode.EITC_PHASED_OUT]


class TestCliffEngine:
    def test_scenario_net_income(self, engine, single_parent):
        scenario = engine.evaluate_scenario(single_parent)

        assert scenario.market_income == 2400000
        assert scenario.net_tax == -570846
        assert scenario.total_benefits == 595200
        assert scenario.net_income == 3566046
        assert scenario.total_monthly_benefits == 49600
        snap = next(p for p in scenario.programs if p.program == ProgramId.SNAP)
        assert snap.monthly_amount == 49600

    def test_raise_triggers_cliff(self, engine, single_parent, single_parent_raise):
        comparison = engine.compare(single_parent, single_parent_raise)

        assert comparison.current.net_income == 3566046
        assert comparison.proposed.net_income == 3474966
        assert comparison.wage_increase == 600000
        assert comparison.wage_increase_percent == Decimal("25.00")
        assert comparison.net_income_change == -91080
        assert comparison.benefit_loss == 595200
        assert comparison.is_cliff is True
        assert comparison.severity == CliffSeverity.MODERATE
        assert comparison.thresholds_version == "2024.1"

        assert [w.code for w in comparison.warnings] == [
            NoticeCode.BENEFIT_CLIFF,
            NoticeCode.PROGRAM_ENDED,
            NoticeCode.MEDICAID_LOST,
        ]
        assert comparison.warnings[1].program == ProgramId.SNAP
        assert [r.code for r in comparison.recommendations] == [
            NoticeCode.WEIGH_NON_FINANCIAL_VALUE,
            NoticeCode.PRETAX_DEDUCTIONS,
            NoticeCode.SECURE_HEALTH_COVERAGE,
            NoticeCode.CLAIM_TAX_CREDITS,
        ]

    def test_program_impacts(self, engine, single_parent, single_parent_raise):
        comparison = engine.compare(single_parent, single_parent_raise)

        impacts = {i.program: i for i in comparison.program_impacts}
        assert list(impacts) == [ProgramId.SNAP, ProgramId.MEDICAID, ProgramId.EITC, ProgramId.CTC]
        assert impacts[ProgramId.SNAP].delta == -49600
        assert impacts[ProgramId.MEDICAID].eligibility_lost is True
        assert impacts[ProgramId.EITC].current_monthly == 33403
        assert impacts[ProgramId.EITC].proposed_monthly == 25413
        assert impacts[ProgramId.CTC].delta == 0

    def test_same_scenario_is_not_a_cliff(self, engine, single_parent):
        comparison = engine.compare(single_parent, single_parent)

        assert comparison.is_cliff is False
        assert comparison.severity == CliffSeverity.NONE
        assert comparison.net_income_change == 0
        assert comparison.benefit_loss == 0
        assert comparison.warnings == ()

    def test_strong_net_gain(self, engine):
        current = HouseholdInput(wages=4500000)
        proposed = current.with_changes(wages=6000000)

        comparison = engine.compare(current, proposed)

        assert comparison.is_cliff is False
        assert comparison.net_income_change == 1320000
        assert [r.code for r in comparison.recommendations] == [NoticeCode.STRONG_NET_GAIN]
        assert comparison.recommendations[0].message.startswith("Net gain of $1,100/month")

    def test_wage_increase_from_zero(self, engine):
        comparison = engine.compare(HouseholdInput(), HouseholdInput(wages=1000000))

        assert comparison.wage_increase_fraction == Decimal("1")

    def test_custom_thresholds(self, single_parent, single_parent_raise):
        engine = CliffEngine(thresholds=SeverityThresholds(version="strict", severe_floor=50000))

        comparison = engine.compare(single_parent, single_parent_raise)

        assert comparison.severity == CliffSeverity.SEVERE
        assert comparison.thresholds_version == "strict"
        assert NoticeCode.NEGOTIATE_HIGHER_WAGE in [r.code for r in comparison.recommendations]


class TestFindOptimalWage:
    def test_prefers_income_before_cliff(self, engine, single_parent):
        result = engine.find_optimal_wage(single_parent, 2400000, 3000000, 600000)

        assert [p.wages for p in result.points] == [2400000, 3000000]
        assert result.optimal_wages == 2400000
        assert result.max_net_income == 3566046

    def test_single_point(self, engine, single_parent):
        result = engine.find_optimal_wage(single_parent, 2400000, 2400000, 100000)

        assert len(result.points) == 1
        assert result.optimal_wages == 2400000

    def test_invalid_step(self, engine, single_parent):
        with pytest.raises(InvalidInputError) as exc_info:
            engine.find_optimal_wage(single_parent, 0, 1000000, 0)

        assert exc_info.value.field == "step"

    def test_inverted_range(self, engine, single_parent):
        with pytest.raises(InvalidInputError):
            engine.find_optimal_wage(single_parent, 3000000, 2000000, 100000)
