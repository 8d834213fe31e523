"""Benefit cliff comparison.

Compares a household's current situation with a proposed one (usually a
raise) and reports whether the household ends up with less net income.

Net income for a scenario is

    market income - (total tax - refundable credits) + annual benefits

so refundable credits count as income and phase-outs on either side of the
tax/benefit boundary are captured.
"""

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from .benefits.evaluator import evaluate_programs
from .config import CliffConfig
from .exceptions import InvalidInputError
from .models.household import HouseholdInput
from .models.radar import program_states
from .models.results import (
    CliffComparison,
    CliffSeverity,
    Notice,
    NoticeCode,
    OptimalWage,
    ProgramId,
    ProgramImpact,
    ScenarioResult,
    WagePoint,
)
from .money import MONTHS_PER_YEAR, cents_to_dollars, ratio
from .parameters.registry import ParameterRegistry, get_registry
from .strategies import TaxStrategy, default_strategy

logger = structlog.get_logger()


# =============================================================================
# SEVERITY
# =============================================================================

class SeverityThresholds(BaseModel):
    """Versioned cut-offs for classifying a net income loss.

    Fractions are the loss as a share of the wage increase.
    """

    model_config = {"frozen": True}

    version: str = "2024.1"
    minor_below: Decimal = Field(default=Decimal("0.10"), gt=0)
    severe_above: Decimal = Field(default=Decimal("0.40"), gt=0)
    severe_floor: int = Field(default=100000, ge=0, description="Loss (cents/year) that is always severe")

    @classmethod
    def from_config(cls, config: CliffConfig) -> "SeverityThresholds":
        return cls(
            version=config.thresholds_version,
            minor_below=config.minor_loss_fraction,
            severe_above=config.severe_loss_fraction,
            severe_floor=config.severe_floor_cents,
        )

    def classify(self, wage_increase: int, net_income_change: int) -> CliffSeverity:
        if net_income_change >= 0:
            return CliffSeverity.NONE
        loss = -net_income_change
        if loss > self.severe_floor:
            return CliffSeverity.SEVERE
        if wage_increase <= 0:
            return CliffSeverity.MODERATE
        share = ratio(loss, wage_increase)
        if share < self.minor_below:
            return CliffSeverity.MINOR
        if share <= self.severe_above:
            return CliffSeverity.MODERATE
        return CliffSeverity.SEVERE


DEFAULT_THRESHOLDS = SeverityThresholds()


# =============================================================================
# NOTICES
# =============================================================================

NOTICE_TEMPLATES: dict[NoticeCode, str] = {
    NoticeCode.BENEFIT_CLIFF: (
        "Benefit cliff detected: a {wage_increase} raise lowers net household income by {loss} per year."
    ),
    NoticeCode.MEDICAID_LOST: (
        "Medicaid eligibility ends at the proposed income. Out-of-pocket medical costs may rise."
    ),
    NoticeCode.PROGRAM_ENDED: "{program} benefits of {amount}/month would end.",
    NoticeCode.PROGRAM_REDUCED: "{program} would decrease by {amount}/month.",
    NoticeCode.EITC_PHASED_OUT: "The Earned Income Tax Credit phases out completely at the proposed income.",
    NoticeCode.NEGOTIATE_HIGHER_WAGE: (
        "Consider negotiating a raise large enough to clear the benefit cliff."
    ),
    NoticeCode.TRANSITIONAL_BENEFITS: (
        "Ask about transitional benefits that can bridge the gap while income rises."
    ),
    NoticeCode.WEIGH_NON_FINANCIAL_VALUE: (
        "Weigh non-financial value such as career advancement or employer health insurance "
        "against the short-term income loss."
    ),
    NoticeCode.PRETAX_DEDUCTIONS: (
        "Pre-tax deductions (401(k), health premiums, dependent care FSA) can keep countable income "
        "below program cutoffs."
    ),
    NoticeCode.FUTURE_GROWTH: (
        "The short-term loss is small; further raises move the household past the phase-out range."
    ),
    NoticeCode.MODEST_NET_GAIN: "Modest net gain of {gain}/month; benefits phase out gradually.",
    NoticeCode.STRONG_NET_GAIN: "Net gain of {gain}/month with benefits phasing out as expected.",
    NoticeCode.SECURE_HEALTH_COVERAGE: (
        "Line up employer or marketplace health coverage before Medicaid ends."
    ),
    NoticeCode.CLAIM_TAX_CREDITS: (
        "File a tax return to claim the Earned Income and Child Tax Credits, which offset part of "
        "the benefit reduction."
    ),
}

# Monthly drop that counts as a material program reduction.
PROGRAM_DROP_WARNING = 5000

# Monthly net gain separating a modest raise from a strong one.
STRONG_GAIN_MONTHLY = 10000

_CASH_PROGRAMS = (ProgramId.SNAP, ProgramId.TANF, ProgramId.SSI)


def _money(cents: int) -> str:
    return f"${cents_to_dollars(abs(cents)):,.0f}"


def _notice(code: NoticeCode, program: Optional[ProgramId] = None, **values) -> Notice:
    return Notice(code=code, message=NOTICE_TEMPLATES[code].format(
        program=program.label if program is not None else "", **values,
    ), program=program)


def build_warnings(
    is_cliff: bool,
    wage_increase: int,
    net_income_change: int,
    impacts: list[ProgramImpact],
) -> list[Notice]:
    warnings = []
    if is_cliff:
        warnings.append(_notice(
            NoticeCode.BENEFIT_CLIFF,
            wage_increase=_money(wage_increase),
            loss=_money(net_income_change),
        ))
    for impact in impacts:
        if impact.program == ProgramId.MEDICAID:
            if impact.eligibility_lost:
                warnings.append(_notice(NoticeCode.MEDICAID_LOST, program=impact.program))
        elif impact.program == ProgramId.EITC:
            if impact.current_monthly > 0 and impact.proposed_monthly == 0:
                warnings.append(_notice(NoticeCode.EITC_PHASED_OUT, program=impact.program))
        elif impact.program in _CASH_PROGRAMS and impact.eligibility_lost and impact.current_monthly > 0:
            warnings.append(_notice(
                NoticeCode.PROGRAM_ENDED,
                program=impact.program,
                amount=_money(impact.current_monthly),
            ))
        elif impact.delta < -PROGRAM_DROP_WARNING:
            warnings.append(_notice(
                NoticeCode.PROGRAM_REDUCED,
                program=impact.program,
                amount=_money(impact.delta),
            ))
    return warnings


def build_recommendations(
    is_cliff: bool,
    severity: CliffSeverity,
    net_income_change: int,
    impacts: list[ProgramImpact],
    proposed: ScenarioResult,
) -> list[Notice]:
    recommendations = []
    if is_cliff:
        if severity == CliffSeverity.SEVERE:
            recommendations.append(_notice(NoticeCode.NEGOTIATE_HIGHER_WAGE))
            recommendations.append(_notice(NoticeCode.TRANSITIONAL_BENEFITS))
        elif severity == CliffSeverity.MODERATE:
            recommendations.append(_notice(NoticeCode.WEIGH_NON_FINANCIAL_VALUE))
            recommendations.append(_notice(NoticeCode.PRETAX_DEDUCTIONS))
        else:
            recommendations.append(_notice(NoticeCode.FUTURE_GROWTH))
    elif net_income_change > 0:
        monthly_gain = net_income_change // MONTHS_PER_YEAR
        code = NoticeCode.STRONG_NET_GAIN if monthly_gain >= STRONG_GAIN_MONTHLY else NoticeCode.MODEST_NET_GAIN
        recommendations.append(_notice(code, gain=_money(monthly_gain)))

    if any(i.program == ProgramId.MEDICAID and i.eligibility_lost for i in impacts):
        recommendations.append(_notice(NoticeCode.SECURE_HEALTH_COVERAGE, program=ProgramId.MEDICAID))

    if proposed.tax.eitc > 0 or proposed.tax.ctc > 0:
        recommendations.append(_notice(NoticeCode.CLAIM_TAX_CREDITS))
    return recommendations


# =============================================================================
# ENGINE
# =============================================================================

# Order in which program impacts are listed.
IMPACT_PROGRAMS = (
    ProgramId.SNAP,
    ProgramId.TANF,
    ProgramId.SSI,
    ProgramId.MEDICAID,
    ProgramId.EITC,
    ProgramId.CTC,
)


def _growth_fraction(change: int, base: int) -> Decimal:
    """Change relative to base; 1 for growth from zero, 0 otherwise."""
    if base == 0:
        return Decimal("1") if change > 0 else Decimal("0")
    return ratio(change, abs(base))


class CliffEngine:
    """Evaluates scenarios and compares them.

    Args:
        registry: Parameter tables (defaults to the built-in tables).
        strategy: Tax calculation strategy (defaults to in-process).
        thresholds: Severity cut-offs.
    """

    def __init__(
        self,
        registry: Optional[ParameterRegistry] = None,
        strategy: Optional[TaxStrategy] = None,
        thresholds: Optional[SeverityThresholds] = None,
    ):
        self.registry = registry or get_registry()
        self.strategy = strategy or default_strategy()
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def evaluate_scenario(self, household: HouseholdInput) -> ScenarioResult:
        """Run tax and benefit evaluation for one household."""
        tax_tables = self.registry.tax(household.tax_year)
        program_tables = self.registry.programs(household.state_code, household.tax_year)

        tax = self.strategy.calculate(household, tax_tables)
        programs = tuple(evaluate_programs(household, program_tables))

        market_income = household.market_income
        net_tax = tax.net_tax
        total_benefits = sum(p.annual_amount for p in programs)
        return ScenarioResult(
            household=household,
            tax=tax,
            programs=programs,
            market_income=market_income,
            net_tax=net_tax,
            total_benefits=total_benefits,
            net_income=market_income - net_tax + total_benefits,
        )

    @staticmethod
    def program_impacts(current: ScenarioResult, proposed: ScenarioResult) -> list[ProgramImpact]:
        before = program_states(current.programs, current.tax)
        after = program_states(proposed.programs, proposed.tax)
        impacts = []
        for program in IMPACT_PROGRAMS:
            old, new = before[program], after[program]
            if old.monthly_amount == 0 and new.monthly_amount == 0 and old.eligible == new.eligible:
                continue
            impacts.append(ProgramImpact(
                program=program,
                current_monthly=old.monthly_amount,
                proposed_monthly=new.monthly_amount,
                current_eligible=old.eligible,
                proposed_eligible=new.eligible,
            ))
        return impacts

    def compare(self, current: HouseholdInput, proposed: HouseholdInput) -> CliffComparison:
        current_result = self.evaluate_scenario(current)
        proposed_result = self.evaluate_scenario(proposed)

        wage_increase = proposed.wages - current.wages
        net_income_change = proposed_result.net_income - current_result.net_income
        is_cliff = wage_increase > 0 and net_income_change < 0
        severity = self.thresholds.classify(wage_increase, net_income_change)
        impacts = self.program_impacts(current_result, proposed_result)

        comparison = CliffComparison(
            current=current_result,
            proposed=proposed_result,
            wage_increase=wage_increase,
            wage_increase_fraction=_growth_fraction(wage_increase, current.wages),
            benefit_loss=max(0, current_result.total_benefits - proposed_result.total_benefits),
            net_income_change=net_income_change,
            net_income_change_fraction=_growth_fraction(net_income_change, current_result.net_income),
            is_cliff=is_cliff,
            severity=severity,
            thresholds_version=self.thresholds.version,
            program_impacts=tuple(impacts),
            warnings=tuple(build_warnings(is_cliff, wage_increase, net_income_change, impacts)),
            recommendations=tuple(build_recommendations(
                is_cliff, severity, net_income_change, impacts, proposed_result,
            )),
        )
        logger.info(
            "cliff_comparison_completed",
            wage_increase=wage_increase,
            net_income_change=net_income_change,
            is_cliff=is_cliff,
            severity=severity.value,
        )
        return comparison

    def find_optimal_wage(
        self,
        household: HouseholdInput,
        start: int,
        end: int,
        step: int,
    ) -> OptimalWage:
        """Sweep wages from ``start`` to ``end`` (inclusive, cents) and pick the best.

        Ties go to the lowest wage.

        Raises:
            InvalidInputError: If the range or step is not positive.
        """
        if step <= 0:
            raise InvalidInputError("Sweep step must be positive", field="step", value=step, constraint="gt=0")
        if start < 0 or end < start:
            raise InvalidInputError(
                "Sweep range must satisfy 0 <= start <= end",
                field="end",
                value=end,
                constraint="start<=end",
            )

        points = []
        for wages in range(start, end + 1, step):
            scenario = self.evaluate_scenario(household.with_changes(wages=wages))
            points.append(WagePoint(
                wages=wages,
                net_income=scenario.net_income,
                total_benefits=scenario.total_benefits,
                net_tax=scenario.net_tax,
            ))

        best = max(points, key=lambda p: (p.net_income, -p.wages))
        logger.info(
            "optimal_wage_found",
            start=start,
            end=end,
            step=step,
            optimal_wages=best.wages,
            max_net_income=best.net_income,
        )
        return OptimalWage(optimal_wages=best.wages, max_net_income=best.net_income, points=tuple(points))


__all__ = [
    "CliffEngine",
    "SeverityThresholds",
    "DEFAULT_THRESHOLDS",
    "NOTICE_TEMPLATES",
    "build_warnings",
    "build_recommendations",
]
