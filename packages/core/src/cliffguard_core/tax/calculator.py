"""In-process federal income tax calculation (Form 1040 flow).

The calculator walks the 1040 lines in order: Schedule C / SE, total income,
AGI, deduction, taxable income, bracket tax, then credits. Every step is
recorded in an audit trail on the result and logged for traceability.
"""

from decimal import Decimal
from typing import Optional

import structlog

from ..exceptions import CliffGuardError
from ..models.household import HouseholdInput
from ..models.results import (
    CalculationStep,
    DeductionBreakdown,
    SelfEmploymentTax,
    TaxResult,
)
from ..money import annualize, apply_rate, round_cents
from ..parameters.federal import FederalTaxTables, TaxBracket
from ..parameters.registry import ParameterRegistry, get_registry
from .credits import (
    additional_child_tax_credit,
    child_tax_credit,
    credit_caps,
    dependent_care_credit,
    earned_income_credit,
    education_credits,
)

logger = structlog.get_logger()


def bracket_tax(taxable_income: int, brackets: tuple[TaxBracket, ...]) -> tuple[int, Decimal]:
    """Apply a progressive schedule.

    The tax is accumulated exactly and rounded once. Returns the tax and the
    rate of the last bracket reached.
    """
    tax = Decimal("0")
    marginal = brackets[0].rate
    for bracket in brackets:
        if taxable_income <= bracket.floor and bracket.floor > 0:
            break
        upper = taxable_income if bracket.ceiling is None else min(taxable_income, bracket.ceiling)
        tax += Decimal(max(0, upper - bracket.floor)) * bracket.rate
        marginal = bracket.rate
    return round_cents(tax), marginal


def self_employment_tax(tables: FederalTaxTables, gross: int, expenses: int) -> SelfEmploymentTax:
    """Schedule SE. No tax and no deduction when net profit is not positive."""
    net_profit = gross - expenses
    if net_profit <= 0:
        return SelfEmploymentTax(gross_income=gross, expenses=expenses, net_profit=net_profit)
    rates = tables.self_employment
    net_earnings = apply_rate(net_profit, rates.net_earnings_factor)
    se_tax = apply_rate(net_earnings, rates.tax_rate)
    return SelfEmploymentTax(
        gross_income=gross,
        expenses=expenses,
        net_profit=net_profit,
        net_earnings=net_earnings,
        se_tax=se_tax,
        deductible_portion=apply_rate(se_tax, rates.deductible_share),
    )


class TaxCalculator:
    """Compute federal tax for a household against one year's tables.

    Instances hold only immutable tables, so one calculator can be shared
    across threads.
    """

    def __init__(self, tables: FederalTaxTables):
        self.tables = tables

    @staticmethod
    def _log_step(
        steps: list[CalculationStep],
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit trail."""
        steps.append(CalculationStep(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        ))
        logger.debug(
            "tax_calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def calculate(self, household: HouseholdInput) -> TaxResult:
        t = self.tables
        status = household.filing_status
        steps: list[CalculationStep] = []

        # Schedule C / SE
        se = self_employment_tax(t, household.self_employment_gross, household.self_employment_expenses)
        self._log_step(
            steps,
            step="self_employment_tax",
            input_value=f"gross={se.gross_income}, expenses={se.expenses}",
            output_value=f"net_profit={se.net_profit}, se_tax={se.se_tax}, deductible={se.deductible_portion}",
            source="Schedule SE",
        )

        # Income and AGI
        total_income = household.wages + se.net_profit + household.unearned_income
        agi = max(0, total_income - se.deductible_portion)
        self._log_step(
            steps,
            step="adjusted_gross_income",
            input_value=f"total_income={total_income}, se_deduction={se.deductible_portion}",
            output_value=str(agi),
            source="Form 1040 lines 9-11",
        )

        # Deduction
        standard = t.standard_deduction[status]
        deduction = DeductionBreakdown(
            standard=standard,
            itemized=household.itemized_deductions,
            used_standard=standard >= household.itemized_deductions,
        )
        taxable_income = max(0, agi - deduction.amount)
        self._log_step(
            steps,
            step="taxable_income",
            input_value=f"agi={agi}, deduction={deduction.amount}",
            output_value=str(taxable_income),
            source="Form 1040 lines 12-15",
            notes="standard deduction" if deduction.used_standard else "itemized deductions",
        )

        # Bracket tax
        tax_before_credits, marginal_rate = bracket_tax(taxable_income, t.brackets[status])
        self._log_step(
            steps,
            step="tax_before_credits",
            input_value=str(taxable_income),
            output_value=str(tax_before_credits),
            source=f"{t.year} tax rate schedule ({status.value})",
            notes=f"marginal rate {marginal_rate}",
        )

        earned_income = household.wages + max(0, se.net_profit - se.deductible_portion)

        # Credits
        eitc = earned_income_credit(
            t,
            status,
            household.qualifying_children,
            earned_income,
            agi,
            household.unearned_income,
        )
        self._log_step(
            steps,
            step="earned_income_credit",
            input_value=f"earned={earned_income}, agi={agi}, children={household.qualifying_children}",
            output_value=str(eitc),
            source="IRC §32",
        )

        ctc = child_tax_credit(t.ctc, status, household.qualifying_children, agi)
        cdcc_tentative = dependent_care_credit(
            t.dependent_care,
            household.effective_care_dependents,
            annualize(household.childcare_costs),
            earned_income,
            agi,
        )
        education = education_credits(
            t.education,
            status,
            household.students,
            household.education_expenses,
            agi,
        )

        # Nonrefundable credits are limited by the remaining liability in order
        remaining = tax_before_credits
        cdcc = min(cdcc_tentative, remaining)
        remaining -= cdcc
        education_applied = min(education.nonrefundable_portion, remaining)
        remaining -= education_applied
        ctc_nonrefundable = min(ctc, remaining)
        remaining -= ctc_nonrefundable
        nonrefundable = cdcc + education_applied + ctc_nonrefundable
        self._log_step(
            steps,
            step="nonrefundable_credits",
            input_value=f"cdcc={cdcc_tentative}, education={education.nonrefundable_portion}, ctc={ctc}",
            output_value=str(nonrefundable),
            source="Schedule 3 / Schedule 8812",
            notes="applied in order CDCC, education, CTC",
        )

        additional_ctc = additional_child_tax_credit(
            t.ctc,
            household.qualifying_children,
            ctc - ctc_nonrefundable,
            earned_income,
        )
        refundable = eitc + additional_ctc + education.aoc_refundable_portion
        self._log_step(
            steps,
            step="refundable_credits",
            input_value=f"eitc={eitc}, actc={additional_ctc}, aoc_refundable={education.aoc_refundable_portion}",
            output_value=str(refundable),
            source="Form 1040 lines 27-29",
        )

        income_tax_after_credits = max(0, tax_before_credits - nonrefundable)
        total_tax = income_tax_after_credits + se.se_tax
        refund_or_owed = household.federal_withholding + refundable - total_tax
        self._log_step(
            steps,
            step="refund_or_owed",
            input_value=f"withholding={household.federal_withholding}, refundable={refundable}, total_tax={total_tax}",
            output_value=str(refund_or_owed),
            source="Form 1040 lines 33-37",
        )

        logger.info(
            "tax_calculation_completed",
            tax_year=t.year,
            filing_status=status.value,
            agi=agi,
            total_tax=total_tax,
            refund_or_owed=refund_or_owed,
        )

        result = TaxResult(
            tax_year=t.year,
            filing_status=status,
            total_income=total_income,
            agi=agi,
            deduction=deduction,
            taxable_income=taxable_income,
            tax_before_credits=tax_before_credits,
            marginal_rate=marginal_rate,
            eitc=eitc,
            ctc=ctc,
            ctc_nonrefundable=ctc_nonrefundable,
            additional_ctc=additional_ctc,
            cdcc=cdcc,
            education=education,
            self_employment=se,
            nonrefundable_credits=nonrefundable,
            refundable_credits=refundable,
            income_tax_after_credits=income_tax_after_credits,
            total_tax=total_tax,
            federal_withholding=household.federal_withholding,
            refund_or_owed=refund_or_owed,
            steps=tuple(steps),
        )

        over_cap = credit_caps(t, household.qualifying_children, household.students).violations(result)
        if over_cap:
            logger.error("tax_credit_cap_exceeded", tax_year=t.year, credits=over_cap)
            raise CliffGuardError(
                f"Credits exceed their statutory cap: {', '.join(over_cap)}",
                details={"credits": over_cap, "tax_year": t.year},
            )
        return result


def calculate_tax(
    household: HouseholdInput,
    year: Optional[int] = None,
    registry: Optional[ParameterRegistry] = None,
) -> TaxResult:
    """Compute federal tax for ``household`` in ``year`` (default: its tax year).

    Raises:
        UnsupportedYearError: If no tables exist for the year.
    """
    registry = registry or get_registry()
    tables = registry.tax(year if year is not None else household.tax_year)
    return TaxCalculator(tables).calculate(household)
