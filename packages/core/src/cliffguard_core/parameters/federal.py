"""Federal income tax parameter tables.

Tables are keyed by tax year. Dollar thresholds come from the IRS revenue
procedures for each year (Rev. Proc. 2022-38, 2023-34, 2024-40) with the
2025 standard deduction and CTC amounts as amended by P.L. 119-21.

All amounts are integer cents; rates are Decimal fractions.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional

from ..models.household import FilingStatus
from ..money import dollars_to_cents


def _usd(dollars) -> int:
    return dollars_to_cents(dollars)


# =============================================================================
# TABLE TYPES
# =============================================================================

@dataclass(frozen=True)
class TaxBracket:
    """One slice of the progressive rate schedule."""
    floor: int
    ceiling: Optional[int]  # None = no upper bound
    rate: Decimal


@dataclass(frozen=True)
class EitcRow:
    """EITC parameters for one qualifying-children count."""
    earned_income_amount: int
    max_credit: int
    credit_rate: Decimal
    phase_out_rate: Decimal
    phase_out_start: int
    phase_out_start_joint: int


@dataclass(frozen=True)
class SelfEmploymentRates:
    net_earnings_factor: Decimal = Decimal("0.9235")
    tax_rate: Decimal = Decimal("0.153")
    deductible_share: Decimal = Decimal("0.50")


@dataclass(frozen=True)
class ChildTaxCreditParams:
    per_child: int
    refundable_limit: int
    phase_out_threshold: int = _usd(200000)
    phase_out_threshold_joint: int = _usd(400000)
    phase_out_step: int = _usd(1000)
    phase_out_per_step: int = _usd(50)
    refundable_earned_floor: int = _usd(2500)
    refundable_rate: Decimal = Decimal("0.15")


@dataclass(frozen=True)
class DependentCareParams:
    expense_limit_one: int = _usd(3000)
    expense_limit_two_or_more: int = _usd(6000)
    max_rate: Decimal = Decimal("0.35")
    min_rate: Decimal = Decimal("0.20")
    rate_step: Decimal = Decimal("0.01")
    agi_threshold: int = _usd(15000)
    agi_step: int = _usd(2000)


@dataclass(frozen=True)
class EducationCreditParams:
    aoc_full_expenses: int = _usd(2000)
    aoc_partial_expenses: int = _usd(2000)
    aoc_partial_rate: Decimal = Decimal("0.25")
    aoc_refundable_rate: Decimal = Decimal("0.40")
    llc_expense_limit: int = _usd(10000)
    llc_rate: Decimal = Decimal("0.20")
    phase_out_lower: int = _usd(80000)
    phase_out_upper: int = _usd(90000)
    phase_out_lower_joint: int = _usd(160000)
    phase_out_upper_joint: int = _usd(180000)


@dataclass(frozen=True)
class FederalTaxTables:
    """Everything the in-process tax calculation needs for one year."""
    year: int
    brackets: Mapping[FilingStatus, tuple[TaxBracket, ...]]
    standard_deduction: Mapping[FilingStatus, int]
    eitc: tuple[EitcRow, ...]
    eitc_investment_income_limit: int
    ctc: ChildTaxCreditParams
    dependent_care: DependentCareParams = field(default_factory=DependentCareParams)
    education: EducationCreditParams = field(default_factory=EducationCreditParams)
    self_employment: SelfEmploymentRates = field(default_factory=SelfEmploymentRates)

    def eitc_row(self, qualifying_children: int) -> EitcRow:
        """Row for the given children count (capped at the last row)."""
        return self.eitc[min(qualifying_children, len(self.eitc) - 1)]


# =============================================================================
# BUILDERS
# =============================================================================

BRACKET_RATES = tuple(
    Decimal(r) for r in ("0.10", "0.12", "0.22", "0.24", "0.32", "0.35", "0.37")
)

EITC_CREDIT_RATES = (Decimal("0.0765"), Decimal("0.34"), Decimal("0.40"), Decimal("0.45"))
EITC_PHASE_OUT_RATES = (Decimal("0.0765"), Decimal("0.1598"), Decimal("0.2106"), Decimal("0.2106"))


def _brackets(*ceilings: int) -> tuple[TaxBracket, ...]:
    """Build a schedule from the six bracket ceilings (in dollars)."""
    result = []
    floor = 0
    for rate, ceiling in zip(BRACKET_RATES, ceilings + (None,)):
        upper = _usd(ceiling) if ceiling is not None else None
        result.append(TaxBracket(floor=floor, ceiling=upper, rate=rate))
        floor = upper if upper is not None else floor
    return tuple(result)


def _schedule(single, joint, separate, head) -> dict[FilingStatus, tuple[TaxBracket, ...]]:
    return {
        FilingStatus.SINGLE: _brackets(*single),
        FilingStatus.MARRIED_FILING_JOINTLY: _brackets(*joint),
        FilingStatus.QUALIFYING_SURVIVING_SPOUSE: _brackets(*joint),
        FilingStatus.MARRIED_FILING_SEPARATELY: _brackets(*separate),
        FilingStatus.HEAD_OF_HOUSEHOLD: _brackets(*head),
    }


def _standard(single, joint, head) -> dict[FilingStatus, int]:
    return {
        FilingStatus.SINGLE: _usd(single),
        FilingStatus.MARRIED_FILING_JOINTLY: _usd(joint),
        FilingStatus.QUALIFYING_SURVIVING_SPOUSE: _usd(joint),
        FilingStatus.MARRIED_FILING_SEPARATELY: _usd(single),
        FilingStatus.HEAD_OF_HOUSEHOLD: _usd(head),
    }


def _eitc(*rows: tuple[int, int, int, int]) -> tuple[EitcRow, ...]:
    """Rows of (earned amount, max credit, phase-out start, joint start)."""
    return tuple(
        EitcRow(
            earned_income_amount=_usd(earned),
            max_credit=_usd(max_credit),
            credit_rate=EITC_CREDIT_RATES[children],
            phase_out_rate=EITC_PHASE_OUT_RATES[children],
            phase_out_start=_usd(start),
            phase_out_start_joint=_usd(start_joint),
        )
        for children, (earned, max_credit, start, start_joint) in enumerate(rows)
    )


# =============================================================================
# TAX YEAR 2023
# =============================================================================

TAX_2023 = FederalTaxTables(
    year=2023,
    brackets=_schedule(
        single=(11000, 44725, 95375, 182100, 231250, 578125),
        joint=(22000, 89450, 190750, 364200, 462500, 693750),
        separate=(11000, 44725, 95375, 182100, 231250, 346875),
        head=(15700, 59850, 95350, 182100, 231250, 578100),
    ),
    standard_deduction=_standard(single=13850, joint=27700, head=20800),
    eitc=_eitc(
        (7840, 600, 9800, 16370),
        (11750, 3995, 21560, 28120),
        (16510, 6604, 21560, 28120),
        (16510, 7430, 21560, 28120),
    ),
    eitc_investment_income_limit=_usd(11000),
    ctc=ChildTaxCreditParams(per_child=_usd(2000), refundable_limit=_usd(1600)),
)


# =============================================================================
# TAX YEAR 2024
# =============================================================================

TAX_2024 = FederalTaxTables(
    year=2024,
    brackets=_schedule(
        single=(11600, 47150, 100525, 191950, 243725, 609350),
        joint=(23200, 94300, 201050, 383900, 487450, 731200),
        separate=(11600, 47150, 100525, 191950, 243725, 365600),
        head=(16550, 63100, 100500, 191950, 243700, 609350),
    ),
    standard_deduction=_standard(single=14600, joint=29200, head=21900),
    eitc=_eitc(
        (8260, 632, 10330, 17250),
        (12390, 4213, 22720, 29640),
        (17400, 6960, 22720, 29640),
        (17400, 7830, 22720, 29640),
    ),
    eitc_investment_income_limit=_usd(11600),
    ctc=ChildTaxCreditParams(per_child=_usd(2000), refundable_limit=_usd(1700)),
)


# =============================================================================
# TAX YEAR 2025
# =============================================================================

TAX_2025 = FederalTaxTables(
    year=2025,
    brackets=_schedule(
        single=(11925, 48475, 103350, 197300, 250525, 626350),
        joint=(23850, 96950, 206700, 394600, 501050, 751600),
        separate=(11925, 48475, 103350, 197300, 250525, 375800),
        head=(17000, 64850, 103350, 197300, 250500, 626350),
    ),
    standard_deduction=_standard(single=15750, joint=31500, head=23625),
    eitc=_eitc(
        (8490, 649, 10620, 17730),
        (12730, 4328, 23350, 30470),
        (17880, 7152, 23350, 30470),
        (17880, 8046, 23350, 30470),
    ),
    eitc_investment_income_limit=_usd(11950),
    ctc=ChildTaxCreditParams(per_child=_usd(2200), refundable_limit=_usd(1700)),
)


FEDERAL_TAX_TABLES: dict[int, FederalTaxTables] = {
    t.year: t for t in (TAX_2023, TAX_2024, TAX_2025)
}
