"""Federal benefit program parameters: poverty guidelines, SNAP and SSI.

SNAP figures follow the USDA cost-of-living adjustments for the 48
contiguous states and DC; SSI figures follow the SSA federal benefit rate
announcements. Tables are keyed by the calendar year in which the
household is evaluated.
"""

from dataclasses import dataclass
from decimal import Decimal

from ..money import dollars_to_cents


def _usd(dollars) -> int:
    return dollars_to_cents(dollars)


@dataclass(frozen=True)
class PovertyGuidelines:
    """HHS poverty guidelines (annual) for the contiguous states."""
    base: int
    per_additional_person: int

    def annual(self, household_size: int) -> int:
        size = max(1, household_size)
        return self.base + (size - 1) * self.per_additional_person

    def monthly(self, household_size: int) -> Decimal:
        """Monthly guideline, unrounded."""
        return Decimal(self.annual(household_size)) / 12


@dataclass(frozen=True)
class SnapTables:
    max_allotments: tuple[int, ...]          # household sizes 1..8
    additional_person_allotment: int
    standard_deductions: tuple[int, ...]     # sizes 1..6+, last entry repeats
    shelter_cap: int
    asset_limit: int
    asset_limit_elderly_disabled: int
    minimum_benefit: int = _usd(23)
    minimum_benefit_max_size: int = 2
    earned_income_deduction_rate: Decimal = Decimal("0.20")
    medical_expense_threshold: int = _usd(35)
    shelter_income_share: Decimal = Decimal("0.50")
    gross_income_limit: Decimal = Decimal("1.30")
    net_income_limit: Decimal = Decimal("1.00")
    benefit_reduction_rate: Decimal = Decimal("0.30")

    def max_allotment(self, household_size: int) -> int:
        if household_size <= len(self.max_allotments):
            return self.max_allotments[household_size - 1]
        extra = household_size - len(self.max_allotments)
        return self.max_allotments[-1] + extra * self.additional_person_allotment

    def standard_deduction(self, household_size: int) -> int:
        return self.standard_deductions[min(household_size, len(self.standard_deductions)) - 1]


@dataclass(frozen=True)
class SsiTables:
    federal_benefit_rate: int
    federal_benefit_rate_couple: int
    resource_limit: int = _usd(2000)
    resource_limit_couple: int = _usd(3000)
    general_income_exclusion: int = _usd(20)
    earned_income_exclusion: int = _usd(65)
    earned_income_share_counted: Decimal = Decimal("0.5")


@dataclass(frozen=True)
class BenefitTables:
    year: int
    poverty: PovertyGuidelines
    snap: SnapTables
    ssi: SsiTables


def _snap(allotments, additional, deductions, shelter_cap, assets=(2750, 4250)) -> SnapTables:
    return SnapTables(
        max_allotments=tuple(_usd(a) for a in allotments),
        additional_person_allotment=_usd(additional),
        standard_deductions=tuple(_usd(d) for d in deductions),
        shelter_cap=_usd(shelter_cap),
        asset_limit=_usd(assets[0]),
        asset_limit_elderly_disabled=_usd(assets[1]),
    )


BENEFITS_2023 = BenefitTables(
    year=2023,
    poverty=PovertyGuidelines(base=_usd(14580), per_additional_person=_usd(5140)),
    snap=_snap(
        (281, 516, 740, 939, 1116, 1339, 1480, 1691), 211,
        (193, 193, 193, 204, 239, 274),
        shelter_cap=624,
    ),
    ssi=SsiTables(federal_benefit_rate=_usd(914), federal_benefit_rate_couple=_usd(1371)),
)

BENEFITS_2024 = BenefitTables(
    year=2024,
    poverty=PovertyGuidelines(base=_usd(15060), per_additional_person=_usd(5380)),
    snap=_snap(
        (291, 535, 766, 973, 1155, 1386, 1532, 1751), 219,
        (198, 198, 198, 208, 244, 279),
        shelter_cap=672,
    ),
    ssi=SsiTables(federal_benefit_rate=_usd(943), federal_benefit_rate_couple=_usd(1415)),
)

BENEFITS_2025 = BenefitTables(
    year=2025,
    poverty=PovertyGuidelines(base=_usd(15650), per_additional_person=_usd(5500)),
    snap=_snap(
        (292, 536, 768, 975, 1158, 1390, 1536, 1756), 220,
        (204, 204, 204, 217, 254, 291),
        shelter_cap=712,
        assets=(3000, 4500),
    ),
    ssi=SsiTables(federal_benefit_rate=_usd(967), federal_benefit_rate_couple=_usd(1450)),
)


BENEFIT_TABLES: dict[int, BenefitTables] = {
    t.year: t for t in (BENEFITS_2023, BENEFITS_2024, BENEFITS_2025)
}
