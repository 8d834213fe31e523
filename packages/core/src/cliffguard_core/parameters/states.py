"""State-administered program parameters: TANF, Medicaid and SSI supplements.

These tables are representative rather than authoritative: payment
standards and disregards vary by county, assistance unit type and policy
year in most states. Callers needing exact figures should inject their own
StateTables through a ParameterRegistry.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..models.household import MedicaidCategory
from ..money import dollars_to_cents


def _usd(dollars) -> int:
    return dollars_to_cents(dollars)


@dataclass(frozen=True)
class TanfTable:
    payment_standards: tuple[int, ...]  # monthly, assistance unit sizes 1..8
    additional_person: int
    earned_disregard_rate: Decimal
    earned_disregard_flat: int
    asset_limit: Optional[int]          # None = no asset test

    def payment_standard(self, household_size: int) -> int:
        if household_size <= len(self.payment_standards):
            return self.payment_standards[household_size - 1]
        extra = household_size - len(self.payment_standards)
        return self.payment_standards[-1] + extra * self.additional_person


@dataclass(frozen=True)
class MedicaidTable:
    """Income limits as fractions of the annual poverty guideline."""
    adult: Decimal
    child: Decimal
    pregnant: Decimal
    aged_blind_disabled: Decimal
    abd_asset_limit: Optional[int] = _usd(2000)

    def limit_for(self, category: MedicaidCategory) -> Decimal:
        return getattr(self, category.value)


@dataclass(frozen=True)
class StateTables:
    state_code: str
    name: str
    tanf: TanfTable
    medicaid: MedicaidTable
    ssi_supplement: int = 0
    ssi_supplement_couple: int = 0


def _tanf(standards, additional, rate, flat=0, assets=None) -> TanfTable:
    return TanfTable(
        payment_standards=tuple(_usd(s) for s in standards),
        additional_person=_usd(additional),
        earned_disregard_rate=Decimal(rate),
        earned_disregard_flat=_usd(flat),
        asset_limit=_usd(assets) if assets is not None else None,
    )


def _medicaid(adult, child, pregnant, abd, abd_assets=2000) -> MedicaidTable:
    return MedicaidTable(
        adult=Decimal(adult) / 100,
        child=Decimal(child) / 100,
        pregnant=Decimal(pregnant) / 100,
        aged_blind_disabled=Decimal(abd) / 100,
        abd_asset_limit=_usd(abd_assets) if abd_assets is not None else None,
    )


STATE_TABLES: dict[str, StateTables] = {
    "MD": StateTables(
        state_code="MD",
        name="Maryland",
        tanf=_tanf((438, 596, 727, 893, 1016, 1152, 1282, 1413), 130, "0.40"),
        medicaid=_medicaid(138, 322, 264, 100, abd_assets=2500),
    ),
    "PA": StateTables(
        state_code="PA",
        name="Pennsylvania",
        tanf=_tanf((205, 316, 403, 497, 589, 670, 753, 836), 83, "0.50", assets=1000),
        medicaid=_medicaid(138, 319, 220, 100),
        ssi_supplement=_usd("22.10"),
        ssi_supplement_couple=_usd("33.30"),
    ),
    "VA": StateTables(
        state_code="VA",
        name="Virginia",
        tanf=_tanf((364, 464, 564, 664, 764, 864, 964, 1064), 100, "0.20", assets=5000),
        medicaid=_medicaid(138, 205, 148, 80),
    ),
    "TX": StateTables(
        state_code="TX",
        name="Texas",
        tanf=_tanf((126, 261, 330, 403, 471, 545, 612, 683), 70, "0.3333", flat=120, assets=1000),
        medicaid=_medicaid(16, 201, 203, 74),
    ),
    "CA": StateTables(
        state_code="CA",
        name="California",
        tanf=_tanf((770, 970, 1204, 1430, 1632, 1836, 2015, 2194), 180, "0.50", flat=600, assets=11634),
        medicaid=_medicaid(138, 266, 213, 138, abd_assets=None),
        ssi_supplement=_usd("160.72"),
        ssi_supplement_couple=_usd("407.14"),
    ),
    "NY": StateTables(
        state_code="NY",
        name="New York",
        tanf=_tanf((408, 575, 789, 930, 1065, 1225, 1363, 1495), 130, "0.50", flat=90, assets=2500),
        medicaid=_medicaid(138, 400, 223, 138, abd_assets=31175),
        ssi_supplement=_usd(87),
        ssi_supplement_couple=_usd(104),
    ),
}
