"""Lookup of versioned parameter tables by year and state."""

from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from ..exceptions import UnsupportedStateError, UnsupportedYearError
from .federal import FEDERAL_TAX_TABLES, FederalTaxTables
from .programs import BENEFIT_TABLES, BenefitTables
from .states import STATE_TABLES, StateTables

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProgramTables:
    """Federal and state tables needed to evaluate one household's benefits."""
    federal: BenefitTables
    state: StateTables

    @property
    def year(self) -> int:
        return self.federal.year

    @property
    def state_code(self) -> str:
        return self.state.state_code


class ParameterRegistry:
    """Holds the tax, benefit and state tables the engine may use.

    The default registry carries the built-in tables; tests and callers with
    their own figures can construct one with replacement mappings.
    """

    def __init__(
        self,
        tax_tables: Optional[Mapping[int, FederalTaxTables]] = None,
        benefit_tables: Optional[Mapping[int, BenefitTables]] = None,
        state_tables: Optional[Mapping[str, StateTables]] = None,
    ):
        self._tax = dict(FEDERAL_TAX_TABLES if tax_tables is None else tax_tables)
        self._benefits = dict(BENEFIT_TABLES if benefit_tables is None else benefit_tables)
        self._states = {
            code.upper(): t
            for code, t in (STATE_TABLES if state_tables is None else state_tables).items()
        }

    @property
    def tax_years(self) -> list[int]:
        return sorted(self._tax)

    @property
    def benefit_years(self) -> list[int]:
        return sorted(self._benefits)

    @property
    def states(self) -> list[str]:
        return sorted(self._states)

    def tax(self, year: int) -> FederalTaxTables:
        """Federal tax tables for a tax year.

        Raises:
            UnsupportedYearError: If no tables are registered for the year.
        """
        try:
            return self._tax[year]
        except KeyError:
            logger.warning("parameter_lookup_failed", table="federal_tax", year=year)
            raise UnsupportedYearError(
                f"No federal tax tables for {year}",
                year=year,
                supported_years=self.tax_years,
                table="federal_tax",
            ) from None

    def benefits(self, year: int) -> BenefitTables:
        """Federal benefit tables (FPL, SNAP, SSI) for a year."""
        try:
            return self._benefits[year]
        except KeyError:
            logger.warning("parameter_lookup_failed", table="benefits", year=year)
            raise UnsupportedYearError(
                f"No benefit program tables for {year}",
                year=year,
                supported_years=self.benefit_years,
                table="benefits",
            ) from None

    def state(self, state_code: str) -> StateTables:
        """State program tables (TANF, Medicaid, SSI supplement)."""
        code = (state_code or "").strip().upper()
        try:
            return self._states[code]
        except KeyError:
            logger.warning("parameter_lookup_failed", table="state", state_code=code)
            raise UnsupportedStateError(
                f"No program tables for state {code!r}",
                state_code=code,
                supported_states=self.states,
            ) from None

    def programs(self, state_code: str, year: int) -> ProgramTables:
        """Resolve both the federal and state tables for a benefit evaluation."""
        return ProgramTables(federal=self.benefits(year), state=self.state(state_code))


DEFAULT_REGISTRY = ParameterRegistry()


def get_registry() -> ParameterRegistry:
    """Return the registry holding the built-in tables."""
    return DEFAULT_REGISTRY
