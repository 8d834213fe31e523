"""Run every benefit program against one household."""

from typing import Callable, Optional

import structlog

from ..models.household import HouseholdInput
from ..models.results import ProgramEligibility
from ..parameters.registry import ParameterRegistry, ProgramTables, get_registry
from .medicaid import evaluate_medicaid
from .snap import evaluate_snap
from .ssi import evaluate_ssi
from .tanf import evaluate_tanf

logger = structlog.get_logger()

ProgramEvaluator = Callable[[HouseholdInput, ProgramTables], ProgramEligibility]

# Output order is part of the contract.
PROGRAM_EVALUATORS: tuple[ProgramEvaluator, ...] = (
    evaluate_snap,
    evaluate_tanf,
    evaluate_ssi,
    evaluate_medicaid,
)


def evaluate_programs(household: HouseholdInput, tables: ProgramTables) -> list[ProgramEligibility]:
    """Evaluate SNAP, TANF, SSI and Medicaid in that order."""
    results = []
    for evaluator in PROGRAM_EVALUATORS:
        result = evaluator(household, tables)
        logger.debug(
            "benefit_program_evaluated",
            program=result.program.value,
            eligible=result.eligible,
            monthly_amount=result.monthly_amount,
            reason=result.reason.value if result.reason else None,
        )
        results.append(result)
    return results


def evaluate_benefits(
    household: HouseholdInput,
    state_code: Optional[str] = None,
    year: Optional[int] = None,
    registry: Optional[ParameterRegistry] = None,
) -> list[ProgramEligibility]:
    """Resolve tables for the household's state and year, then evaluate.

    Raises:
        UnsupportedYearError: No benefit tables for the year.
        UnsupportedStateError: No state tables for the state.
    """
    registry = registry or get_registry()
    tables = registry.programs(
        state_code or household.state_code,
        year if year is not None else household.tax_year,
    )
    return evaluate_programs(household, tables)
