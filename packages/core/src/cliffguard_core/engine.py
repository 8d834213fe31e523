"""Request/response boundary operations.

Callers hand in either a HouseholdInput or a plain mapping of its fields;
mappings are validated here, and omitted ``tax_year`` / ``state_code``
fall back to the configured defaults. The engine, tax strategy and radar
service used by default are built from CliffGuardConfig on first use and
can be replaced for testing.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog

from .benefits.evaluator import evaluate_programs
from .cliff import CliffEngine, SeverityThresholds
from .config import CliffGuardConfig, get_config
from .exceptions import InvalidInputError
from .models.household import HouseholdInput
from .models.radar import RadarResponse
from .models.results import CliffComparison, OptimalWage, ProgramEligibility, TaxResult
from .parameters.registry import ParameterRegistry
from .radar.service import RadarService
from .strategies import PolicyEngineTaxStrategy, TaxStrategy, default_strategy

logger = structlog.get_logger()

HouseholdLike = Union[HouseholdInput, Mapping[str, Any]]


def as_household(value: HouseholdLike, config: Optional[CliffGuardConfig] = None) -> HouseholdInput:
    """Validate a household mapping, or pass a HouseholdInput through.

    Raises:
        InvalidInputError: If the value is malformed.
    """
    if isinstance(value, HouseholdInput):
        return value
    if not isinstance(value, Mapping):
        raise InvalidInputError(
            f"Expected a household mapping, got {type(value).__name__}",
            field="household",
        )
    config = config or get_config()
    payload = dict(value)
    payload.setdefault("tax_year", config.default_tax_year)
    payload.setdefault("state_code", config.default_state_code)
    return HouseholdInput.build(payload)


def build_strategy(config: CliffGuardConfig) -> TaxStrategy:
    if config.policyengine.enabled:
        return PolicyEngineTaxStrategy(
            base_url=config.policyengine.base_url,
            timeout=config.policyengine.timeout,
        )
    return default_strategy()


def build_engine(
    config: Optional[CliffGuardConfig] = None,
    registry: Optional[ParameterRegistry] = None,
    strategy: Optional[TaxStrategy] = None,
) -> CliffEngine:
    """Assemble a CliffEngine from configuration."""
    config = config or get_config()
    return CliffEngine(
        registry=registry,
        strategy=strategy or build_strategy(config),
        thresholds=SeverityThresholds.from_config(config.cliff),
    )


_engine: Optional[CliffEngine] = None
_radar: Optional[RadarService] = None


def get_engine() -> CliffEngine:
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def get_radar_service() -> RadarService:
    global _radar
    if _radar is None:
        _radar = RadarService(engine=get_engine(), config=get_config().radar)
    return _radar


def reset_defaults() -> None:
    """Forget the default engine and radar service (rebuilt on next use)."""
    global _engine, _radar
    _engine = None
    _radar = None


# =============================================================================
# OPERATIONS
# =============================================================================

def evaluate_tax(
    household: HouseholdLike,
    year: Optional[int] = None,
    *,
    engine: Optional[CliffEngine] = None,
) -> TaxResult:
    """Federal tax for a household.

    Raises:
        InvalidInputError: Malformed household.
        UnsupportedYearError: No tables for the year.
        ExternalServiceError: The external tax strategy failed.
    """
    engine = engine or get_engine()
    h = as_household(household)
    tables = engine.registry.tax(year if year is not None else h.tax_year)
    return engine.strategy.calculate(h, tables)


def evaluate_benefits(
    household: HouseholdLike,
    state_code: Optional[str] = None,
    year: Optional[int] = None,
    *,
    engine: Optional[CliffEngine] = None,
) -> list[ProgramEligibility]:
    """SNAP, TANF, SSI and Medicaid results, in that order.

    Raises:
        InvalidInputError: Malformed household.
        UnsupportedYearError / UnsupportedStateError: No tables.
    """
    engine = engine or get_engine()
    h = as_household(household)
    tables = engine.registry.programs(
        state_code or h.state_code,
        year if year is not None else h.tax_year,
    )
    return evaluate_programs(h, tables)


def compare_cliff(
    current: HouseholdLike,
    proposed: HouseholdLike,
    *,
    engine: Optional[CliffEngine] = None,
) -> CliffComparison:
    """Compare two scenarios for a benefit cliff."""
    engine = engine or get_engine()
    return engine.compare(as_household(current), as_household(proposed))


def find_optimal_wage(
    household: HouseholdLike,
    start: int,
    end: int,
    step: int,
    *,
    engine: Optional[CliffEngine] = None,
) -> OptimalWage:
    """Sweep wages (cents) and return the level with the highest net income."""
    engine = engine or get_engine()
    return engine.find_optimal_wage(as_household(household), start, end, step)


async def radar_update(
    session_id: str,
    household: HouseholdLike,
    *,
    service: Optional[RadarService] = None,
) -> Optional[RadarResponse]:
    """Submit a radar update; resolves to None when superseded."""
    if not session_id:
        raise InvalidInputError("session_id is required", field="session_id")
    service = service or get_radar_service()
    return await service.update(session_id, as_household(household))


__all__ = [
    "HouseholdLike",
    "as_household",
    "build_engine",
    "build_strategy",
    "get_engine",
    "get_radar_service",
    "reset_defaults",
    "evaluate_tax",
    "evaluate_benefits",
    "compare_cliff",
    "find_optimal_wage",
    "radar_update",
]
