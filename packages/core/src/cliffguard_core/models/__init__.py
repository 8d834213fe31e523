"""Data models for cliffguard-core.

This package provides the immutable structures exchanged across the engine
boundary:
- Household input (household.py)
- Tax, benefit and cliff results (results.py)
- Radar snapshots, alerts and responses (radar.py)
"""

from cliffguard_core.models.household import (
    FilingStatus,
    HouseholdInput,
    MedicaidCategory,
)
from cliffguard_core.models.results import (
    CalculationStep,
    CliffComparison,
    CliffSeverity,
    DeductionBreakdown,
    EducationCredits,
    IneligibilityReason,
    Notice,
    NoticeCode,
    OptimalWage,
    ProgramEligibility,
    ProgramId,
    ProgramImpact,
    ScenarioResult,
    SelfEmploymentTax,
    TaxResult,
    WagePoint,
)
from cliffguard_core.models.radar import (
    AlertCode,
    AlertType,
    ProgramState,
    RadarAlert,
    RadarResponse,
    RadarSnapshot,
    RadarSummary,
    program_states,
)

__all__ = [
    # Household
    "FilingStatus",
    "HouseholdInput",
    "MedicaidCategory",
    # Tax
    "CalculationStep",
    "DeductionBreakdown",
    "EducationCredits",
    "SelfEmploymentTax",
    "TaxResult",
    # Benefits
    "IneligibilityReason",
    "ProgramEligibility",
    "ProgramId",
    # Cliff
    "CliffComparison",
    "CliffSeverity",
    "Notice",
    "NoticeCode",
    "OptimalWage",
    "ProgramImpact",
    "ScenarioResult",
    "WagePoint",
    # Radar
    "AlertCode",
    "AlertType",
    "ProgramState",
    "RadarAlert",
    "RadarResponse",
    "RadarSnapshot",
    "RadarSummary",
    "program_states",
]
