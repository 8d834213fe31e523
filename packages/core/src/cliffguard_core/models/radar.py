"""Radar snapshot, alert and response models."""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from ..money import MONTHS_PER_YEAR
from .results import ProgramEligibility, ProgramId, TaxResult

_FROZEN = {"frozen": True}


class AlertType(str, Enum):
    """Alert tags, ordered roughly by urgency for display."""
    SUCCESS = "success"
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    INFO = "info"


class AlertCode(str, Enum):
    """Closed set of change conditions the radar reports."""
    BASELINE = "baseline"
    NEWLY_ELIGIBLE = "newly_eligible"
    ELIGIBILITY_LOST = "eligibility_lost"
    AMOUNT_INCREASED = "amount_increased"
    AMOUNT_DECREASED = "amount_decreased"


class RadarAlert(BaseModel):
    """A single change detected between two snapshots."""

    model_config = _FROZEN

    type: AlertType
    code: AlertCode
    program: ProgramId
    message: str
    previous_monthly: Optional[int] = None
    current_monthly: int = 0

    @property
    def change(self) -> int:
        return self.current_monthly - (self.previous_monthly or 0)


class ProgramState(BaseModel):
    """Last known state of one program inside a snapshot."""

    model_config = _FROZEN

    eligible: bool
    monthly_amount: int


def program_states(
    programs: Iterable[ProgramEligibility],
    tax: TaxResult,
) -> dict[ProgramId, ProgramState]:
    """Benefit programs plus tax credits, keyed by program."""
    states = {
        p.program: ProgramState(eligible=p.eligible, monthly_amount=p.monthly_amount)
        for p in programs
    }
    # Tax credits are tracked as monthly equivalents of the annual credit.
    states[ProgramId.EITC] = ProgramState(
        eligible=tax.eitc > 0,
        monthly_amount=tax.eitc // MONTHS_PER_YEAR,
    )
    states[ProgramId.CTC] = ProgramState(
        eligible=tax.ctc > 0,
        monthly_amount=(tax.ctc_nonrefundable + tax.additional_ctc) // MONTHS_PER_YEAR,
    )
    return states


class RadarSnapshot(BaseModel):
    """Per-session program states, replaced wholesale on each accepted update."""

    model_config = _FROZEN

    session_id: str
    sequence: int
    programs: dict[ProgramId, ProgramState]

    @classmethod
    def from_results(
        cls,
        session_id: str,
        sequence: int,
        programs: Iterable[ProgramEligibility],
        tax: TaxResult,
    ) -> "RadarSnapshot":
        return cls(
            session_id=session_id,
            sequence=sequence,
            programs=program_states(programs, tax),
        )


class RadarSummary(BaseModel):
    model_config = _FROZEN

    total_monthly_benefits: int
    total_annual_benefits: int
    eligible_program_count: int
    program_count: int


class RadarResponse(BaseModel):
    """Outcome of an accepted (non-stale) radar evaluation."""

    model_config = _FROZEN

    session_id: str
    sequence: int
    programs: tuple[ProgramEligibility, ...]
    tax: TaxResult
    alerts: tuple[RadarAlert, ...] = ()
    summary: RadarSummary
    evaluated_at: datetime = Field(description="UTC timestamp, serialized as ISO-8601")
