"""Financial opportunity radar.

Each session submits household updates as the user edits their inputs.
Updates are debounced, evaluated against the tax and benefit rules, and
compared with the session's previous snapshot to produce change alerts.
Superseded updates resolve to ``None``.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from ..cliff import CliffEngine
from ..config import RadarConfig
from ..exceptions import StaleRequestError
from ..models.household import HouseholdInput
from ..models.radar import RadarResponse, RadarSnapshot, RadarSummary
from ..models.results import ScenarioResult
from ..money import MONTHS_PER_YEAR
from .alerts import diff_snapshots
from .runner import LatestOnlyRunner, RunnerState
from .store import SnapshotStore

logger = structlog.get_logger()


def _summary(scenario: ScenarioResult) -> RadarSummary:
    monthly = scenario.total_monthly_benefits
    return RadarSummary(
        total_monthly_benefits=monthly,
        total_annual_benefits=monthly * MONTHS_PER_YEAR,
        eligible_program_count=sum(1 for p in scenario.programs if p.eligible),
        program_count=len(scenario.programs),
    )


class RadarService:
    """Debounced per-session evaluation with snapshot diffing.

    Args:
        engine: Scenario evaluator (tables and tax strategy).
        config: Debounce, timeout and alert materiality settings.
        store: Snapshot storage, shared if several services serve one
            process.
    """

    def __init__(
        self,
        engine: Optional[CliffEngine] = None,
        config: Optional[RadarConfig] = None,
        store: Optional[SnapshotStore] = None,
    ):
        self.engine = engine or CliffEngine()
        self.config = config or RadarConfig()
        self.store = store or SnapshotStore()
        self.runner: LatestOnlyRunner[ScenarioResult] = LatestOnlyRunner(
            debounce_seconds=self.config.debounce_seconds,
            timeout_seconds=self.config.timeout_seconds,
        )
        self.evaluations = 0

    def state(self, session_id: str) -> RunnerState:
        return self.runner.state(session_id)

    def snapshot(self, session_id: str) -> Optional[RadarSnapshot]:
        return self.store.get(session_id)

    def _evaluate(self, household: HouseholdInput) -> ScenarioResult:
        self.evaluations += 1
        return self.engine.evaluate_scenario(household)

    def _commit(self, session_id: str, sequence: int, scenario: ScenarioResult) -> Optional[RadarResponse]:
        snapshot = RadarSnapshot.from_results(session_id, sequence, scenario.programs, scenario.tax)
        swapped, previous = self.store.compare_and_swap(snapshot)
        if not swapped:
            logger.info(
                "radar_evaluation_discarded",
                session_id=session_id,
                sequence=sequence,
                stored_sequence=previous.sequence if previous else None,
            )
            return None

        alerts = diff_snapshots(previous, snapshot, self.config.materiality_threshold_cents)
        logger.info(
            "radar_snapshot_updated",
            session_id=session_id,
            sequence=sequence,
            alert_count=len(alerts),
        )
        return RadarResponse(
            session_id=session_id,
            sequence=sequence,
            programs=scenario.programs,
            tax=scenario.tax,
            alerts=tuple(alerts),
            summary=_summary(scenario),
            evaluated_at=datetime.now(timezone.utc),
        )

    async def update(self, session_id: str, household: HouseholdInput) -> Optional[RadarResponse]:
        """Submit a household update for ``session_id``.

        Returns:
            The response for this update, or None if a newer update
            superseded it.

        Raises:
            UnsupportedYearError / UnsupportedStateError: Before debouncing.
            ComputationTimeoutError: Evaluation exceeded the timeout; the
                snapshot is left untouched.
        """
        registry = self.engine.registry
        registry.tax(household.tax_year)
        registry.programs(household.state_code, household.tax_year)

        try:
            return await self.runner.submit(
                session_id,
                lambda: self._evaluate(household),
                lambda sequence, scenario: self._commit(session_id, sequence, scenario),
            )
        except StaleRequestError as e:
            logger.debug("radar_update_superseded", session_id=session_id, sequence=e.sequence)
            return None

    async def end_session(self, session_id: str) -> None:
        """Drop pending work and the stored snapshot for a session."""
        self.runner.cancel(session_id)
        self.store.delete(session_id)
        logger.info("radar_session_ended", session_id=session_id)
