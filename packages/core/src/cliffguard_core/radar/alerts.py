"""Change detection between two radar snapshots."""

from typing import Optional

from ..models.radar import AlertCode, AlertType, ProgramState, RadarAlert, RadarSnapshot
from ..models.results import ProgramId
from ..money import cents_to_dollars

_MESSAGES = {
    AlertCode.BASELINE: "You may qualify for {program}: {amount}/month.",
    AlertCode.NEWLY_ELIGIBLE: "You now qualify for {program}: {amount}/month.",
    AlertCode.ELIGIBILITY_LOST: "You no longer qualify for {program}.",
    AlertCode.AMOUNT_INCREASED: "{program} increased by {change}/month.",
    AlertCode.AMOUNT_DECREASED: "{program} decreased by {change}/month.",
}

_TYPES = {
    AlertCode.BASELINE: AlertType.INFO,
    AlertCode.NEWLY_ELIGIBLE: AlertType.OPPORTUNITY,
    AlertCode.ELIGIBILITY_LOST: AlertType.WARNING,
    AlertCode.AMOUNT_INCREASED: AlertType.SUCCESS,
    AlertCode.AMOUNT_DECREASED: AlertType.WARNING,
}

_NOT_ELIGIBLE = ProgramState(eligible=False, monthly_amount=0)


def _dollars(cents: int) -> str:
    return f"${cents_to_dollars(abs(cents)):,.2f}"


def _alert(
    code: AlertCode,
    program: ProgramId,
    previous: Optional[ProgramState],
    current: ProgramState,
) -> RadarAlert:
    previous_monthly = previous.monthly_amount if previous is not None else None
    change = current.monthly_amount - (previous_monthly or 0)
    return RadarAlert(
        type=_TYPES[code],
        code=code,
        program=program,
        message=_MESSAGES[code].format(
            program=program.label,
            amount=_dollars(current.monthly_amount),
            change=_dollars(change),
        ),
        previous_monthly=previous_monthly,
        current_monthly=current.monthly_amount,
    )


def diff_snapshots(
    previous: Optional[RadarSnapshot],
    current: RadarSnapshot,
    materiality_threshold: int,
) -> list[RadarAlert]:
    """Alerts for eligibility flips and amount changes beyond the threshold.

    With no previous snapshot every eligible program yields a baseline
    alert.
    """
    alerts = []
    for program in ProgramId:
        state = current.programs.get(program)
        if state is None:
            continue

        if previous is None:
            if state.eligible:
                alerts.append(_alert(AlertCode.BASELINE, program, None, state))
            continue

        before = previous.programs.get(program, _NOT_ELIGIBLE)
        if state.eligible and not before.eligible:
            alerts.append(_alert(AlertCode.NEWLY_ELIGIBLE, program, before, state))
        elif before.eligible and not state.eligible:
            alerts.append(_alert(AlertCode.ELIGIBILITY_LOST, program, before, state))
        elif state.eligible:
            delta = state.monthly_amount - before.monthly_amount
            if delta > materiality_threshold:
                alerts.append(_alert(AlertCode.AMOUNT_INCREASED, program, before, state))
            elif delta < -materiality_threshold:
                alerts.append(_alert(AlertCode.AMOUNT_DECREASED, program, before, state))
    return alerts
