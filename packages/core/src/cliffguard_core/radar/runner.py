"""Debounced, latest-only execution of blocking work keyed by an id.

For each key only the most recent submission is evaluated: a new
submission restarts the debounce timer, and when the timer elapses a new
sequence number is issued and any older in-flight evaluation is cancelled.
Blocking work runs in a worker thread; a cancelled thread is left to
finish and its result is dropped.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

import structlog

from ..exceptions import ComputationTimeoutError, StaleRequestError

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


class RunnerState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    EVALUATING = "evaluating"
    SETTLED = "settled"


@dataclass
class _KeyState:
    state: RunnerState = RunnerState.IDLE
    token: int = 0          # bumped on every submission
    sequence: int = 0       # bumped when a debounce window elapses
    timer: Optional[asyncio.Future] = None
    in_flight: Optional[asyncio.Future] = None


class LatestOnlyRunner(Generic[T]):
    """Per-key debounce and cancel-in-flight coordinator.

    State is owned by the event loop; ``submit`` must be awaited from the
    loop the runner is used on.

    Args:
        debounce_seconds: Quiet period after the last submission.
        timeout_seconds: Bound on a single evaluation, or None for no bound.
    """

    def __init__(self, debounce_seconds: float = 0.5, timeout_seconds: Optional[float] = 2.0):
        self.debounce_seconds = debounce_seconds
        self.timeout_seconds = timeout_seconds
        self._keys: dict[str, _KeyState] = {}

    def state(self, key: str) -> RunnerState:
        st = self._keys.get(key)
        return st.state if st else RunnerState.IDLE

    def sequence(self, key: str) -> int:
        """Latest sequence number issued for ``key`` (0 if none)."""
        st = self._keys.get(key)
        return st.sequence if st else 0

    async def submit(
        self,
        key: str,
        work: Callable[[], T],
        on_result: Callable[[int, T], R],
    ) -> R:
        """Debounce, then run ``work`` in a thread and hand its result to ``on_result``.

        ``on_result`` runs on the event loop, synchronously, and only while
        the evaluation's sequence number is still the latest for the key.

        Raises:
            StaleRequestError: A newer submission superseded this one.
            ComputationTimeoutError: The evaluation exceeded the timeout.
        """
        st = self._keys.setdefault(key, _KeyState())
        st.token += 1
        token = st.token

        if st.timer is not None and not st.timer.done():
            st.timer.cancel()
        st.state = RunnerState.DEBOUNCING
        timer = asyncio.ensure_future(asyncio.sleep(self.debounce_seconds))
        st.timer = timer

        try:
            await timer
        except asyncio.CancelledError:
            if st.token != token:
                raise StaleRequestError(key=key) from None
            st.state = RunnerState.IDLE
            raise

        if st.token != token:
            raise StaleRequestError(key=key)

        st.sequence += 1
        sequence = st.sequence
        if st.in_flight is not None and not st.in_flight.done():
            st.in_flight.cancel()
            logger.debug("latest_only_cancelled_in_flight", key=key, superseded_by=sequence)

        st.state = RunnerState.EVALUATING
        task = asyncio.ensure_future(asyncio.to_thread(work))
        st.in_flight = task

        try:
            result = await asyncio.wait_for(asyncio.shield(task), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            task.cancel()
            if st.sequence != sequence:
                raise StaleRequestError(key=key, sequence=sequence) from None
            st.state = RunnerState.IDLE
            st.in_flight = None
            logger.warning("latest_only_timeout", key=key, sequence=sequence, timeout=self.timeout_seconds)
            raise ComputationTimeoutError(
                f"Evaluation exceeded {self.timeout_seconds}s",
                timeout_seconds=self.timeout_seconds,
                session_id=key,
            ) from None
        except asyncio.CancelledError:
            if st.sequence != sequence:
                raise StaleRequestError(key=key, sequence=sequence) from None
            task.cancel()
            st.state = RunnerState.IDLE
            st.in_flight = None
            raise
        except Exception:
            if st.sequence != sequence:
                raise StaleRequestError(key=key, sequence=sequence) from None
            st.state = RunnerState.IDLE
            st.in_flight = None
            raise

        if st.sequence != sequence:
            raise StaleRequestError(key=key, sequence=sequence)

        st.state = RunnerState.SETTLED
        st.in_flight = None
        return on_result(sequence, result)

    def cancel(self, key: str) -> None:
        """Abandon all pending and in-flight work for ``key``.

        Waiting callers receive StaleRequestError.
        """
        st = self._keys.pop(key, None)
        if st is None:
            return
        st.token += 1
        st.sequence += 1
        for fut in (st.timer, st.in_flight):
            if fut is not None and not fut.done():
                fut.cancel()
