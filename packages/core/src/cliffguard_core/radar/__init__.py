"""Real-time change detection over household updates."""

from .alerts import diff_snapshots
from .runner import LatestOnlyRunner, RunnerState
from .service import RadarService
from .store import SnapshotStore

__all__ = [
    "LatestOnlyRunner",
    "RunnerState",
    "RadarService",
    "SnapshotStore",
    "diff_snapshots",
]
