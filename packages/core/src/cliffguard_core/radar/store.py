"""Thread-safe per-session snapshot storage."""

import threading
from typing import Optional

from ..models.radar import RadarSnapshot


class SnapshotStore:
    """Latest RadarSnapshot per session.

    Snapshots are replaced wholesale; a write only succeeds when its
    sequence number is newer than the stored one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshots: dict[str, RadarSnapshot] = {}

    def get(self, session_id: str) -> Optional[RadarSnapshot]:
        with self._lock:
            return self._snapshots.get(session_id)

    def compare_and_swap(self, snapshot: RadarSnapshot) -> tuple[bool, Optional[RadarSnapshot]]:
        """Store ``snapshot`` unless an equal or newer sequence is already stored.

        Returns:
            (swapped, previous snapshot)
        """
        with self._lock:
            previous = self._snapshots.get(snapshot.session_id)
            if previous is not None and previous.sequence >= snapshot.sequence:
                return False, previous
            self._snapshots[snapshot.session_id] = snapshot
            return True, previous

    def delete(self, session_id: str) -> Optional[RadarSnapshot]:
        with self._lock:
            return self._snapshots.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._snapshots

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)
