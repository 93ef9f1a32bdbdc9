"""In-process snapshot store, used by tests and one-shot runs."""

from typing import Optional

from penny_trends.models import Snapshot


class InMemorySnapshotStore:
    """Keeps the wire form of the last snapshot in memory."""

    def __init__(self):
        self._payload: Optional[dict] = None
        self.saves = 0

    def save(self, snapshot: Snapshot) -> None:
        self._payload = snapshot.to_wire()
        self.saves += 1

    def load(self) -> Optional[Snapshot]:
        if self._payload is None:
            return None
        return Snapshot.from_wire(self._payload)

    def close(self) -> None:
        pass
