"""Defines the SnapshotStore protocol and the backend factory."""

from typing import Optional, Protocol

from penny_trends.config import StorageConfig
from penny_trends.models import Snapshot


class SnapshotStore(Protocol):
    """
    A protocol that defines the interface for snapshot storage backends.

    A store holds at most one snapshot. ``save`` replaces it by deleting the
    previous value and then writing the new one, so a reader may briefly
    observe no snapshot at all between the two steps.
    """

    def save(self, snapshot: Snapshot) -> None:
        """
        Replace the stored snapshot.

        Raises:
            PersistenceError: If the snapshot could not be written
        """
        ...

    def load(self) -> Optional[Snapshot]:
        """
        Return the stored snapshot, or None if there is none.

        Raises:
            PersistenceError: If the backend itself is unreachable
        """
        ...

    def close(self) -> None:
        """Release any connections or handles held by the store."""
        ...


def create_store(config: StorageConfig) -> SnapshotStore:
    """
    Build the store selected by ``config.backend``.

    Raises:
        ValueError: For an unknown backend name
    """
    if config.backend == "json":
        from penny_trends.storage.json_store import JsonFileSnapshotStore
        return JsonFileSnapshotStore(config.path)
    if config.backend == "sqlalchemy":
        from penny_trends.storage.sqlalchemy_store import SQLAlchemySnapshotStore
        return SQLAlchemySnapshotStore(config.database_url, key=config.key)
    if config.backend == "memory":
        from penny_trends.storage.memory_store import InMemorySnapshotStore
        return InMemorySnapshotStore()
    raise ValueError(f"Unknown storage backend: {config.backend}")
