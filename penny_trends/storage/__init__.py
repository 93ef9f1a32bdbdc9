from penny_trends.storage.snapshot_store import SnapshotStore, create_store

__all__ = ["SnapshotStore", "create_store"]
