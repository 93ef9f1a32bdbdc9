"""JSON file storage for the published snapshot."""

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from penny_trends.exceptions import PersistenceError
from penny_trends.models import Snapshot

logger = logging.getLogger(__name__)


class JsonFileSnapshotStore:
    """Keeps the snapshot as a single JSON document on disk."""

    def __init__(self, path: str):
        """
        Initialize the store with a file path.

        Args:
            path: Path of the JSON document
        """
        self.path = path
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the directory for the JSON file exists."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def save(self, snapshot: Snapshot) -> None:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
            with open(self.path, "w", encoding="utf-8") as file:
                json.dump(snapshot.to_wire(), file)
        except OSError as e:
            raise PersistenceError(f"Failed to write snapshot to {self.path}: {e}") from e

        logger.info(f"Saved snapshot with {len(snapshot.stocks)} stocks to {self.path}")

    def load(self) -> Optional[Snapshot]:
        if not os.path.exists(self.path):
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as file:
                return Snapshot.from_wire(json.load(file))
        except (ValueError, ValidationError) as e:
            # A half-written or hand-edited file reads as "no snapshot"
            logger.error(f"Unreadable snapshot in {self.path}: {e}")
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read snapshot from {self.path}: {e}") from e

    def close(self) -> None:
        """Files are opened per call, nothing to release."""
