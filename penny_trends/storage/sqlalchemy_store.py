"""
SQLAlchemy key/value storage for the published snapshot.

The snapshot lives under a single key of a ``snapshots`` table, serialized
as JSON text, so any SQLAlchemy URL works (SQLite for local use, Postgres
for shared deployments).
"""

import json
import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from pydantic import ValidationError
from sqlalchemy import Column, DateTime, String, Text, create_engine, delete, make_url, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from penny_trends.exceptions import PersistenceError
from penny_trends.models import Snapshot

logger = logging.getLogger(__name__)

Base = declarative_base()


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)


class SnapshotRow(Base):
    """One stored value per key."""

    __tablename__ = "snapshots"

    key = Column(String(64), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<SnapshotRow(key={self.key}, updated_at={self.updated_at})>"


class SQLAlchemySnapshotStore:
    """Snapshot store backed by any SQLAlchemy engine."""

    def __init__(self, database_url: str, key: str = "stocks"):
        """
        Initialize the store and create the table if needed.

        Args:
            database_url: SQLAlchemy database URL
            key: Key the snapshot is stored under

        Raises:
            PersistenceError: If the database cannot be reached
        """
        self.key = key
        _ensure_sqlite_directory(database_url)
        try:
            self.engine = create_engine(database_url, pool_pre_ping=True)
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to initialize snapshot database: {e}") from e
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info(f"Snapshot store ready on {self.engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def get_db(self) -> Iterator[Session]:
        """
        Get a database session.

        Yields:
            SQLAlchemy session, closed on exit
        """
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def save(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot.to_wire())
        try:
            # Delete and write are separate transactions
            with self.get_db() as db:
                db.execute(delete(SnapshotRow).where(SnapshotRow.key == self.key))
                db.commit()
            with self.get_db() as db:
                db.add(SnapshotRow(key=self.key, payload=payload, updated_at=datetime.now(timezone.utc)))
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write snapshot '{self.key}': {e}") from e

        logger.info(f"Saved snapshot with {len(snapshot.stocks)} stocks under key '{self.key}'")

    def load(self) -> Optional[Snapshot]:
        try:
            with self.get_db() as db:
                row = db.execute(select(SnapshotRow).where(SnapshotRow.key == self.key)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read snapshot '{self.key}': {e}") from e

        if row is None:
            return None
        try:
            return Snapshot.from_wire(json.loads(row.payload))
        except (ValueError, ValidationError) as e:
            logger.error(f"Unreadable snapshot under key '{self.key}': {e}")
            return None

    def close(self) -> None:
        """Release pooled database connections."""
        self.engine.dispose()
