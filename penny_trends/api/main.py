"""
FastAPI application serving the published snapshot.

The dashboard reads ``GET /api/reddit?_=<cache-buster>``; the query
parameter only defeats intermediate caches and is ignored here.
"""

import logging
import time

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from penny_trends import __version__
from penny_trends.exceptions import PersistenceError
from penny_trends.models import Snapshot
from penny_trends.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> SnapshotStore:
    """Store dependency, set on the app by ``create_app``."""
    return request.app.state.store


@router.get("/api/reddit", summary="Current snapshot")
def read_snapshot(response: Response, store: SnapshotStore = Depends(get_store)) -> dict:
    """
    Return the last published snapshot.

    With nothing published yet, an empty snapshot with ``lastUpdated: 0`` is
    returned so the client keeps treating its next read as the initial load.
    """
    response.headers["Cache-Control"] = "no-store"
    try:
        snapshot = store.load()
    except PersistenceError as e:
        logger.error(f"Failed to load snapshot: {e}")
        raise HTTPException(status_code=503, detail="Snapshot store unavailable") from e

    if snapshot is None:
        return Snapshot(last_updated=0).to_wire()
    return snapshot.to_wire()


def create_app(store: SnapshotStore) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Snapshot store the endpoint reads from

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Penny Trends",
        version=__version__,
        description="Read endpoint for the trending penny-stock snapshot.",
        openapi_tags=[
            {"name": "snapshot", "description": "Published snapshot"},
            {"name": "health", "description": "Health check and monitoring"},
        ],
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router, tags=["snapshot"])

    @app.get("/health", tags=["health"], summary="Health Check")
    def health_check(store: SnapshotStore = Depends(get_store)) -> dict:
        try:
            snapshot = store.load()
        except PersistenceError as e:
            return {"status": "unhealthy", "error": str(e), "timestamp": time.time()}
        return {
            "status": "healthy",
            "version": __version__,
            "snapshot_status": snapshot.status if snapshot else None,
            "last_updated": snapshot.last_updated if snapshot else None,
            "timestamp": time.time(),
        }

    return app
