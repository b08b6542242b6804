"""Health routes - System health and readiness checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from situation_sync.api.deps import get_db
from situation_sync.models.sync_status import SyncStatus
from situation_sync.schemas.api import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(response: Response, db: Session = Depends(get_db)):
    """
    Health check endpoint for load balancers and container probes.

    Checks database connectivity and reports the most recent sync.
    Returns 503 if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        response.status_code = 503
        return HealthResponse(database=f"down: {e}", last_sync_function=None, last_sync_success=None)

    stmt = select(SyncStatus).order_by(SyncStatus.last_run.desc()).limit(1)
    last = db.execute(stmt).scalar_one_or_none()

    return HealthResponse(
        database="ok",
        last_sync_function=last.function_name if last else None,
        last_sync_success=last.success if last else None,
    )


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)):
    """
    Readiness probe - checks if the service can serve traffic.

    Returns 200 if ready, 503 if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}
    except SQLAlchemyError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "timestamp": datetime.now(timezone.utc).isoformat()}
