"""Status routes - The sync-status ledger."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from situation_sync.api.deps import get_db
from situation_sync.models.sync_status import SyncStatus
from situation_sync.schemas.api import SyncStatusOut

router = APIRouter(prefix="/status", tags=["status"])


@router.get("", response_model=list[SyncStatusOut])
def list_status(db: Session = Depends(get_db)):
    """Latest outcome and running counters of every job that has run."""
    stmt = select(SyncStatus).order_by(SyncStatus.function_name)
    return db.execute(stmt).scalars().all()


@router.get("/{job_name}", response_model=SyncStatusOut)
def job_status(job_name: str, db: Session = Depends(get_db)):
    status = db.get(SyncStatus, job_name)
    if status is None:
        raise HTTPException(status_code=404, detail=f"No sync recorded for {job_name}")
    return status
