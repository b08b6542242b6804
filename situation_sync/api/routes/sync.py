"""Sync routes - Trigger the ingestion jobs.

Each job is reachable at ``/functions/{job_name}`` so an external scheduler can
call it like any scheduled function. OPTIONS answers the CORS preflight.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from situation_sync.api.deps import get_db, require_trigger_auth
from situation_sync.core.logging import get_logger
from situation_sync.schemas.api import ErrorResponse
from situation_sync.services.sync_service import JOBS, run_all, run_job

router = APIRouter(prefix="/functions", tags=["sync"])
log = get_logger("sync_routes")


@router.options("/{job_name}")
def preflight(job_name: str) -> Response:
    return Response(status_code=200)


@router.post("/run-all", dependencies=[Depends(require_trigger_auth)])
async def trigger_all(db: Session = Depends(get_db)):
    """
    Run every sync job sequentially.

    Returns the report of each job keyed by its name.
    """
    log.info("Sync triggered for all jobs")
    reports = await run_all(db)
    return {
        "success": all(report.success for report in reports.values()),
        "results": {name: report.to_dict() for name, report in reports.items()},
    }


@router.api_route(
    "/{job_name}",
    methods=["GET", "POST"],
    dependencies=[Depends(require_trigger_auth)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def trigger_job(job_name: str, db: Session = Depends(get_db)):
    """
    Run one sync job: fetch, upsert, apply retention and record its status.

    Upsert failures still answer 200 with ``success: false``; an unexpected
    failure of the job itself answers 500.
    """
    if job_name not in JOBS:
        error = ErrorResponse(error=f"Unknown function: {job_name}")
        return JSONResponse(status_code=404, content=error.model_dump())

    log.info(f"Sync triggered: {job_name}")
    report = await run_job(job_name, db)
    return JSONResponse(status_code=500 if report.error else 200, content=report.to_dict())
