from datetime import datetime

from pydantic import BaseModel


class SyncStatusOut(BaseModel):
    """One row of the sync-status ledger."""

    function_name: str
    success: bool
    duration_ms: int
    last_error: str | None = None
    last_run: datetime
    last_success: datetime | None = None
    run_count: int
    error_count: int
    avg_duration_ms: int

    class Config:
        from_attributes = True


class HealthResponse(BaseModel):
    database: str
    last_sync_function: str | None
    last_sync_success: bool | None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
