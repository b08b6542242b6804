"""Sync-status ledger: one row per job, overwritten on every run."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from situation_sync.models.base import Base


class SyncStatus(Base):
    __tablename__ = "sync_status"

    function_name: Mapped[str] = mapped_column(String(50), primary_key=True)

    success: Mapped[bool] = mapped_column(Boolean, nullable=False)

    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    last_run: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    last_success: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    run_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    avg_duration_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
