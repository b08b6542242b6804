"""Row-level persistence for normalized records."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Type

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from situation_sync.core.logging import get_logger
from situation_sync.models.base import Base

log = get_logger("services.store")


class RecordStore:
    """Idempotent upserts and age-based deletes.

    Every statement runs inside its own SAVEPOINT, so a failing row rolls back
    alone and the surrounding transaction keeps the rows written before it.
    """

    def __init__(self, db: Session):
        self.db = db

    def _insert(self, model: Type[Base]):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(model)
        if dialect == "sqlite":
            return sqlite_insert(model)
        raise ValueError(f"Unsupported database dialect for upsert: {dialect}")

    def upsert(
        self,
        model: Type[Base],
        row: Dict[str, Any],
        conflict_cols: Sequence[str],
        key: Optional[str] = None,
    ) -> bool:
        """Insert ``row`` or overwrite the row sharing its natural key."""
        stmt = self._insert(model).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_cols),
            set_={col: stmt.excluded[col] for col in row if col not in conflict_cols},
        )
        try:
            with self.db.begin_nested():
                self.db.execute(stmt)
        except SQLAlchemyError as exc:
            log.error(f"Upsert into {model.__tablename__} failed for key={key}: {exc}")
            return False
        return True

    def delete_older_than(self, model: Type[Base], column: str, cutoff: datetime) -> Optional[int]:
        """Delete rows whose ``column`` is before ``cutoff``; ``None`` on failure."""
        stmt = delete(model).where(getattr(model, column) < cutoff)
        try:
            with self.db.begin_nested():
                result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            log.error(f"Retention delete on {model.__tablename__}.{column} failed: {exc}")
            return None
        return result.rowcount or 0
