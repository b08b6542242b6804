"""Abstract fetcher interface for ingestion."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from situation_sync.core.http import client_scope, fetch_json
from situation_sync.core.logging import get_logger

log = get_logger("ingestion.base")

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


class BaseFetcher(ABC, Generic[T]):
    """Base class for upstream fetchers.

    Subclasses implement ``_fetch``. Callers only ever use ``fetch``, which never
    raises: any exception escaping ``_fetch`` is logged and replaced by
    ``fallback()`` (an empty list unless the source documents something else).
    """

    name: str
    timeout: float = 15.0

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client

    async def fetch(self) -> T:
        try:
            return await self._fetch()
        except Exception as exc:  # noqa: BLE001
            log.warning(f"{self.name}: fetch failed, using fallback: {exc!r}")
            return self.fallback()

    @abstractmethod
    async def _fetch(self) -> T:
        """Fetch and normalize records from the upstream."""

    def fallback(self) -> T:
        return []  # type: ignore[return-value]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def session(self) -> AbstractAsyncContextManager[httpx.AsyncClient]:
        """One client for a multi-call fetch (the injected one when present)."""
        return client_scope(self.client)

    async def get_json(self, url: str, *, client: Optional[httpx.AsyncClient] = None, **kwargs: Any) -> Any:
        kwargs.setdefault("timeout", self.timeout)
        return await fetch_json(url, client=client or self.client, source=self.name, **kwargs)

    def validate_items(self, model: Type[M], items: Iterable[Any]) -> List[M]:
        """Validate upstream items one by one, dropping the malformed ones."""
        valid: List[M] = []
        for item in items:
            try:
                valid.append(model.model_validate(item))
            except ValidationError as exc:
                log.debug(f"{self.name}: dropping malformed {model.__name__}: {exc.error_count()} error(s)")
        return valid

    def build(self, record_cls: Type[M], **fields: Any) -> Optional[M]:
        """Construct a normalized record, or ``None`` when it fails validation."""
        try:
            return record_cls(**fields)
        except ValidationError as exc:
            log.debug(f"{self.name}: dropping invalid {record_cls.__name__}: {exc.errors()[0]['msg']}")
            return None

    @staticmethod
    def _to_float(value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        if not value:
            return None
        try:
            if isinstance(value, datetime):
                parsed = value
            elif isinstance(value, (int, float)):
                # Epoch seconds, or milliseconds when implausibly large
                seconds = value / 1000 if value > 1e11 else value
                parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
            elif isinstance(value, str):
                text = value.strip()
                try:
                    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
                except ValueError:
                    # GDELT compact form: 20240115T123000Z
                    parsed = datetime.strptime(text, "%Y%m%dT%H%M%SZ")
            else:
                return None
        except Exception:  # noqa: BLE001
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
