"""Federal Reserve balance sheet (FRED series WALCL)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

import httpx

from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.schemas.records import FedBalanceSnapshot
from situation_sync.schemas.upstream import FREDObservation, FREDResponse

log = get_logger("ingestion.fed")

FRED_OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"
SERIES_ID = "WALCL"

# WALCL is reported in millions of dollars
UNIT_MULTIPLIER = 1_000_000
FALLBACK_TOTAL_ASSETS = 6.8e12
PLACEHOLDER_KEYS = frozenset({"DEMO_API_KEY"})


def fallback_snapshot(today: Optional[date] = None) -> FedBalanceSnapshot:
    today = today or datetime.now(timezone.utc).date()
    return FedBalanceSnapshot(
        date=today,
        total_assets=FALLBACK_TOTAL_ASSETS,
        change_weekly=0.0,
        change_percent=0.0,
        data={"is_fallback": True, "message": "FRED API unavailable - showing approximate value"},
    )


class FREDBalanceFetcher(BaseFetcher[FedBalanceSnapshot]):
    """Latest weekly total assets with the change against the prior week.

    Always yields a snapshot: the approximate fallback stands in when the key is
    missing or the series cannot be read.
    """

    name = "fred"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, api_key: Optional[str] = None):
        super().__init__(client)
        self.api_key = api_key if api_key is not None else settings.FRED_API_KEY

    def fallback(self) -> FedBalanceSnapshot:
        return fallback_snapshot()

    async def _fetch(self) -> FedBalanceSnapshot:
        if not self.api_key or self.api_key in PLACEHOLDER_KEYS:
            log.warning("No FRED API key configured; using fallback snapshot")
            return self.fallback()

        params = {
            "series_id": SERIES_ID,
            "api_key": self.api_key,
            "file_type": "json",
            "sort_order": "desc",
            "limit": 10,
        }
        body = await self.get_json(FRED_OBSERVATIONS_URL, params=params)
        if not isinstance(body, dict):
            return self.fallback()

        observations = self._numeric(FREDResponse.model_validate(body).observations)
        if len(observations) < 2:
            log.warning("fred: fewer than two usable observations; using fallback")
            return self.fallback()

        (latest, latest_value), (previous, previous_value) = observations[0], observations[1]
        total = latest_value * UNIT_MULTIPLIER
        prior = previous_value * UNIT_MULTIPLIER
        change = total - prior
        change_pct = change / prior * 100 if prior else 0.0

        snapshot = self.build(
            FedBalanceSnapshot,
            date=latest.date,
            total_assets=total,
            change_weekly=change,
            change_percent=change_pct,
            data={
                "series_id": SERIES_ID,
                "change_weekly": change,
                "change_percent": change_pct,
                "previous_date": previous.date,
                "previous_value": prior,
                "raw_value": latest_value,
            },
        )
        if snapshot is None:
            return self.fallback()
        log.info(f"Fed balance {snapshot.date}: {total / 1e12:.2f}T ({change_pct:+.2f}%)")
        return snapshot

    def _numeric(self, observations: List[FREDObservation]) -> List[Tuple[FREDObservation, float]]:
        # FRED marks missing weeks with "."
        usable = []
        for obs in observations:
            value = self._to_float(obs.value)
            if value is not None:
                usable.append((obs, value))
        return usable
