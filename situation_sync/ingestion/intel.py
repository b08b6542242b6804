"""Intel sources: Polymarket, Whale Alert and VIEWS conflict forecasts."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.classify import (
    Intensity,
    conflict_intensity,
    conflict_label,
    conflict_risk_description,
)
from situation_sync.reference.geography import CONFLICT_PAIRS, ISO3_CENTROIDS, Centroid, ConflictPair
from situation_sync.schemas.records import (
    ConflictArc,
    ConflictForecast,
    ConflictHotspot,
    PolymarketPrediction,
    WhaleTransaction,
)
from situation_sync.schemas.upstream import (
    PolymarketMarket,
    PolymarketResponse,
    VIEWSPrediction,
    VIEWSResponse,
    WhaleAlertResponse,
    WhaleAlertTransaction,
)

log = get_logger("ingestion.intel")

POLYMARKET_URL = "https://clob.polymarket.com/markets"
WHALE_ALERT_URL = "https://api.whale-alert.io/v1/transactions"
VIEWS_BASE = "https://api.viewsforecasting.org"
VIEWS_FALLBACK_RUN = "fatalities003_2025_11_t01"

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# =============================================================================
# Polymarket
# =============================================================================
class PolymarketFetcher(BaseFetcher[List[PolymarketPrediction]]):
    name = "polymarket"

    min_volume = 1000.0
    top_n = 20

    async def _fetch(self) -> List[PolymarketPrediction]:
        params = {"active": "true", "closed": "false", "order": "volume", "ascending": "false", "limit": 50}
        body = await self.get_json(POLYMARKET_URL, params=params, headers={"Accept": "application/json"})
        if not isinstance(body, dict):
            return []

        response = PolymarketResponse.model_validate(body)
        predictions: List[PolymarketPrediction] = []
        for market in self.validate_items(PolymarketMarket, response.data):
            volume = self._to_float(market.volume) or 0.0
            if volume < self.min_volume:
                continue
            prediction = self.build(
                PolymarketPrediction,
                external_id=market.id,
                title=market.question,
                category=market.category or "general",
                probability=self._first_outcome_price(market.outcome_prices),
                volume=volume,
                data={"slug": market.slug, "endDate": market.end_date},
            )
            if prediction:
                predictions.append(prediction)

        predictions.sort(key=lambda p: p.volume, reverse=True)
        log.info(f"Processed {len(predictions)} Polymarket predictions")
        return predictions[: self.top_n]

    def _first_outcome_price(self, raw: Any) -> float:
        """Probability of the first outcome; 0.5 when prices are missing or unreadable."""
        prices = raw
        if isinstance(raw, str):
            try:
                prices = json.loads(raw or "[]")
            except ValueError:
                return 0.5
        if not isinstance(prices, list) or not prices:
            return 0.5
        return self._to_float(prices[0]) or 0.5


# =============================================================================
# Whale Alert
# =============================================================================
class WhaleAlertFetcher(BaseFetcher[List[WhaleTransaction]]):
    """Transfers of at least $1M in the last hour."""

    name = "whale-alert"

    min_value = 1_000_000
    top_n = 20

    def __init__(self, client: Optional[httpx.AsyncClient] = None, api_key: Optional[str] = None):
        super().__init__(client)
        self.api_key = api_key if api_key is not None else settings.WHALE_ALERT_API_KEY

    async def _fetch(self) -> List[WhaleTransaction]:
        if not self.api_key:
            log.warning("Whale Alert API key not configured")
            return []

        start = int(time.time()) - 3600
        params = {"api_key": self.api_key, "min_value": self.min_value, "start": start}
        body = await self.get_json(WHALE_ALERT_URL, params=params)
        if not isinstance(body, dict):
            return []

        response = WhaleAlertResponse.model_validate(body)
        transactions: List[WhaleTransaction] = []
        for tx in self.validate_items(WhaleAlertTransaction, response.transactions):
            record = self.build(
                WhaleTransaction,
                tx_hash=tx.hash,
                blockchain=tx.blockchain,
                token=tx.symbol.upper(),
                amount=tx.amount,
                usd_value=tx.amount_usd,
                from_owner=tx.sender.owner or "unknown",
                to_owner=tx.receiver.owner or "unknown",
                timestamp=datetime.fromtimestamp(tx.timestamp, tz=timezone.utc),
                data={"whale_alert_id": tx.id, "from_address": tx.sender.address, "to_address": tx.receiver.address},
            )
            if record:
                transactions.append(record)

        transactions.sort(key=lambda t: t.usd_value, reverse=True)
        log.info(f"Processed {len(transactions)} whale transactions")
        return transactions[: self.top_n]


# =============================================================================
# VIEWS conflict forecasts
# =============================================================================
def forecast_month(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year}"


class VIEWSConflictFetcher(BaseFetcher[ConflictForecast]):
    """Country-month fatality forecasts for the first forecast month.

    Hotspots are placed on static ISO3 centroids; arcs join the configured
    country pairs when at least one side is forecast above ``low``.
    """

    name = "views"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        centroids: Mapping[str, Centroid] = ISO3_CENTROIDS,
        pairs: Sequence[ConflictPair] = CONFLICT_PAIRS,
    ):
        super().__init__(client)
        self.centroids = centroids
        self.pairs = pairs

    def fallback(self) -> ConflictForecast:
        return ConflictForecast(run_id="error")

    async def _fetch(self) -> ConflictForecast:
        async with self.session() as http:
            run_id = await self._latest_run(http)
            body = await self.get_json(
                f"{VIEWS_BASE}/{run_id}/cm/sb",
                client=http,
                params={"pagesize": 250},
                headers={"Accept": "application/json"},
            )
        if not isinstance(body, dict):
            return self.fallback()

        response = VIEWSResponse.model_validate(body)
        predictions = [
            p for p in self.validate_items(VIEWSPrediction, response.data) if p.month_id == response.start_date
        ]
        log.info(f"VIEWS run {run_id}: {len(predictions)} country predictions for first month")

        hotspots = self._hotspots(predictions)
        arcs = self._arcs(hotspots)
        forecast = ConflictForecast(
            hotspots=[self._with_context(h, arcs, run_id) for h in hotspots],
            arcs=arcs,
            run_id=run_id,
        )
        log.info(f"Processed {len(forecast.hotspots)} hotspots and {len(arcs)} arcs")
        return forecast

    async def _latest_run(self, http: httpx.AsyncClient) -> str:
        body = await self.get_json(
            f"{VIEWS_BASE}/",
            client=http,
            headers={"Accept": "application/json"},
            timeout=5.0,
            max_retries=0,
        )
        runs = body.get("runs", []) if isinstance(body, dict) else []
        fatality_runs = sorted((r for r in runs if isinstance(r, str) and r.startswith("fatalities")), reverse=True)
        return fatality_runs[0] if fatality_runs else VIEWS_FALLBACK_RUN

    def _hotspots(self, predictions: List[VIEWSPrediction]) -> List[ConflictHotspot]:
        hotspots: List[ConflictHotspot] = []
        for p in predictions:
            fatalities = self._to_float(p.main_mean)
            probability = self._to_float(p.main_dich)
            if fatalities is None or probability is None:
                continue
            if fatalities < 0.1 and probability < 0.01:
                continue
            centroid = self.centroids.get(p.isoab)
            if centroid is None:
                continue

            intensity = conflict_intensity(fatalities, probability)
            rounded = round(fatalities, 1)
            hotspot = self.build(
                ConflictHotspot,
                external_id=f"views-{p.country_id}",
                name=p.name,
                country=p.name,
                iso_code=p.isoab,
                intensity=intensity,
                fatalities=rounded,
                probability=probability,
                lat=centroid.lat,
                lon=centroid.lon,
                data={
                    "fatalityProbability": round(probability * 1000) / 10,
                    "forecastMonth": forecast_month(p.year, p.month),
                    "forecastYear": p.year,
                    "label": conflict_label(p.name, intensity),
                    "riskDescription": conflict_risk_description(intensity, rounded, probability),
                    "reasoning": "VIEWS prediction based on historical conflict patterns and machine learning models.",
                    "dataSource": "VIEWS (Violence Early-Warning System) - Uppsala University",
                },
            )
            if hotspot:
                hotspots.append(hotspot)

        hotspots.sort(key=lambda h: h.fatalities, reverse=True)
        return hotspots

    def _arcs(self, hotspots: List[ConflictHotspot]) -> List[ConflictArc]:
        by_iso: Dict[str, Intensity] = {h.iso_code: Intensity(h.intensity) for h in hotspots}
        arcs: List[ConflictArc] = []
        for pair in self.pairs:
            source, target = self.centroids.get(pair.source), self.centroids.get(pair.target)
            if source is None or target is None:
                continue
            a, b = by_iso.get(pair.source), by_iso.get(pair.target)
            if a is None and b is None:
                continue
            a, b = a or Intensity.LOW, b or Intensity.LOW
            if a is Intensity.LOW and b is Intensity.LOW:
                continue
            arcs.append(
                ConflictArc(
                    id=f"views-arc-{pair.source}-{pair.target}",
                    source=pair.source,
                    target=pair.target,
                    source_name=source.name,
                    target_name=target.name,
                    intensity=a if a.rank >= b.rank else b,
                    description=pair.description,
                )
            )
        return arcs

    @staticmethod
    def _with_context(hotspot: ConflictHotspot, arcs: List[ConflictArc], run_id: str) -> ConflictHotspot:
        involved = [arc.model_dump() for arc in arcs if hotspot.iso_code in (arc.source, arc.target)]
        data = {**hotspot.data, "arcs": involved, "forecastRun": run_id}
        return hotspot.model_copy(update={"data": data})
