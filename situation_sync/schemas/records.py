"""Normalized records produced by the fetchers.

Field names match the destination table columns, so a record dumps straight into
an upsert row. Constructing a record validates it: non-finite numbers and
out-of-range coordinates raise ``ValidationError`` and the fetcher drops the item.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from situation_sync.ingestion.classify import (
    Intensity,
    OutageSeverity,
    OutbreakStatus,
    OutlookRisk,
    RadiationLevel,
    Severity,
    StressLevel,
)


class NormalizedRecord(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False, use_enum_values=True, frozen=True)

    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def key(self) -> str:
        """Identifier used in logs and error reports."""
        return str(getattr(self, "external_id"))

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class GeoRecord(NormalizedRecord):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


# -----------------------------------------------------------------------------
# News & markets
# -----------------------------------------------------------------------------
class NewsItem(NormalizedRecord):
    external_id: str
    category: str
    title: str
    link: str
    source: str
    published_at: datetime
    summary: Optional[str] = None
    image_url: Optional[str] = None


class MarketDatum(NormalizedRecord):
    type: str  # crypto | index | sector | commodity
    symbol: str
    name: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None

    @property
    def key(self) -> str:
        return f"{self.type}:{self.symbol}"


# -----------------------------------------------------------------------------
# Hazards
# -----------------------------------------------------------------------------
class EarthquakeRecord(GeoRecord):
    external_id: str
    magnitude: float
    place: str
    depth: Optional[float] = None
    severity: Severity
    timestamp: datetime


class GridStressRecord(GeoRecord):
    external_id: str
    region: str
    country: str
    country_code: str
    percentile: float
    status: StressLevel
    description: str


class OutageRecord(GeoRecord):
    external_id: str
    location: str
    country_code: str
    type: str = "internet"
    severity: OutageSeverity
    description: str
    source: str
    detected_at: datetime


# -----------------------------------------------------------------------------
# Environmental
# -----------------------------------------------------------------------------
class RadiationReading(GeoRecord):
    station_id: str
    location: Optional[str] = None
    value: float
    unit: str
    cpm: float
    level: RadiationLevel
    measured_at: datetime

    @property
    def key(self) -> str:
        return self.station_id


class DiseaseOutbreak(GeoRecord):
    external_id: str
    disease: str
    country: str
    cases: Optional[int] = None
    deaths: Optional[int] = None
    status: OutbreakStatus
    severity: Severity
    reported_at: datetime


# -----------------------------------------------------------------------------
# Intel
# -----------------------------------------------------------------------------
class PolymarketPrediction(NormalizedRecord):
    external_id: str
    title: str
    category: str
    probability: float = Field(ge=0, le=1)
    volume: float


class WhaleTransaction(NormalizedRecord):
    tx_hash: str
    blockchain: str
    token: str
    amount: float
    usd_value: float
    from_owner: str
    to_owner: str
    timestamp: datetime

    @property
    def key(self) -> str:
        return self.tx_hash


class ConflictArc(BaseModel):
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    id: str
    source: str
    target: str
    source_name: str
    target_name: str
    intensity: Intensity
    description: str


class ConflictHotspot(GeoRecord):
    external_id: str
    name: str
    country: str
    iso_code: str
    intensity: Intensity
    fatalities: float
    probability: float


class ConflictForecast(BaseModel):
    """VIEWS output: hotspots plus the arcs linking paired countries."""

    hotspots: List[ConflictHotspot] = Field(default_factory=list)
    arcs: List[ConflictArc] = Field(default_factory=list)
    run_id: str = "error"

    def __len__(self) -> int:
        return len(self.hotspots)


# -----------------------------------------------------------------------------
# Storms & weather
# -----------------------------------------------------------------------------
class TropicalCyclone(GeoRecord):
    storm_id: str
    name: str
    basin: str
    category: str
    max_wind: float
    pressure: Optional[float] = None

    @property
    def key(self) -> str:
        return self.storm_id


class ConvectiveOutlook(NormalizedRecord):
    day: int = 1
    outlook_type: str
    risk: OutlookRisk
    geometry: Optional[Dict[str, Any]] = None
    valid_time: Optional[datetime] = None

    @property
    def key(self) -> str:
        return f"day{self.day}:{self.outlook_type}:{self.risk}"


class WeatherAlert(NormalizedRecord):
    external_id: str
    event: str
    severity: str
    urgency: str
    certainty: str
    area_desc: str
    headline: Optional[str] = None
    description: str = ""
    instruction: Optional[str] = None
    onset: Optional[datetime] = None
    expires: Optional[datetime] = None
    geometry: Optional[Dict[str, Any]] = None


# -----------------------------------------------------------------------------
# Slow-moving sources
# -----------------------------------------------------------------------------
class GovContract(NormalizedRecord):
    external_id: str
    recipient: str
    agency: str
    amount: float
    description: str
    award_date: date


class Layoff(NormalizedRecord):
    external_id: str
    company: str
    count: int
    title: str
    announced_at: date


class WorldLeader(NormalizedRecord):
    country: str
    leader_name: str
    title: str
    party: Optional[str] = None
    took_office: Optional[date] = None

    @property
    def key(self) -> str:
        return self.country


class FedBalanceSnapshot(NormalizedRecord):
    date: dt.date
    total_assets: float
    change_weekly: float = 0.0
    change_percent: float = 0.0

    @property
    def key(self) -> str:
        return self.date.isoformat()
