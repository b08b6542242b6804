"""Hazard sources: USGS earthquakes, WattTime grid carbon, IODA outages."""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

import httpx

from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.classify import (
    earthquake_severity,
    grid_stress_description,
    grid_stress_level,
    outage_severity,
)
from situation_sync.ingestion.geocode import CountryGeocoder, valid_coordinates
from situation_sync.reference.geography import GRID_REGIONS, GridRegion
from situation_sync.schemas.records import EarthquakeRecord, GridStressRecord, OutageRecord
from situation_sync.schemas.upstream import (
    FeatureCollection,
    IODAResponse,
    IODASignal,
    USGSFeature,
    WattTimeLogin,
    WattTimeRegion,
    WattTimeSignal,
)

log = get_logger("ingestion.hazards")

USGS_URL = "https://earthquake.usgs.gov/fdsnws/event/1/query"
WATTTIME_BASE = "https://api.watttime.org"
IODA_URL = "https://api.ioda.inetintel.cc.gatech.edu/v2/signals/raw/country"


class USGSEarthquakeFetcher(BaseFetcher[List[EarthquakeRecord]]):
    """Latest earthquakes at or above ``min_magnitude``."""

    name = "usgs"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, min_magnitude: float = 4.0):
        super().__init__(client)
        self.min_magnitude = min_magnitude

    async def _fetch(self) -> List[EarthquakeRecord]:
        params = {
            "format": "geojson",
            "minmagnitude": self.min_magnitude,
            "limit": 50,
            "orderby": "time",
        }
        body = await self.get_json(USGS_URL, params=params, headers={"Accept": "application/json"})
        if body is None:
            return []

        collection = FeatureCollection.model_validate(body)
        records: List[EarthquakeRecord] = []
        for feature in self.validate_items(USGSFeature, collection.features):
            props = feature.properties
            magnitude = self._to_float(props.mag)
            if magnitude is None or magnitude < self.min_magnitude:
                continue
            coords = feature.geometry.coordinates
            if len(coords) < 2:
                continue

            record = self.build(
                EarthquakeRecord,
                external_id=feature.id,
                magnitude=magnitude,
                place=props.place or "Unknown location",
                lat=coords[1],
                lon=coords[0],
                depth=coords[2] if len(coords) > 2 else None,
                severity=earthquake_severity(magnitude),
                timestamp=self._parse_timestamp(props.time),
                data={"url": props.url},
            )
            if record:
                records.append(record)

        log.info(f"Fetched {len(records)} earthquakes from USGS")
        return records


class WattTimeGridFetcher(BaseFetcher[List[GridStressRecord]]):
    """Marginal-emissions percentile per grid region.

    Requires WattTime credentials; without them the fetch is skipped.
    Regions are queried one after another with a single session token.
    """

    name = "watttime"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        regions: Sequence[GridRegion] = GRID_REGIONS,
    ):
        super().__init__(client)
        self.username = username if username is not None else settings.WATTTIME_USERNAME
        self.password = password if password is not None else settings.WATTTIME_PASSWORD
        self.regions = regions

    async def _fetch(self) -> List[GridStressRecord]:
        if not self.username or not self.password:
            log.warning("WattTime credentials not configured; skipping grid stress")
            return []

        async with self.session() as http:
            login = await self.get_json(
                f"{WATTTIME_BASE}/login",
                client=http,
                auth=(self.username, self.password),
                headers={"Accept": "application/json"},
                timeout=10.0,
            )
            token = WattTimeLogin.model_validate(login).token if isinstance(login, dict) and login.get("token") else None
            if not token:
                log.warning("WattTime login returned no token")
                return []

            headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
            records = []
            for region in self.regions:
                record = await self._fetch_region(http, region, headers)
                if record:
                    records.append(record)

        records.sort(key=lambda r: (-_stress_rank(r), -r.percentile))
        log.info(f"Fetched {len(records)} grid regions from WattTime")
        return records

    async def _fetch_region(
        self, http: httpx.AsyncClient, region: GridRegion, headers: dict
    ) -> Optional[GridStressRecord]:
        located = await self.get_json(
            f"{WATTTIME_BASE}/v3/region-from-loc",
            client=http,
            params={"latitude": region.lat, "longitude": region.lon, "signal_type": "co2_moer"},
            headers=headers,
            timeout=8.0,
        )
        if not isinstance(located, dict) or not located.get("region"):
            return None
        region_id = WattTimeRegion.model_validate(located).region

        body = await self.get_json(
            f"{WATTTIME_BASE}/v3/signal-index",
            client=http,
            params={"region": region_id, "signal_type": "co2_moer"},
            headers=headers,
            timeout=10.0,
        )
        if not isinstance(body, dict):
            return None
        signal = WattTimeSignal.model_validate(body)
        if not signal.data:
            return None

        point = signal.data[0]
        percent = self._to_float(point.value)
        if percent is None:
            log.debug(f"watttime: no signal value for {region.name}; dropping")
            return None
        level = grid_stress_level(percent)
        slug = re.sub(r"\s+", "-", region.name.lower())

        return self.build(
            GridStressRecord,
            external_id=f"watttime-{region.country_code}-{slug}",
            region=region.name,
            country=region.country,
            country_code=region.country_code,
            lat=region.lat,
            lon=region.lon,
            percentile=percent,
            status=level,
            description=grid_stress_description(level, percent),
            data={
                "moer": percent,
                "signal_type": signal.meta.get("signal_type", "co2_moer"),
                "timestamp": point.point_time or datetime.now(timezone.utc).isoformat(),
                "areaKm2": region.area_km2,
                "region_id": region_id,
            },
        )


def _stress_rank(record: GridStressRecord) -> int:
    order = ("normal", "elevated", "high", "critical")
    return order.index(record.status)


class IODAOutageFetcher(BaseFetcher[List[OutageRecord]]):
    """Country-level BGP visibility drops from IODA (Georgia Tech)."""

    name = "ioda"
    source_label = "IODA (Georgia Tech)"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        geocoder: Optional[CountryGeocoder] = None,
        now: Optional[float] = None,
    ):
        super().__init__(client)
        self.geocoder = geocoder or CountryGeocoder()
        self._now = now

    async def _fetch(self) -> List[OutageRecord]:
        until = int(self._now if self._now is not None else time.time())
        params = {"from": until - 86400, "until": until}
        body = await self.get_json(IODA_URL, params=params, headers={"Accept": "application/json"})
        if body is None:
            return []

        response = IODAResponse.model_validate(body)
        detected = datetime.now(timezone.utc)
        records: List[OutageRecord] = []
        for signal in self.validate_items(IODASignal, _flatten(response.data)):
            if signal.datasource != "bgp":
                continue
            ratio = self._to_float(signal.value)
            if ratio is None:
                continue
            severity = outage_severity(ratio)
            if severity is None:
                continue

            entity = signal.entity
            country = entity.name or entity.code
            coords = self._locate(entity.latitude, entity.longitude, country)
            if coords is None:
                log.debug(f"ioda: no coordinates for {country}; dropping")
                continue

            description = f"Internet connectivity at {round(ratio * 100)}% of normal"
            record = self.build(
                OutageRecord,
                external_id=f"ioda-{entity.code}-{signal.start}",
                location=country,
                country_code=entity.code,
                type="internet",
                severity=severity,
                lat=coords[0],
                lon=coords[1],
                description=description,
                source=self.source_label,
                detected_at=detected,
                data={"active": True, "ratio": ratio, "signal_start": signal.start},
            )
            if record:
                records.append(record)

        log.info(f"Processed {len(records)} outages from IODA")
        return records

    def _locate(self, lat: Any, lon: Any, country: str) -> Optional[tuple]:
        if lat is not None and lon is not None and valid_coordinates(lat, lon):
            return float(lat), float(lon)
        return self.geocoder.resolve(country)


def _flatten(entries: Iterable[Any]) -> Iterable[Any]:
    # The v2 API nests signals one list per entity
    for entry in entries:
        if isinstance(entry, list):
            yield from entry
        else:
            yield entry
