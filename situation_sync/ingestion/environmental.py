"""Environmental sources: Safecast radiation and ReliefWeb epidemics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import httpx

from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.classify import (
    OutbreakStatus,
    Severity,
    outbreak_severity,
    outbreak_status,
    radiation_level,
    to_cpm,
)
from situation_sync.ingestion.geocode import CountryGeocoder
from situation_sync.schemas.records import DiseaseOutbreak, RadiationReading
from situation_sync.schemas.upstream import ReliefWebDisaster, ReliefWebResponse, SafecastMeasurement

log = get_logger("ingestion.environmental")

SAFECAST_URL = "https://api.safecast.org/measurements.json"
RELIEFWEB_URL = "https://api.reliefweb.int/v1/disasters"
RELIEFWEB_APPNAME = "situation-monitor-edge"

SUPPORTED_UNITS = ("cpm", "usv")
MIN_CAPTURE_YEAR = 2020


# -----------------------------------------------------------------------------
# Radiation
# -----------------------------------------------------------------------------
def bucket_key(lat: float, lon: float) -> str:
    """~1 km bucket shared by readings that round to the same 2-decimal point."""
    return f"safecast-{lat:.2f}_{lon:.2f}"


class SafecastRadiationFetcher(BaseFetcher[List[RadiationReading]]):
    """Recent Safecast measurements, one reading per location bucket.

    Readings in the same bucket are collapsed to the highest cpm-equivalent value.
    """

    name = "safecast"
    timeout = 20.0

    def __init__(self, client: Optional[httpx.AsyncClient] = None, lookback_days: int = 14):
        super().__init__(client)
        self.lookback_days = lookback_days

    async def _fetch(self) -> List[RadiationReading]:
        since = (datetime.now(timezone.utc) - timedelta(days=self.lookback_days)).date().isoformat()
        body = await self.get_json(
            SAFECAST_URL,
            params={"since": since, "limit": 2000},
            headers={"Accept": "application/json"},
        )
        if not isinstance(body, list):
            if body is not None:
                log.warning("safecast: expected a list of measurements")
            return []

        buckets: Dict[str, RadiationReading] = {}
        for item in self.validate_items(SafecastMeasurement, body):
            reading = self._to_reading(item)
            if reading is None:
                continue
            current = buckets.get(reading.station_id)
            if current is None or reading.cpm > current.cpm:
                buckets[reading.station_id] = reading

        readings = sorted(buckets.values(), key=lambda r: r.cpm, reverse=True)
        log.info(f"Processed {len(readings)} unique radiation readings from {len(body)} measurements")
        return readings

    def _to_reading(self, item: SafecastMeasurement) -> Optional[RadiationReading]:
        unit = (item.unit or "").lower()
        if unit not in SUPPORTED_UNITS:
            return None
        value = self._to_float(item.value)
        if not value:
            return None
        captured = self._parse_timestamp(item.captured_at)
        if captured is None or captured.year < MIN_CAPTURE_YEAR:
            return None
        lat, lon = self._to_float(item.latitude), self._to_float(item.longitude)
        if lat is None or lon is None:
            return None

        return self.build(
            RadiationReading,
            station_id=bucket_key(lat, lon),
            location=item.location_name or None,
            lat=lat,
            lon=lon,
            value=value,
            unit=unit,
            cpm=to_cpm(value, unit),
            level=radiation_level(value, unit),
            measured_at=captured,
            data={
                "original_id": f"safecast-{item.id}",
                "device_id": f"Device {item.device_id}" if item.device_id else None,
                "captured_at": item.captured_at,
            },
        )


# -----------------------------------------------------------------------------
# Disease outbreaks
# -----------------------------------------------------------------------------
def _fallback_outbreak(
    external_id: str,
    disease: str,
    country: str,
    lat: float,
    lon: float,
    status: OutbreakStatus,
    severity: Severity,
    cases: int,
    deaths: int,
    start: str,
    updated: str,
    source: str,
    url: str,
) -> DiseaseOutbreak:
    return DiseaseOutbreak(
        external_id=external_id,
        disease=disease,
        country=country,
        lat=lat,
        lon=lon,
        cases=cases,
        deaths=deaths,
        status=status,
        severity=severity,
        reported_at=datetime.fromisoformat(start).replace(tzinfo=timezone.utc),
        data={"start_date": start, "last_update": updated, "source": source, "url": url, "is_fallback": True},
    )


FALLBACK_OUTBREAKS = (
    _fallback_outbreak(
        "fallback-mpox-drc", "Mpox (Clade I)", "DR Congo", -4.04, 21.76,
        OutbreakStatus.ACTIVE, Severity.CRITICAL, 90713, 1633, "2023-01-01", "2025-03-26",
        "WHO (fallback data)", "https://www.who.int/emergencies/situations/mpox-outbreak",
    ),
    _fallback_outbreak(
        "fallback-cholera-haiti", "Cholera", "Haiti", 18.97, -72.29,
        OutbreakStatus.ACTIVE, Severity.HIGH, 82885, 1270, "2022-10-01", "2024-04-11",
        "PAHO (fallback data)", "https://www.paho.org/en/cholera-outbreak-haiti-2022-situation-report",
    ),
    _fallback_outbreak(
        "fallback-marburg-tanzania", "Marburg Virus", "Tanzania", -2.5, 32.9,
        OutbreakStatus.CONTAINED, Severity.CRITICAL, 10, 10, "2024-12-09", "2025-03-13",
        "WHO AFRO (fallback data)", "https://www.who.int/emergencies/disease-outbreak-news/item/2025-DON559",
    ),
)


def disease_name(title: str) -> str:
    """'Cholera Outbreak - Jan 2025' -> 'Cholera Outbreak'."""
    head = title.split(" - ")[0] or title.split(":")[0] or title
    return head.strip()


class ReliefWebOutbreakFetcher(BaseFetcher[List[DiseaseOutbreak]]):
    """Epidemic disasters from ReliefWeb.

    Falls back to a small fixed dataset when the API is down or yields nothing
    usable, so the outbreak panel is never empty.
    """

    name = "reliefweb"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, geocoder: Optional[CountryGeocoder] = None):
        super().__init__(client)
        self.geocoder = geocoder or CountryGeocoder()

    def fallback(self) -> List[DiseaseOutbreak]:
        return list(FALLBACK_OUTBREAKS)

    async def _fetch(self) -> List[DiseaseOutbreak]:
        payload = {
            "appname": RELIEFWEB_APPNAME,
            "filter": {"field": "type", "value": "Epidemic"},
            "limit": 50,
            "fields": {"include": ["name", "description", "date", "country", "url", "status"]},
            "sort": ["date:desc"],
        }
        body = await self.get_json(
            RELIEFWEB_URL,
            method="POST",
            json=payload,
            headers={"Accept": "application/json"},
        )
        if body is None:
            log.warning("reliefweb: API unavailable, using fallback outbreaks")
            return self.fallback()

        response = ReliefWebResponse.model_validate(body)
        now = datetime.now(timezone.utc)
        outbreaks: List[DiseaseOutbreak] = []
        for disaster in self.validate_items(ReliefWebDisaster, response.data):
            outbreak = self._to_outbreak(disaster, now)
            if outbreak:
                outbreaks.append(outbreak)

        if not outbreaks:
            log.warning("reliefweb: no usable outbreaks, using fallback")
            return self.fallback()

        log.info(f"Processed {len(outbreaks)} disease outbreaks from ReliefWeb")
        return outbreaks

    def _to_outbreak(self, disaster: ReliefWebDisaster, now: datetime) -> Optional[DiseaseOutbreak]:
        fields = disaster.fields
        disease = disease_name(fields.name)
        country = fields.country[0].name if fields.country else "Unknown"
        coords = self.geocoder.resolve(country)
        if coords is None:
            log.debug(f"reliefweb: cannot geocode {country!r}; dropping {disaster.id}")
            return None

        last_update = self._parse_timestamp(fields.date.get("created")) or now
        url = fields.url if fields.url and "http" in fields.url else f"https://reliefweb.int/disaster/{disaster.id}"

        return self.build(
            DiseaseOutbreak,
            external_id=f"reliefweb-{disaster.id}",
            disease=disease,
            country=country,
            lat=coords[0],
            lon=coords[1],
            status=outbreak_status(last_update, now),
            severity=outbreak_severity(disease=disease),
            reported_at=last_update,
            data={"source": "ReliefWeb", "url": url, "last_update": last_update.isoformat(), "title": fields.name},
        )
