"""Storm sources: NHC active tropical cyclones and the SPC day-1 outlook."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.classify import (
    OutlookRisk,
    cyclone_category_from_wind,
    outlook_hazard_type,
    outlook_risk,
)
from situation_sync.schemas.records import ConvectiveOutlook, TropicalCyclone
from situation_sync.schemas.upstream import NHCResponse, NHCStorm, SPCFeature

log = get_logger("ingestion.storms")

NHC_URL = "https://www.nhc.noaa.gov/CurrentStorms.json"
SPC_DAY1_URL = "https://www.spc.noaa.gov/products/outlook/day1otlk_cat.nolyr.geojson"

CLASSIFICATION_MAP: Dict[str, str] = {
    "TD": "TD",
    "TS": "TS",
    "HU": "HU",
    "MH": "MH",
    "TY": "TY",
    "STY": "STY",
    "TC": "TC",
    "SD": "TD",  # subtropical depression
    "SS": "TS",  # subtropical storm
    "PTC": "TD",  # potential tropical cyclone
    "PC": "TD",  # post-tropical
}

BASINS = ("AL", "EP", "CP", "WP", "IO", "SH", "SP", "SI")

_HEMISPHERE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([NSEW])?\s*$", re.IGNORECASE)


def parse_coordinate(value: Any) -> Optional[float]:
    """NHC coordinates come as numbers or strings like '25.1N' / '80.3W'."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _HEMISPHERE.match(str(value))
    if not match:
        return None
    number = float(match.group(1))
    if (match.group(2) or "").upper() in ("S", "W"):
        number = -abs(number)
    return number


class NHCCycloneFetcher(BaseFetcher[List[TropicalCyclone]]):
    name = "nhc"

    async def _fetch(self) -> List[TropicalCyclone]:
        body = await self.get_json(NHC_URL, headers={"Accept": "application/json"})
        if not isinstance(body, dict):
            return []

        response = NHCResponse.model_validate(body)
        if not response.active_storms:
            log.info("No active storms in NHC response")
            return []

        cyclones: List[TropicalCyclone] = []
        for storm in self.validate_items(NHCStorm, response.active_storms):
            cyclone = self._to_cyclone(storm)
            if cyclone:
                cyclones.append(cyclone)

        log.info(f"Processed {len(cyclones)} active tropical cyclones")
        return cyclones

    def _to_cyclone(self, storm: NHCStorm) -> Optional[TropicalCyclone]:
        lat = storm.latitude_numeric if storm.latitude_numeric is not None else parse_coordinate(storm.latitude)
        lon = storm.longitude_numeric if storm.longitude_numeric is not None else parse_coordinate(storm.longitude)
        if lat is None or lon is None:
            log.debug(f"nhc: storm {storm.id or storm.bin_number} has no usable position")
            return None

        basin_code = (storm.bin_number or "")[:2].upper()
        basin = basin_code if basin_code in BASINS else "AL"

        wind = self._to_float(storm.intensity)
        if wind is None:
            log.debug(f"nhc: storm {storm.id or storm.bin_number} has no intensity")
            return None
        category = CLASSIFICATION_MAP.get((storm.classification or "").upper(), "TD")
        if category in ("HU", "MH"):
            category = cyclone_category_from_wind(wind)

        storm_id = storm.id or (f"nhc-{storm.bin_number}" if storm.bin_number else None)
        if not storm_id:
            return None

        return self.build(
            TropicalCyclone,
            storm_id=storm_id,
            name=storm.name or "Unnamed",
            basin=basin,
            category=category,
            max_wind=wind,
            pressure=self._to_float(storm.pressure),
            lat=lat,
            lon=lon,
            data={
                "movement": {
                    "direction": storm.movement_dir or 0,
                    "speed": storm.movement_speed or 0,
                },
                "timestamp": storm.last_update or datetime.now(timezone.utc).isoformat(),
                "source": "NHC",
                "advisory": storm.public_advisory.adv_num if storm.public_advisory else None,
            },
        )


class SPCOutlookFetcher(BaseFetcher[List[ConvectiveOutlook]]):
    """Day-1 categorical outlook polygons, highest risk first.

    One record per (outlook type, risk); repeated polygons keep the first.
    """

    name = "spc"

    async def _fetch(self) -> List[ConvectiveOutlook]:
        body = await self.get_json(SPC_DAY1_URL, headers={"Accept": "application/json"})
        if not isinstance(body, dict) or not isinstance(body.get("features"), list):
            log.info("No outlook features in SPC response")
            return []

        now = datetime.now(timezone.utc)
        outlooks: List[ConvectiveOutlook] = []
        for index, feature in enumerate(self.validate_items(SPCFeature, body["features"])):
            props = feature.properties
            label = props.label or props.label2 or "TSTM"
            risk = outlook_risk(label)
            outlook = self.build(
                ConvectiveOutlook,
                day=1,
                outlook_type=outlook_hazard_type(label, props.product_type),
                risk=risk,
                geometry=feature.geometry,
                valid_time=self._parse_spc_time(props.valid) or now,
                data={
                    "id": feature.id if feature.id is not None else f"spc-day1-{index}",
                    "expirationTime": props.expire or now.isoformat(),
                    "properties": {"label": label, "label2": props.label2, "stroke": props.stroke, "fill": props.fill},
                },
            )
            if outlook:
                outlooks.append(outlook)

        outlooks.sort(key=lambda o: OutlookRisk(o.risk).rank, reverse=True)
        unique: Dict[str, ConvectiveOutlook] = {}
        for outlook in outlooks:
            unique.setdefault(outlook.key, outlook)

        log.info(f"Processed {len(unique)} Day 1 outlooks")
        return list(unique.values())

    def _parse_spc_time(self, value: Optional[str]) -> Optional[datetime]:
        # SPC stamps look like 202401151200 (UTC)
        if value and re.fullmatch(r"\d{12}", value):
            try:
                return datetime.strptime(value, "%Y%m%d%H%M").replace(tzinfo=timezone.utc)
            except ValueError:
                log.debug(f"spc: unreadable VALID stamp {value!r}")
                return None
        return self._parse_timestamp(value)
