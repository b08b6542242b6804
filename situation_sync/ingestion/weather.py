"""NWS active weather alerts."""

from __future__ import annotations

from typing import List

from situation_sync.core.logging import get_logger
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.schemas.records import WeatherAlert
from situation_sync.schemas.upstream import FeatureCollection, NWSAlertFeature

log = get_logger("ingestion.weather")

NWS_ALERTS_URL = "https://api.weather.gov/alerts/active"


class NWSAlertFetcher(BaseFetcher[List[WeatherAlert]]):
    name = "nws"
    timeout = 30.0

    async def _fetch(self) -> List[WeatherAlert]:
        body = await self.get_json(NWS_ALERTS_URL, headers={"Accept": "application/geo+json"})
        if not isinstance(body, dict):
            return []

        collection = FeatureCollection.model_validate(body)
        if not collection.features:
            log.warning("No alert features in NWS response")
            return []

        alerts: List[WeatherAlert] = []
        for feature in self.validate_items(NWSAlertFeature, collection.features):
            props = feature.properties
            alert = self.build(
                WeatherAlert,
                external_id=props.id,
                event=props.event,
                severity=props.severity or "Unknown",
                urgency=props.urgency or "Unknown",
                certainty=props.certainty or "Unknown",
                area_desc=props.area_desc,
                headline=props.headline,
                description=props.description,
                instruction=props.instruction,
                onset=self._parse_timestamp(props.onset),
                expires=self._parse_timestamp(props.expires),
                geometry=feature.geometry,
                data={
                    "geocode": props.geocode,
                    "affectedZones": props.affected_zones,
                    "sent": props.sent,
                    "effective": props.effective,
                    "ends": props.ends,
                    "status": props.status,
                    "messageType": props.message_type,
                    "category": props.category,
                    "sender": props.sender,
                    "senderName": props.sender_name,
                    "response": props.response,
                    "parameters": props.parameters,
                },
            )
            if alert:
                alerts.append(alert)

        log.info(f"Fetched {len(alerts)} active alerts from NWS")
        return alerts
