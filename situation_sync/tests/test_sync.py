"""Sync orchestrator tests on in-memory SQLite"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest
from loguru import logger
from sqlalchemy import func, select

from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.fed import FREDBalanceFetcher
from situation_sync.ingestion.hazards import IODAOutageFetcher, WattTimeGridFetcher
from situation_sync.models import Conflict, Earthquake, FedBalance, Layoff, Outage, SyncStatus, TropicalCyclone, WeatherAlert
from situation_sync.schemas.records import (
    ConflictForecast,
    ConflictHotspot,
    EarthquakeRecord,
    Layoff as LayoffRecord,
    NormalizedRecord,
    TropicalCyclone as CycloneRecord,
    WeatherAlert as AlertRecord,
)
from situation_sync.services.store import RecordStore
from situation_sync.services.sync_service import (
    JOBS,
    FedJob,
    HazardsJob,
    IntelJob,
    SlowJob,
    StormsJob,
    SyncReport,
    WeatherJob,
)
from situation_sync.sync_entrypoint import main as entrypoint_main


class StaticFetcher(BaseFetcher):
    """Returns a fixed payload."""

    def __init__(self, name, payload):
        super().__init__()
        self.name = name
        self.payload = payload

    async def _fetch(self):
        return self.payload


class DegradingFetcher(BaseFetcher):
    """Upstream fails inside _fetch; fetch() degrades to []."""

    name = "degrading"

    async def _fetch(self):
        raise ConnectionError("upstream down")


class ExplodingFetcher(BaseFetcher):
    """A broken fetcher whose fetch() itself raises."""

    name = "exploding"

    async def fetch(self):
        raise RuntimeError("bug in fetcher")

    async def _fetch(self):
        return []


class QuakeWithoutPlace(NormalizedRecord):
    """Violates earthquakes.place NOT NULL when stored."""

    external_id: str
    magnitude: float
    lat: float
    lon: float
    severity: str
    timestamp: datetime


def now() -> datetime:
    return datetime.now(timezone.utc)


def quake(external_id: str, magnitude: float = 5.5, age: timedelta = timedelta(hours=1), place: str = "Somewhere"):
    return EarthquakeRecord(
        external_id=external_id,
        magnitude=magnitude,
        place=place,
        lat=10.0,
        lon=20.0,
        depth=5.0,
        severity="moderate",
        timestamp=now() - age,
        data={"url": f"https://usgs.test/{external_id}"},
    )


def cyclone(storm_id: str) -> CycloneRecord:
    return CycloneRecord(storm_id=storm_id, name=storm_id, basin="AL", category="TS", max_wind=50, lat=25.0, lon=-80.0)


def alert(external_id: str, expires: Optional[datetime]) -> AlertRecord:
    return AlertRecord(
        external_id=external_id,
        event="Flood Warning",
        severity="Severe",
        urgency="Immediate",
        certainty="Likely",
        area_desc="Somewhere County",
        expires=expires,
    )


def count(db, model) -> int:
    return db.scalar(select(func.count()).select_from(model))


class TestRecordStore:
    """Row-level upserts and deletes"""

    def test_failed_row_does_not_undo_earlier_rows(self, db):
        store = RecordStore(db)
        good = quake("good").to_row()
        bad = QuakeWithoutPlace(
            external_id="bad", magnitude=5.0, lat=1.0, lon=1.0, severity="moderate", timestamp=now()
        ).to_row()

        assert store.upsert(Earthquake, good, ("external_id",), key="good") is True
        assert store.upsert(Earthquake, bad, ("external_id",), key="bad") is False
        db.commit()

        assert db.scalars(select(Earthquake.external_id)).all() == ["good"]

    def test_delete_older_than_returns_count(self, db):
        store = RecordStore(db)
        store.upsert(Earthquake, quake("old", age=timedelta(days=10)).to_row(), ("external_id",))
        store.upsert(Earthquake, quake("new").to_row(), ("external_id",))

        assert store.delete_older_than(Earthquake, "timestamp", now() - timedelta(days=7)) == 1
        assert count(db, Earthquake) == 1


class TestSyncJob:
    """Fetch, upsert, retention and report"""

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, db):
        sources = {"earthquakes": StaticFetcher("usgs", [quake("a"), quake("b")])}

        first = await HazardsJob(db, sources=sources).run()
        rows_after_first = db.execute(select(Earthquake.external_id, Earthquake.data).order_by(Earthquake.external_id)).all()
        second = await HazardsJob(db, sources=sources).run()
        rows_after_second = db.execute(select(Earthquake.external_id, Earthquake.data).order_by(Earthquake.external_id)).all()

        assert first.success and second.success
        assert first.upserted == second.upserted == 2
        assert count(db, Earthquake) == 2
        assert rows_after_first == rows_after_second

    @pytest.mark.asyncio
    async def test_upsert_overwrites_existing_row(self, db):
        await HazardsJob(db, sources={"earthquakes": StaticFetcher("usgs", [quake("a", magnitude=5.0)])}).run()
        await HazardsJob(db, sources={"earthquakes": StaticFetcher("usgs", [quake("a", magnitude=6.1, place="Updated")])}).run()

        assert db.execute(select(Earthquake.magnitude, Earthquake.place)).all() == [(6.1, "Updated")]

    @pytest.mark.asyncio
    async def test_retention_removes_expired_rows(self, db):
        sources = {"earthquakes": StaticFetcher("usgs", [quake("recent"), quake("stale", age=timedelta(days=8))])}

        report = await HazardsJob(db, sources=sources).run()

        assert report.success
        assert report.upserted == 2
        assert report.deleted["earthquakes"] == 1
        assert db.scalars(select(Earthquake.external_id)).all() == ["recent"]

    @pytest.mark.asyncio
    async def test_date_column_retention(self, db):
        today = now().date()
        layoffs = [
            LayoffRecord(external_id="fresh", company="A", count=10, title="A cuts", announced_at=today),
            LayoffRecord(external_id="old", company="B", count=10, title="B cuts", announced_at=today - timedelta(days=90)),
        ]

        report = await SlowJob(db, sources={"layoffs": StaticFetcher("hn", layoffs)}).run()

        assert report.success
        assert db.scalars(select(Layoff.external_id)).all() == ["fresh"]

    @pytest.mark.asyncio
    async def test_one_raising_fetcher_does_not_block_others(self, db):
        sources = {
            "earthquakes": StaticFetcher("usgs", [quake("a"), quake("b")]),
            "outages": ExplodingFetcher(),
            "grid_stress": DegradingFetcher(),
        }

        report = await HazardsJob(db, sources=sources).run()

        assert report.upserted == 2
        assert report.errors == 1
        assert report.success is False
        assert report.sources == {"earthquakes": 2, "outages": 0, "grid_stress": 0}
        assert count(db, Earthquake) == 2

    @pytest.mark.asyncio
    async def test_degraded_source_is_not_an_error(self, db):
        sources = {"earthquakes": StaticFetcher("usgs", [quake("a")]), "grid_stress": DegradingFetcher()}

        report = await HazardsJob(db, sources=sources).run()

        assert report.success is True
        assert report.errors == 0

    @pytest.mark.asyncio
    async def test_missing_watttime_credentials_still_succeeds(self, db):
        grid = WattTimeGridFetcher(username="", password="")

        report = await HazardsJob(db, sources={"grid_stress": grid}).run()

        assert report.success is True
        assert report.upserted == 0
        assert report.sources == {"grid_stress": 0}

    @pytest.mark.asyncio
    async def test_upsert_failure_flips_success(self, db):
        bad = QuakeWithoutPlace(external_id="bad", magnitude=5.0, lat=1.0, lon=1.0, severity="moderate", timestamp=now())
        sources = {"earthquakes": StaticFetcher("usgs", [quake("good"), bad])}

        report = await HazardsJob(db, sources=sources).run()

        assert report.upserted == 1
        assert report.errors == 1
        assert report.success is False
        assert report.error is None
        assert db.scalars(select(Earthquake.external_id)).all() == ["good"]

    @pytest.mark.asyncio
    async def test_unexpected_error_rolls_back(self, db):
        sources = {
            "earthquakes": StaticFetcher("usgs", [quake("a")]),
            "mystery": StaticFetcher("mystery", [quake("b")]),
        }

        report = await HazardsJob(db, sources=sources).run()

        assert report.success is False
        assert "mystery" in report.error
        assert count(db, Earthquake) == 0
        assert db.get(SyncStatus, "sync-hazards").success is False

    @pytest.mark.asyncio
    async def test_outages_survive_their_own_run(self, db, mock_client):
        def echo_window(request):
            start = int(request.url.params["from"])
            signal = {"entity": {"code": "CD", "name": "Democratic Republic of the Congo"}, "datasource": "bgp", "value": 0.3, "from": start}
            return httpx.Response(200, json={"data": [[signal]]})

        report = await HazardsJob(db, sources={"outages": IODAOutageFetcher(mock_client(echo_window))}).run()

        assert report.success
        assert report.deleted["outages"] == 0
        stored = db.scalars(select(Outage)).all()
        assert len(stored) == 1
        assert stored[0].data["signal_start"] == int(stored[0].external_id.rsplit("-", 1)[1])

    @pytest.mark.asyncio
    async def test_source_warnings_tagged_with_job(self, db):
        seen = []
        sink_id = logger.add(lambda message: seen.append(message.record["extra"].get("job")), level="WARNING")
        try:
            await HazardsJob(db, sources={"grid_stress": DegradingFetcher()}).run()
        finally:
            logger.remove(sink_id)

        assert seen
        assert set(seen) == {"sync-hazards"}


class TestLedger:
    """One overwritten status row per job"""

    @pytest.mark.asyncio
    async def test_counters_accumulate(self, db):
        sources = {"earthquakes": StaticFetcher("usgs", [quake("a")])}
        await HazardsJob(db, sources=sources).run()
        await HazardsJob(db, sources=sources).run()

        status = db.get(SyncStatus, "sync-hazards")
        assert count(db, SyncStatus) == 1
        assert status.success is True
        assert status.run_count == 2
        assert status.error_count == 0
        assert status.last_error is None
        assert status.last_success is not None

        bad = QuakeWithoutPlace(external_id="bad", magnitude=5.0, lat=1.0, lon=1.0, severity="moderate", timestamp=now())
        await HazardsJob(db, sources={"earthquakes": StaticFetcher("usgs", [bad])}).run()

        status = db.get(SyncStatus, "sync-hazards")
        assert status.success is False
        assert status.run_count == 3
        assert status.error_count == 1
        assert status.last_error == "1 operation(s) failed"
        assert status.last_success is not None


class TestDomainJobs:
    """Job-specific retention and counters"""

    @pytest.mark.asyncio
    async def test_storms_replace_rows_not_refreshed(self, db):
        await StormsJob(db, sources={"cyclones": StaticFetcher("nhc", [cyclone("A"), cyclone("B")])}).run()
        report = await StormsJob(db, sources={"cyclones": StaticFetcher("nhc", [cyclone("A")])}).run()

        assert report.counters["active_cyclones"] == 1
        assert db.scalars(select(TropicalCyclone.storm_id)).all() == ["A"]

        # an empty fetch keeps recent rows until they age out
        await StormsJob(db, sources={"cyclones": StaticFetcher("nhc", [])}).run()
        assert db.scalars(select(TropicalCyclone.storm_id)).all() == ["A"]

    @pytest.mark.asyncio
    async def test_weather_prunes_expired_alerts(self, db):
        alerts = [
            alert("expired", now() - timedelta(hours=1)),
            alert("open-ended", None),
            alert("active", now() + timedelta(hours=1)),
        ]

        report = await WeatherJob(db, sources={"alerts": StaticFetcher("nws", alerts)}).run()

        assert report.counters["active_alerts"] == 3
        assert sorted(db.scalars(select(WeatherAlert.external_id)).all()) == ["active", "open-ended"]

    @pytest.mark.asyncio
    async def test_intel_stores_conflict_hotspots(self, db):
        hotspot = ConflictHotspot(
            external_id="views-1",
            name="Ukraine",
            country="Ukraine",
            iso_code="UKR",
            intensity="high",
            fatalities=30.0,
            probability=0.8,
            lat=48.38,
            lon=31.17,
        )
        forecast = ConflictForecast(hotspots=[hotspot], run_id="fatalities003_2026_09_t01")

        report = await IntelJob(db, sources={"conflicts": StaticFetcher("views", forecast)}).run()

        assert report.upserted == 1
        assert report.sources == {"conflicts": 1}
        assert db.scalars(select(Conflict.iso_code)).all() == ["UKR"]

    @pytest.mark.asyncio
    async def test_fed_fallback_snapshot_reported(self, db):
        report = await FedJob(db, sources={"balance": FREDBalanceFetcher(api_key="")}).run()
        await FedJob(db, sources={"balance": FREDBalanceFetcher(api_key="")}).run()

        body = report.to_dict()
        assert body["success"] is True
        assert body["total_assets"] == 6.8e12
        assert body["fed_date"] == now().date().isoformat()
        assert count(db, FedBalance) == 1


class TestReport:
    """Response body shape"""

    def test_to_dict(self):
        report = SyncReport(function="sync-weather", upserted=3, duration_ms=12, counters={"active_alerts": 3})
        report.sources["alerts"] = 3

        assert report.to_dict() == {
            "success": True,
            "function": "sync-weather",
            "upserted": 3,
            "errors": 0,
            "duration_ms": 12,
            "active_alerts": 3,
            "sources": {"alerts": 3},
            "deleted": {},
        }

    def test_error_marks_failure(self):
        report = SyncReport(function="sync-news", error="boom")
        assert report.success is False
        assert report.to_dict()["error"] == "boom"

    def test_job_registry(self):
        assert set(JOBS) == {
            "sync-markets",
            "sync-news",
            "sync-weather",
            "sync-hazards",
            "sync-storms",
            "sync-intel",
            "sync-environmental",
            "sync-slow",
            "sync-fed",
        }

    def test_entrypoint_rejects_unknown_job(self):
        assert entrypoint_main(["sync-nope"]) == 2

    def test_layoff_date_type(self):
        assert isinstance(LayoffRecord(external_id="x", company="A", count=1, title="t", announced_at="2026-01-02").announced_at, date)
