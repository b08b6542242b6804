"""Sync orchestrators: fetch every source of a domain, upsert, prune, report.

One run goes through the same steps for every job:

1. fetch all sources concurrently (settle-all; one failing source never
   cancels the others),
2. upsert each record by its natural key, counting failures without stopping,
3. delete rows that fell out of the job's retention window,
4. commit and overwrite the job's row in the sync-status ledger.

A run is successful when no upsert or retention delete failed and nothing
unexpected escaped. Sources that degrade to an empty or fallback result are not
errors.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sized
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

import httpx
from sqlalchemy import Date
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from situation_sync import models
from situation_sync.core.logging import get_logger, job_context
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.environmental import ReliefWebOutbreakFetcher, SafecastRadiationFetcher
from situation_sync.ingestion.fed import FREDBalanceFetcher
from situation_sync.ingestion.hazards import IODAOutageFetcher, USGSEarthquakeFetcher, WattTimeGridFetcher
from situation_sync.ingestion.intel import PolymarketFetcher, VIEWSConflictFetcher, WhaleAlertFetcher
from situation_sync.ingestion.markets import default_market_fetchers
from situation_sync.ingestion.news import default_news_fetchers
from situation_sync.ingestion.slow import HNLayoffFetcher, USASpendingContractFetcher, WorldLeaderFetcher
from situation_sync.ingestion.storms import NHCCycloneFetcher, SPCOutlookFetcher
from situation_sync.ingestion.weather import NWSAlertFetcher
from situation_sync.models.base import Base
from situation_sync.schemas.records import NormalizedRecord
from situation_sync.services.store import RecordStore

log = get_logger("sync_service")


@dataclass(frozen=True)
class Target:
    """Destination table of one source and the columns forming its natural key."""

    model: Type[Base]
    conflict_cols: Tuple[str, ...] = ("external_id",)


@dataclass(frozen=True)
class RetentionRule:
    """Rows whose ``column`` is older than ``max_age`` are deleted.

    ``max_age`` of zero deletes everything before the run started: rows with an
    expiry column in the past, or rows a run did not refresh.
    """

    model: Type[Base]
    column: str
    max_age: timedelta = timedelta(0)

    def cutoff(self, now: datetime) -> Any:
        cutoff = now - self.max_age
        if isinstance(getattr(self.model, self.column).type, Date):
            return cutoff.date()
        return cutoff


@dataclass
class SyncReport:
    function: str
    upserted: int = 0
    errors: int = 0
    duration_ms: int = 0
    sources: Dict[str, int] = field(default_factory=dict)
    deleted: Dict[str, int] = field(default_factory=dict)
    counters: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.errors == 0 and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": self.success,
            "function": self.function,
            "upserted": self.upserted,
            "errors": self.errors,
            "duration_ms": self.duration_ms,
            **self.counters,
            "sources": dict(self.sources),
            "deleted": dict(self.deleted),
        }
        if self.error is not None:
            body["error"] = self.error
        return body


class SyncJob:
    """Base orchestrator. Subclasses declare their sources, targets and retention."""

    name: str = ""
    targets: Mapping[str, Target] = {}
    default_target: Optional[Target] = None
    retention: Tuple[RetentionRule, ...] = ()

    def __init__(
        self,
        db: Session,
        client: Optional[httpx.AsyncClient] = None,
        sources: Optional[Mapping[str, BaseFetcher]] = None,
    ):
        self.db = db
        self.client = client
        self.sources: Dict[str, BaseFetcher] = dict(sources) if sources is not None else self.build_sources(client)
        self.store = RecordStore(db)
        self.started_at = datetime.now(timezone.utc)

    def build_sources(self, client: Optional[httpx.AsyncClient]) -> Dict[str, BaseFetcher]:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------
    def target_for(self, source: str) -> Target:
        target = self.targets.get(source, self.default_target)
        if target is None:
            raise KeyError(f"{self.name}: no destination table for source {source!r}")
        return target

    def records_of(self, source: str, outcome: Any) -> List[NormalizedRecord]:
        if outcome is None:
            return []
        if isinstance(outcome, (list, tuple)):
            return list(outcome)
        return [outcome]

    def retention_rules(self, outcomes: Mapping[str, Any]) -> Sequence[RetentionRule]:
        return self.retention

    def counters(self, outcomes: Mapping[str, Any]) -> Dict[str, Any]:
        return {}

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------
    async def run(self) -> SyncReport:
        with job_context(self.name):
            return await self._run()

    async def _run(self) -> SyncReport:
        report = SyncReport(function=self.name)
        started = time.perf_counter()
        self.started_at = datetime.now(timezone.utc)
        log.info(f"Starting sync | sources={list(self.sources)}")

        try:
            outcomes = await self._fetch_all(report)
            for source, outcome in outcomes.items():
                self._upsert(source, outcome, report)
            self._prune(outcomes, report)
            report.counters.update(self.counters(outcomes))
            self.db.commit()
        except Exception as exc:  # noqa: BLE001
            self.db.rollback()
            report.error = str(exc) or exc.__class__.__name__
            log.exception(f"Sync aborted: {exc!r}")

        report.duration_ms = int((time.perf_counter() - started) * 1000)
        self._record_status(report)

        if report.success:
            log.info(f"Sync finished | upserted={report.upserted} duration_ms={report.duration_ms}")
        else:
            log.error(
                f"Sync finished with failures | upserted={report.upserted} "
                f"errors={report.errors} error={report.error}"
            )
        return report

    async def _fetch_all(self, report: SyncReport) -> Dict[str, Any]:
        names = list(self.sources)
        results = await asyncio.gather(
            *(self.sources[name].fetch() for name in names),
            return_exceptions=True,
        )

        outcomes: Dict[str, Any] = {}
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                # fetch() never raises, so this is a bug rather than an upstream outage
                log.error(f"source {name} raised: {result!r}")
                report.errors += 1
                report.sources[name] = 0
                continue
            outcomes[name] = result
            report.sources[name] = len(result) if isinstance(result, Sized) else int(result is not None)
        return outcomes

    def _upsert(self, source: str, outcome: Any, report: SyncReport) -> None:
        target = self.target_for(source)
        for record in self.records_of(source, outcome):
            row = record.to_row()
            row["updated_at"] = self.started_at
            if self.store.upsert(target.model, row, target.conflict_cols, key=record.key):
                report.upserted += 1
            else:
                report.errors += 1

    def _prune(self, outcomes: Mapping[str, Any], report: SyncReport) -> None:
        for rule in self.retention_rules(outcomes):
            deleted = self.store.delete_older_than(rule.model, rule.column, rule.cutoff(self.started_at))
            if deleted is None:
                report.errors += 1
                continue
            table = rule.model.__tablename__
            report.deleted[table] = report.deleted.get(table, 0) + deleted
            if deleted:
                log.info(f"Pruned {deleted} rows from {table}")

    def _record_status(self, report: SyncReport) -> None:
        """Overwrite this job's ledger row and bump its running counters."""
        now = datetime.now(timezone.utc)
        try:
            status = self.db.get(models.SyncStatus, self.name)
            if status is None:
                status = models.SyncStatus(function_name=self.name, run_count=0, error_count=0, avg_duration_ms=0)
                self.db.add(status)

            runs = (status.run_count or 0) + 1
            previous_avg = status.avg_duration_ms or 0
            status.run_count = runs
            status.avg_duration_ms = round(previous_avg + (report.duration_ms - previous_avg) / runs)
            status.success = report.success
            status.duration_ms = report.duration_ms
            status.last_run = now
            if report.success:
                status.last_error = None
                status.last_success = now
            else:
                status.error_count = (status.error_count or 0) + 1
                status.last_error = report.error or f"{report.errors} operation(s) failed"
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error(f"Could not write sync status: {exc}")


# =============================================================================
# Jobs
# =============================================================================
class MarketsJob(SyncJob):
    name = "sync-markets"
    default_target = Target(models.MarketData, ("type", "symbol"))

    def build_sources(self, client):
        return default_market_fetchers(client)


class NewsJob(SyncJob):
    name = "sync-news"
    default_target = Target(models.NewsItem)
    retention = (RetentionRule(models.NewsItem, "published_at", timedelta(days=7)),)

    def build_sources(self, client):
        return default_news_fetchers(client)


class WeatherJob(SyncJob):
    name = "sync-weather"
    targets = {"alerts": Target(models.WeatherAlert)}
    # NULL expiry never matches, so open-ended alerts stay
    retention = (RetentionRule(models.WeatherAlert, "expires"),)

    def build_sources(self, client):
        return {"alerts": NWSAlertFetcher(client)}

    def counters(self, outcomes):
        return {"active_alerts": len(outcomes.get("alerts") or [])}


class HazardsJob(SyncJob):
    name = "sync-hazards"
    targets = {
        "earthquakes": Target(models.Earthquake),
        "grid_stress": Target(models.GridStress),
        "outages": Target(models.Outage),
    }
    retention = (
        RetentionRule(models.Earthquake, "timestamp", timedelta(days=7)),
        RetentionRule(models.Outage, "detected_at", timedelta(days=1)),
    )

    def build_sources(self, client):
        return {
            "earthquakes": USGSEarthquakeFetcher(client),
            "grid_stress": WattTimeGridFetcher(client),
            "outages": IODAOutageFetcher(client),
        }


class StormsJob(SyncJob):
    """Storm tables mirror the upstream: a non-empty fetch replaces what is stored."""

    name = "sync-storms"
    targets = {
        "cyclones": Target(models.TropicalCyclone, ("storm_id",)),
        "outlooks": Target(models.ConvectiveOutlook, ("day", "outlook_type", "risk")),
    }
    max_age = {
        "cyclones": (models.TropicalCyclone, timedelta(hours=6)),
        "outlooks": (models.ConvectiveOutlook, timedelta(days=1)),
    }

    def build_sources(self, client):
        return {
            "cyclones": NHCCycloneFetcher(client),
            "outlooks": SPCOutlookFetcher(client),
        }

    def retention_rules(self, outcomes):
        rules = []
        for source, (model, max_age) in self.max_age.items():
            refreshed = bool(outcomes.get(source))
            rules.append(RetentionRule(model, "updated_at", timedelta(0) if refreshed else max_age))
        return rules

    def counters(self, outcomes):
        return {
            "active_cyclones": len(outcomes.get("cyclones") or []),
            "outlooks": len(outcomes.get("outlooks") or []),
        }


class IntelJob(SyncJob):
    name = "sync-intel"
    targets = {
        "predictions": Target(models.Prediction),
        "whales": Target(models.WhaleTransaction, ("tx_hash",)),
        "conflicts": Target(models.Conflict),
    }
    retention = (RetentionRule(models.WhaleTransaction, "timestamp", timedelta(hours=24)),)

    def build_sources(self, client):
        return {
            "predictions": PolymarketFetcher(client),
            "whales": WhaleAlertFetcher(client),
            "conflicts": VIEWSConflictFetcher(client),
        }

    def records_of(self, source, outcome):
        if source == "conflicts" and outcome is not None:
            return list(outcome.hotspots)
        return super().records_of(source, outcome)


class EnvironmentalJob(SyncJob):
    name = "sync-environmental"
    targets = {
        "radiation": Target(models.RadiationReading, ("station_id",)),
        "outbreaks": Target(models.DiseaseOutbreak),
    }
    retention = (RetentionRule(models.RadiationReading, "measured_at", timedelta(days=30)),)

    def build_sources(self, client):
        return {
            "radiation": SafecastRadiationFetcher(client),
            "outbreaks": ReliefWebOutbreakFetcher(client),
        }


class SlowJob(SyncJob):
    name = "sync-slow"
    targets = {
        "contracts": Target(models.GovContract),
        "layoffs": Target(models.Layoff),
        "leaders": Target(models.WorldLeader, ("country",)),
    }
    retention = (
        RetentionRule(models.GovContract, "award_date", timedelta(days=30)),
        RetentionRule(models.Layoff, "announced_at", timedelta(days=60)),
    )

    def build_sources(self, client):
        return {
            "contracts": USASpendingContractFetcher(client),
            "layoffs": HNLayoffFetcher(client),
            "leaders": WorldLeaderFetcher(client),
        }


class FedJob(SyncJob):
    name = "sync-fed"
    targets = {"balance": Target(models.FedBalance, ("date",))}
    retention = (RetentionRule(models.FedBalance, "date", timedelta(days=365)),)

    def build_sources(self, client):
        return {"balance": FREDBalanceFetcher(client)}

    def counters(self, outcomes):
        snapshot = outcomes.get("balance")
        if snapshot is None:
            return {"fed_date": None, "total_assets": None}
        return {"fed_date": snapshot.date.isoformat(), "total_assets": snapshot.total_assets}


JOBS: Dict[str, Type[SyncJob]] = {
    job.name: job
    for job in (
        MarketsJob,
        NewsJob,
        WeatherJob,
        HazardsJob,
        StormsJob,
        IntelJob,
        EnvironmentalJob,
        SlowJob,
        FedJob,
    )
}


def get_job(name: str) -> Type[SyncJob]:
    try:
        return JOBS[name]
    except KeyError:
        raise KeyError(f"Unknown sync job: {name}") from None


async def run_job(name: str, db: Session, client: Optional[httpx.AsyncClient] = None) -> SyncReport:
    return await get_job(name)(db, client).run()


async def run_all(db: Session, client: Optional[httpx.AsyncClient] = None) -> Dict[str, SyncReport]:
    """Run every job one after another on the same session."""
    reports: Dict[str, SyncReport] = {}
    for name in JOBS:
        reports[name] = await run_job(name, db, client)
    return reports
