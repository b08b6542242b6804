"""Slow-moving sources: USASpending contracts, HN layoffs, world leaders."""

from __future__ import annotations

import asyncio
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx

from situation_sync.core.logging import get_logger
from situation_sync.core.rate_limit import RateLimiter
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.ingestion.news import query_gdelt
from situation_sync.reference.leaders import WORLD_LEADERS, Leader
from situation_sync.schemas.records import GovContract, Layoff, WorldLeader
from situation_sync.schemas.upstream import HNHit, HNSearchResponse, USASpendingAward, USASpendingResponse

log = get_logger("ingestion.slow")

USASPENDING_URL = "https://api.usaspending.gov/api/v2/search/spending_by_award/"
HN_SEARCH_URL = "https://hn.algolia.com/api/v1/search"

AWARD_FIELDS = [
    "Award_ID",
    "Recipient_Name",
    "Award_Amount",
    "Awarding_Agency",
    "Award_Description",
    "Start_Date",
    "Recipient_State_Code",
    "NAICS_Code",
    "Contract_Award_Type",
]


# =============================================================================
# Government contracts
# =============================================================================
class USASpendingContractFetcher(BaseFetcher[List[GovContract]]):
    """Largest contract awards of the past week (at least $1M, top 25)."""

    name = "usaspending"
    timeout = 20.0

    min_amount = 1_000_000
    top_n = 25

    async def _fetch(self) -> List[GovContract]:
        today = datetime.now(timezone.utc).date()
        payload = {
            "filters": {
                "time_period": [
                    {"start_date": (today - timedelta(days=7)).isoformat(), "end_date": today.isoformat()}
                ],
                "award_type_codes": ["A", "B", "C", "D"],
            },
            "fields": AWARD_FIELDS,
            "page": 1,
            "limit": 50,
            "sort": "Award_Amount",
            "order": "desc",
        }
        body = await self.get_json(
            USASPENDING_URL,
            method="POST",
            json=payload,
            headers={"Accept": "application/json"},
        )
        if not isinstance(body, dict):
            return []

        response = USASpendingResponse.model_validate(body)
        contracts: List[GovContract] = []
        for award in self.validate_items(USASpendingAward, response.results):
            if not award.award_id:
                continue
            amount = self._to_float(award.award_amount)
            if amount is None or amount < self.min_amount:
                continue
            started = self._parse_timestamp(award.start_date)
            contract = self.build(
                GovContract,
                external_id=award.award_id,
                recipient=award.recipient_name or "Unknown",
                agency=award.awarding_agency or "Unknown Agency",
                amount=amount,
                description=award.description or "",
                award_date=started.date() if started else today,
                data={
                    "state": award.state,
                    "naicsCode": str(award.naics_code) if award.naics_code is not None else None,
                    "contractType": award.contract_type,
                },
            )
            if contract:
                contracts.append(contract)

        log.info(f"Processed {len(contracts)} significant contracts")
        return contracts[: self.top_n]


# =============================================================================
# Layoffs
# =============================================================================
LAYOFF_TITLE = re.compile(r"layoff|laying off|laid off|job cut|workforce reduction|downsiz", re.IGNORECASE)
COMPANY_VERB = re.compile(
    r"^([A-Z][a-zA-Z0-9]+(?:\s+[A-Z][a-zA-Z0-9]+)?)\s+(?:lays?|is laying|laying|to lay|will lay|cuts?|cutting|announces?)",
    re.IGNORECASE,
)
COMPANY_POSSESSIVE = re.compile(r"([A-Z][a-zA-Z0-9]+)(?:'s)?\s+(?:layoffs?|job cuts)", re.IGNORECASE)
COMPANY_AT = re.compile(r"at\s+([A-Z][a-zA-Z0-9]+)")
HEADCOUNT = re.compile(
    r"(\d{1,3}(?:,\d{3})*|\d+)\s*(?:k|K|thousand)?\s*(?:employees?|workers?|jobs?|people|staff|positions?)",
    re.IGNORECASE,
)
PERCENT = re.compile(r"(\d+)%")
GENERIC_SUBJECTS = frozenset({"The", "This", "More", "Why", "How", "Tech", "Big"})


def extract_company(title: str) -> str:
    for pattern in (COMPANY_VERB, COMPANY_POSSESSIVE, COMPANY_AT):
        match = pattern.search(title)
        if match:
            company = match.group(1).strip()
            return "Tech Company" if company in GENERIC_SUBJECTS else company
    return "Company"


def extract_headcount(title: str) -> int:
    match = HEADCOUNT.search(title)
    if match:
        count = int(match.group(1).replace(",", ""))
        lowered = title.lower()
        if "k " in lowered or "thousand" in lowered:
            count *= 1000
        return count
    percent = PERCENT.search(title)
    if percent:
        # Rough headcount for "cuts 10% of staff"
        return int(percent.group(1)) * 50
    return 0


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.lower())


class HNLayoffFetcher(BaseFetcher[List[Layoff]]):
    """Recent layoff stories from Hacker News (Algolia search)."""

    name = "hn-layoffs"
    timeout = 12.0

    max_collected = 8
    top_n = 6

    def fallback(self) -> List[Layoff]:
        today = datetime.now(timezone.utc).date()
        return [
            Layoff(
                external_id=f"layoff-fallback-{today.isoformat()}",
                company="Tech Industry",
                count=0,
                title="Layoff data temporarily unavailable - API timeout",
                announced_at=today,
                data={"is_fallback": True},
            )
        ]

    async def _fetch(self) -> List[Layoff]:
        since = int((datetime.now(timezone.utc) - timedelta(days=30)).timestamp())
        params = {
            "query": "layoffs",
            "tags": "story",
            "numericFilters": f"created_at_i>{since}",
            "hitsPerPage": 30,
        }
        body = await self.get_json(HN_SEARCH_URL, params=params)
        if not isinstance(body, dict):
            log.warning("hn-layoffs: search unavailable, using fallback")
            return self.fallback()

        response = HNSearchResponse.model_validate(body)
        layoffs: List[Layoff] = []
        for hit in self.validate_items(HNHit, response.hits):
            layoff = self._to_layoff(hit)
            if layoff is None:
                continue
            layoffs.append(layoff)
            if len(layoffs) >= self.max_collected:
                break

        layoffs.sort(key=lambda item: item.announced_at, reverse=True)
        result = layoffs[: self.top_n]
        if not result:
            return self.fallback()

        log.info(f"Processed {len(result)} layoffs")
        return result

    def _to_layoff(self, hit: HNHit) -> Optional[Layoff]:
        title = hit.title or ""
        if not LAYOFF_TITLE.search(title):
            return None

        company = extract_company(title)
        posted = self._parse_timestamp(hit.created_at) or datetime.now(timezone.utc)
        announced = posted.date()
        external_id = f"hn-{hit.object_id}" if hit.object_id else f"layoff-{_slug(company)}-{announced.isoformat()}"

        return self.build(
            Layoff,
            external_id=external_id,
            company=company,
            count=extract_headcount(title),
            title=title[:100],
            announced_at=announced,
            data={"title": title, "url": hit.url, "industry": "tech"},
        )


# =============================================================================
# World leaders
# =============================================================================
def parse_since(since: str) -> Optional[date]:
    """'Jan 2025' -> 2025-01-01."""
    try:
        return datetime.strptime(since.strip(), "%b %Y").date()
    except (AttributeError, ValueError):
        return None


class WorldLeaderFetcher(BaseFetcher[List[WorldLeader]]):
    """Leader roster enriched with each leader's latest GDELT headlines.

    Leaders are queried in batches of ``batch_size``; batches are spaced by
    ``batch_interval`` seconds. A failed news lookup leaves that leader with no
    headlines rather than dropping it.
    """

    name = "world-leaders"
    timeout = 10.0

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        leaders: Sequence[Leader] = WORLD_LEADERS,
        batch_size: int = 5,
        batch_interval: float = 0.3,
        news_limit: int = 5,
    ):
        super().__init__(client)
        self.leaders = leaders
        self.batch_size = batch_size
        self.limiter = RateLimiter(batch_interval)
        self.news_limit = news_limit

    async def _fetch(self) -> List[WorldLeader]:
        news_by_leader: Dict[str, List[Dict[str, Any]]] = {}
        async with self.session() as http:
            for start in range(0, len(self.leaders), self.batch_size):
                batch = self.leaders[start : start + self.batch_size]
                await self.limiter.acquire()
                results = await asyncio.gather(
                    *(self._leader_news(http, leader) for leader in batch),
                    return_exceptions=True,
                )
                for leader, result in zip(batch, results):
                    if isinstance(result, BaseException):
                        log.warning(f"world-leaders: news lookup failed for {leader.id}: {result!r}")
                        result = []
                    news_by_leader[leader.id] = result

        records: List[WorldLeader] = []
        for leader in self.leaders:
            news = news_by_leader.get(leader.id, [])
            record = self.build(
                WorldLeader,
                country=leader.country,
                leader_name=leader.name,
                title=leader.title,
                party=leader.party,
                took_office=parse_since(leader.since),
                data={
                    "id": leader.id,
                    "flag": leader.flag,
                    "keywords": list(leader.keywords),
                    "focus": list(leader.focus),
                    "news": news[: self.news_limit],
                },
            )
            if record:
                records.append(record)

        records.sort(key=lambda r: len(r.data["news"]), reverse=True)
        log.info(f"Processed {len(records)} world leaders")
        return records

    async def _leader_news(self, http: httpx.AsyncClient, leader: Leader) -> List[Dict[str, Any]]:
        query = " OR ".join(f'"{keyword}"' for keyword in leader.keywords)
        articles = await query_gdelt(
            query,
            client=http,
            max_records=self.news_limit,
            sort="date",
            timespan=None,
            timeout=self.timeout,
            source=f"{self.name}:{leader.id}",
        )
        return [
            {
                "source": article.domain or "Unknown",
                "title": article.title,
                "link": article.url,
                "pubDate": article.seendate or "",
            }
            for article in articles
        ]
