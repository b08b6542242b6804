"""GDELT news source, one article-list query per category."""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import httpx

from situation_sync.core.http import fetch_with_retry
from situation_sync.core.logging import get_logger
from situation_sync.core.rate_limit import RateLimiter
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.schemas.records import NewsItem
from situation_sync.schemas.upstream import GdeltArticle, GdeltResponse

log = get_logger("ingestion.news")

GDELT_DOC_URL = "https://api.gdeltproject.org/api/v2/doc/doc"

CATEGORY_QUERIES: Dict[str, str] = {
    "politics": "(politics OR government OR election OR congress)",
    "tech": '(technology OR software OR startup OR "silicon valley")',
    "finance": '(finance OR "stock market" OR economy OR banking)',
    "gov": '("federal government" OR "white house" OR congress OR regulation)',
    "ai": '("artificial intelligence" OR "machine learning" OR AI OR ChatGPT)',
    "intel": "(intelligence OR security OR military OR defense)",
}

# GDELT throttles bursts; categories are queried at least a second apart
GDELT_MIN_INTERVAL = 1.0


async def query_gdelt(
    query: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    max_records: int = 25,
    sort: str = "datedesc",
    timespan: Optional[str] = "24h",
    timeout: float = 15.0,
    source: str = "gdelt",
) -> List[GdeltArticle]:
    """Run one GDELT DOC artlist query; non-JSON or failed replies give ``[]``."""
    params = {
        "query": query,
        "mode": "artlist",
        "maxrecords": max_records,
        "format": "json",
        "sort": sort,
    }
    if timespan:
        params["timespan"] = timespan

    resp = await fetch_with_retry(GDELT_DOC_URL, params=params, timeout=timeout, client=client, source=source)
    if resp is None:
        return []

    # GDELT answers rate-limit and query errors with a 200 plain-text body
    content_type = resp.headers.get("content-type", "")
    if "application/json" not in content_type:
        log.warning(f"{source}: non-JSON response ({content_type or 'no content-type'})")
        return []

    try:
        body = GdeltResponse.model_validate(resp.json())
    except ValueError as exc:
        log.warning(f"{source}: malformed GDELT response: {exc}")
        return []

    articles: List[GdeltArticle] = []
    for raw in body.articles:
        try:
            articles.append(GdeltArticle.model_validate(raw))
        except ValueError:
            continue
    return articles


def article_id(category: str, url: str) -> str:
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]
    return f"gdelt-{category}-{digest}"


class GdeltNewsFetcher(BaseFetcher[List[NewsItem]]):
    """Headlines for one news category."""

    def __init__(
        self,
        category: str,
        client: Optional[httpx.AsyncClient] = None,
        limiter: Optional[RateLimiter] = None,
        query: Optional[str] = None,
    ):
        super().__init__(client)
        self.category = category
        self.name = f"gdelt-{category}"
        self.query = query or CATEGORY_QUERIES[category]
        self.limiter = limiter or RateLimiter(GDELT_MIN_INTERVAL)

    async def _fetch(self) -> List[NewsItem]:
        async with self.limiter:
            articles = await query_gdelt(
                f"{self.query} sourcelang:english",
                client=self.client,
                timeout=self.timeout,
                source=self.name,
            )

        now = datetime.now(timezone.utc)
        seen = set()
        items: List[NewsItem] = []
        for index, article in enumerate(articles):
            url = article.url.strip()
            if not url:
                continue
            external_id = article_id(self.category, url)
            if external_id in seen:
                continue
            seen.add(external_id)

            published = self._parse_timestamp(article.seendate) or now - timedelta(minutes=index)
            item = self.build(
                NewsItem,
                external_id=external_id,
                category=self.category,
                title=article.title,
                link=url,
                source=article.domain or "Unknown",
                published_at=published,
                summary=None,
                image_url=article.socialimage or None,
                data={"seendate": article.seendate, "domain": article.domain},
            )
            if item:
                items.append(item)

        log.info(f"Fetched {len(items)} {self.category} articles from GDELT")
        return items


def default_news_fetchers(client: Optional[httpx.AsyncClient] = None) -> Dict[str, BaseFetcher]:
    limiter = RateLimiter(GDELT_MIN_INTERVAL)
    return {category: GdeltNewsFetcher(category, client, limiter) for category in CATEGORY_QUERIES}
