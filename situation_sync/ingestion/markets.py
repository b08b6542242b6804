"""Market sources: CoinGecko crypto prices and Finnhub quotes."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger
from situation_sync.core.rate_limit import RateLimiter
from situation_sync.ingestion.base import BaseFetcher
from situation_sync.reference.markets import (
    COMMODITIES,
    CRYPTO_ASSETS,
    INDICES,
    SECTORS,
    CryptoAsset,
    Instrument,
)
from situation_sync.schemas.records import MarketDatum
from situation_sync.schemas.upstream import CoinGeckoPrice, FinnhubQuote

log = get_logger("ingestion.markets")

COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"
FINNHUB_QUOTE_URL = "https://finnhub.io/api/v1/quote"

# Finnhub free tier: keep successive quote calls at least 200 ms apart
FINNHUB_MIN_INTERVAL = 0.2


class CoinGeckoCryptoFetcher(BaseFetcher[List[MarketDatum]]):
    name = "coingecko"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        assets: Sequence[CryptoAsset] = CRYPTO_ASSETS,
    ):
        super().__init__(client)
        self.assets = assets

    async def _fetch(self) -> List[MarketDatum]:
        params = {
            "ids": ",".join(a.coingecko_id for a in self.assets),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
        }
        body = await self.get_json(COINGECKO_URL, params=params, headers={"Accept": "application/json"})
        if not isinstance(body, dict):
            return []

        records: List[MarketDatum] = []
        for asset in self.assets:
            raw = body.get(asset.coingecko_id)
            if raw is None:
                log.debug(f"coingecko: no price for {asset.coingecko_id}")
                continue
            try:
                quote = CoinGeckoPrice.model_validate(raw)
            except ValidationError:
                continue

            change_pct = quote.usd_24h_change
            change = quote.usd * change_pct / 100 if change_pct is not None else None
            record = self.build(
                MarketDatum,
                type="crypto",
                symbol=asset.symbol,
                name=asset.name,
                price=quote.usd,
                change=change,
                change_percent=change_pct,
                data={"coingecko_id": asset.coingecko_id},
            )
            if record:
                records.append(record)

        log.info(f"Fetched {len(records)} crypto prices from CoinGecko")
        return records


class FinnhubQuoteFetcher(BaseFetcher[List[MarketDatum]]):
    """Quotes one instrument group from Finnhub, sequentially.

    Several instances may share one ``RateLimiter`` so the combined call rate
    against Finnhub stays within the free-tier spacing.
    """

    timeout = 15.0

    def __init__(
        self,
        market_type: str,
        instruments: Sequence[Instrument],
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        super().__init__(client)
        self.market_type = market_type
        self.name = f"finnhub-{market_type}"
        self.instruments = instruments
        self.api_key = api_key if api_key is not None else settings.FINNHUB_API_KEY
        self.limiter = limiter or RateLimiter(FINNHUB_MIN_INTERVAL)

    async def _fetch(self) -> List[MarketDatum]:
        if not self.api_key:
            log.warning(f"{self.name}: Finnhub API key not configured")
            return []

        records: List[MarketDatum] = []
        async with self.session() as http:
            for instrument in self.instruments:
                async with self.limiter:
                    quote = await self._quote(http, instrument.quote_symbol)
                if quote is None:
                    continue
                record = self.build(
                    MarketDatum,
                    type=self.market_type,
                    symbol=instrument.symbol,
                    name=instrument.name,
                    price=quote.c,
                    change=quote.d,
                    change_percent=quote.dp,
                    data={"quote_symbol": instrument.quote_symbol, "previous_close": quote.pc},
                )
                if record:
                    records.append(record)

        log.info(f"Fetched {len(records)}/{len(self.instruments)} {self.market_type} quotes from Finnhub")
        return records

    async def _quote(self, http: httpx.AsyncClient, symbol: str) -> Optional[FinnhubQuote]:
        body = await self.get_json(
            FINNHUB_QUOTE_URL,
            client=http,
            params={"symbol": symbol, "token": self.api_key},
        )
        if not isinstance(body, dict):
            return None
        try:
            quote = FinnhubQuote.model_validate(body)
        except ValidationError:
            log.warning(f"{self.name}: malformed quote for {symbol}")
            return None
        # All zeros means the symbol is unknown upstream
        if quote.c == 0 and quote.pc == 0:
            log.warning(f"{self.name}: no quote for {symbol}")
            return None
        return quote


def default_market_fetchers(
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> Dict[str, BaseFetcher]:
    """The market fetcher set, with one limiter shared by all Finnhub groups."""
    limiter = RateLimiter(FINNHUB_MIN_INTERVAL)
    return {
        "crypto": CoinGeckoCryptoFetcher(client),
        "indices": FinnhubQuoteFetcher("index", INDICES, client, api_key, limiter),
        "sectors": FinnhubQuoteFetcher("sector", SECTORS, client, api_key, limiter),
        "commodities": FinnhubQuoteFetcher("commodity", COMMODITIES, client, api_key, limiter),
    }
