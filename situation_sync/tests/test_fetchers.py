"""Source fetcher tests against mocked upstreams"""

import json
from datetime import date, datetime, timezone

import httpx
import pytest

from situation_sync.core.rate_limit import RateLimiter
from situation_sync.ingestion.environmental import (
    FALLBACK_OUTBREAKS,
    ReliefWebOutbreakFetcher,
    SafecastRadiationFetcher,
)
from situation_sync.ingestion.fed import FREDBalanceFetcher
from situation_sync.ingestion.geocode import CountryGeocoder
from situation_sync.ingestion.hazards import IODAOutageFetcher, USGSEarthquakeFetcher, WattTimeGridFetcher
from situation_sync.ingestion.intel import PolymarketFetcher, VIEWSConflictFetcher, WhaleAlertFetcher
from situation_sync.ingestion.markets import CoinGeckoCryptoFetcher, FinnhubQuoteFetcher
from situation_sync.ingestion.news import GdeltNewsFetcher, article_id
from situation_sync.ingestion.slow import (
    HNLayoffFetcher,
    USASpendingContractFetcher,
    WorldLeaderFetcher,
    extract_company,
    extract_headcount,
)
from situation_sync.ingestion.storms import NHCCycloneFetcher, SPCOutlookFetcher, parse_coordinate
from situation_sync.ingestion.weather import NWSAlertFetcher
from situation_sync.reference.leaders import WORLD_LEADERS
from situation_sync.reference.geography import GRID_REGIONS
from situation_sync.reference.markets import INDICES, Instrument

DRC = (-4.04, 21.76)


def json_handler(payload, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


def usgs_feature(event_id, mag, lon=142.3, lat=38.1):
    return {
        "id": event_id,
        "properties": {"mag": mag, "place": "off the coast", "time": 1760000000000, "url": "https://usgs.test"},
        "geometry": {"coordinates": [lon, lat, 10.0]},
    }


class TestGeocoding:
    """Country names resolve to a shared centroid"""

    @pytest.mark.parametrize("name", ["Democratic Republic of the Congo", "DRC", "DR Congo", "drc"])
    def test_congo_variants(self, name):
        assert CountryGeocoder().resolve(name) == DRC

    def test_unknown_name(self):
        assert CountryGeocoder().resolve("Atlantis") is None
        assert CountryGeocoder().resolve("  ") is None


class TestHazards:
    """USGS, WattTime and IODA"""

    @pytest.mark.asyncio
    async def test_usgs_severity(self, mock_client):
        payload = {"features": [usgs_feature("a", 6.2), usgs_feature("b", 7.0), usgs_feature("c", 3.9)]}
        quakes = await USGSEarthquakeFetcher(mock_client(json_handler(payload))).fetch()

        by_id = {q.external_id: q for q in quakes}
        assert set(by_id) == {"a", "b"}
        assert by_id["a"].severity == "high"
        assert by_id["b"].severity == "critical"
        assert (by_id["a"].lat, by_id["a"].lon, by_id["a"].depth) == (38.1, 142.3, 10.0)

    @pytest.mark.asyncio
    async def test_usgs_drops_invalid_coordinates(self, mock_client):
        payload = {"features": [usgs_feature("bad", 5.5, lat=123.0), usgs_feature("ok", 5.5)]}
        quakes = await USGSEarthquakeFetcher(mock_client(json_handler(payload))).fetch()
        assert [q.external_id for q in quakes] == ["ok"]

    @pytest.mark.asyncio
    async def test_watttime_without_credentials_skips_network(self, mock_client):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        grid = await WattTimeGridFetcher(mock_client(handler), username="", password="").fetch()
        assert grid == []
        assert calls == []

    @pytest.mark.asyncio
    async def test_ioda_geocodes_and_filters(self, mock_client):
        payload = {
            "data": [
                [
                    {"entity": {"code": "CD", "name": "Democratic Republic of the Congo"}, "datasource": "bgp", "value": 0.3, "from": 1760000000},
                    {"entity": {"code": "JP", "name": "Japan"}, "datasource": "bgp", "value": 0.95, "from": 1760000000},
                    {"entity": {"code": "UA", "name": "Ukraine"}, "datasource": "ping-slash24", "value": 0.1, "from": 1760000000},
                    {"entity": {"code": "XX", "name": "Atlantis"}, "datasource": "bgp", "value": 0.2, "from": 1760000000},
                ]
            ]
        }
        outages = await IODAOutageFetcher(mock_client(json_handler(payload)), now=1760086400).fetch()

        assert len(outages) == 1
        outage = outages[0]
        assert outage.external_id == "ioda-CD-1760000000"
        assert outage.severity == "major"
        assert (outage.lat, outage.lon) == DRC
        assert outage.source == "IODA (Georgia Tech)"


    @pytest.mark.asyncio
    async def test_ioda_detected_at_is_ingestion_time(self, mock_client):
        payload = {"data": [[{"entity": {"code": "CD", "name": "DRC"}, "datasource": "bgp", "value": 0.3, "from": 1760000000}]]}
        before = datetime.now(timezone.utc)
        outages = await IODAOutageFetcher(mock_client(json_handler(payload)), now=1760086400).fetch()

        assert outages[0].detected_at >= before
        assert outages[0].data["signal_start"] == 1760000000

    @pytest.mark.asyncio
    async def test_watttime_region_without_value_dropped(self, mock_client):
        caiso, pjm = GRID_REGIONS[0], GRID_REGIONS[2]

        def handler(request):
            path = request.url.path
            if path == "/login":
                return httpx.Response(200, json={"token": "t"})
            if path == "/v3/region-from-loc":
                lat = float(request.url.params["latitude"])
                return httpx.Response(200, json={"region": "CAISO_NORTH" if lat == caiso.lat else "PJM_DC"})
            if request.url.params["region"] == "CAISO_NORTH":
                return httpx.Response(200, json={"data": [{"value": 97.0, "point_time": "2026-10-19T10:00:00Z"}]})
            return httpx.Response(200, json={"data": [{"point_time": "2026-10-19T10:00:00Z"}]})

        fetcher = WattTimeGridFetcher(mock_client(handler), username="u", password="p", regions=(caiso, pjm))
        grid = await fetcher.fetch()

        assert [(g.region, g.status, g.percentile) for g in grid] == [(caiso.name, "high", 97.0)]
        assert grid[0].data["region_id"] == "CAISO_NORTH"


class TestEnvironmental:
    """Safecast and ReliefWeb"""

    @pytest.mark.asyncio
    async def test_safecast_dedupes_bucket_to_max(self, mock_client):
        payload = [
            {"id": 1, "value": 40, "unit": "cpm", "latitude": 35.681, "longitude": 139.767, "captured_at": "2026-10-18T00:00:00Z"},
            {"id": 2, "value": 65, "unit": "cpm", "latitude": 35.683, "longitude": 139.769, "captured_at": "2026-10-18T01:00:00Z"},
        ]
        readings = await SafecastRadiationFetcher(mock_client(json_handler(payload))).fetch()

        assert len(readings) == 1
        reading = readings[0]
        assert reading.value == 65
        assert reading.level == "elevated"
        assert reading.station_id == "safecast-35.68_139.77"

    @pytest.mark.asyncio
    async def test_safecast_skips_old_and_unknown_units(self, mock_client):
        payload = [
            {"id": 1, "value": 40, "unit": "cpm", "latitude": 10.0, "longitude": 10.0, "captured_at": "2015-01-01T00:00:00Z"},
            {"id": 2, "value": 40, "unit": "bq", "latitude": 11.0, "longitude": 11.0, "captured_at": "2026-10-18T00:00:00Z"},
        ]
        assert await SafecastRadiationFetcher(mock_client(json_handler(payload))).fetch() == []

    @pytest.mark.asyncio
    async def test_reliefweb_fallback_when_down(self, mock_client):
        outbreaks = await ReliefWebOutbreakFetcher(mock_client(json_handler({}, status=500))).fetch()
        assert outbreaks == list(FALLBACK_OUTBREAKS)
        assert len(outbreaks) == 3

    @pytest.mark.asyncio
    async def test_reliefweb_geocodes_country(self, mock_client):
        payload = {
            "data": [
                {
                    "id": 123,
                    "fields": {
                        "name": "Cholera Outbreak - Oct 2026",
                        "date": {"created": "2026-10-01T00:00:00+00:00"},
                        "country": [{"name": "DRC"}],
                    },
                }
            ]
        }
        outbreaks = await ReliefWebOutbreakFetcher(mock_client(json_handler(payload))).fetch()

        assert len(outbreaks) == 1
        assert outbreaks[0].external_id == "reliefweb-123"
        assert outbreaks[0].disease == "Cholera Outbreak"
        assert (outbreaks[0].lat, outbreaks[0].lon) == DRC


class TestMarkets:
    """Finnhub quotes"""

    @pytest.mark.asyncio
    async def test_unknown_symbol_dropped(self, mock_client):
        requested = []

        def handler(request):
            symbol = request.url.params["symbol"]
            requested.append(symbol)
            if symbol == "NOPE":
                return httpx.Response(200, json={"c": 0, "d": None, "dp": None, "pc": 0})
            return httpx.Response(200, json={"c": 420.0, "d": 4.2, "dp": 1.01, "pc": 415.8})

        instruments = (Instrument("^DJI", "Dow Jones", "DIA"), Instrument("NOPE", "Missing", "NOPE"))
        fetcher = FinnhubQuoteFetcher("index", instruments, mock_client(handler), api_key="k", limiter=RateLimiter(0))
        quotes = await fetcher.fetch()

        assert requested == ["DIA", "NOPE"]
        assert [(q.symbol, q.price, q.type) for q in quotes] == [("^DJI", 420.0, "index")]

    @pytest.mark.asyncio
    async def test_missing_key_returns_empty(self, mock_client):
        fetcher = FinnhubQuoteFetcher("index", INDICES, mock_client(json_handler({})), api_key="")
        assert await fetcher.fetch() == []


    @pytest.mark.asyncio
    async def test_coingecko_prices(self, mock_client):
        payload = {"bitcoin": {"usd": 60000.0, "usd_24h_change": 2.0}, "ethereum": {"usd": 3000.0}}
        prices = await CoinGeckoCryptoFetcher(mock_client(json_handler(payload))).fetch()

        by_symbol = {p.symbol: p for p in prices}
        assert set(by_symbol) == {"BTC", "ETH"}
        assert by_symbol["BTC"].change == pytest.approx(1200.0)
        assert by_symbol["BTC"].key == "crypto:BTC"
        assert by_symbol["ETH"].change is None and by_symbol["ETH"].change_percent is None


class TestStorms:
    """NHC positions and SPC de-duplication"""

    def test_parse_coordinate(self):
        assert parse_coordinate("25.1N") == 25.1
        assert parse_coordinate("80.3W") == -80.3
        assert parse_coordinate(12.5) == 12.5
        assert parse_coordinate("north") is None

    @pytest.mark.asyncio
    async def test_nhc_hurricane_category(self, mock_client):
        payload = {
            "activeStorms": [
                {
                    "id": "al052026",
                    "binNumber": "AT5",
                    "name": "Ernesto",
                    "classification": "HU",
                    "intensity": 100,
                    "pressure": 970,
                    "latitude": "25.1N",
                    "longitude": "80.3W",
                },
                {"id": "al062026", "name": "Nowhere", "classification": "TS", "intensity": 40},
            ]
        }
        storms = await NHCCycloneFetcher(mock_client(json_handler(payload))).fetch()

        assert len(storms) == 1
        storm = storms[0]
        assert (storm.storm_id, storm.category, storm.basin) == ("al052026", "C2", "AL")
        assert (storm.lat, storm.lon) == (25.1, -80.3)

    @pytest.mark.asyncio
    async def test_spc_highest_risk_first_and_deduped(self, mock_client):
        payload = {
            "type": "FeatureCollection",
            "features": [
                {"id": 1, "properties": {"LABEL": "SLGT", "VALID": "202610191200"}, "geometry": None},
                {"id": 2, "properties": {"LABEL": "ENH", "VALID": "202610191200"}, "geometry": None},
                {"id": 3, "properties": {"LABEL": "SLGT", "VALID": "202610191200"}, "geometry": None},
            ],
        }
        outlooks = await SPCOutlookFetcher(mock_client(json_handler(payload))).fetch()

        assert [o.risk for o in outlooks] == ["ENH", "SLGT"]
        assert outlooks[1].data["id"] == 1
        assert outlooks[0].valid_time.hour == 12


    @pytest.mark.asyncio
    async def test_nhc_storm_without_intensity_dropped(self, mock_client):
        payload = {
            "activeStorms": [
                {"id": "ep012026", "name": "Alma", "classification": "TS", "intensity": 45, "latitudeNumeric": 15.0, "longitudeNumeric": -105.0},
                {"id": "ep022026", "name": "Boris", "classification": "HU", "latitudeNumeric": 16.0, "longitudeNumeric": -110.0},
            ]
        }
        storms = await NHCCycloneFetcher(mock_client(json_handler(payload))).fetch()
        assert [s.storm_id for s in storms] == ["ep012026"]

    @pytest.mark.asyncio
    async def test_spc_unreadable_valid_stamp_keeps_batch(self, mock_client):
        payload = {
            "features": [
                {"id": 1, "properties": {"LABEL": "MRGL", "VALID": "202610191200"}, "geometry": None},
                {"id": 2, "properties": {"LABEL": "SLGT", "VALID": "202613991200"}, "geometry": None},
            ]
        }
        before = datetime.now(timezone.utc)
        outlooks = await SPCOutlookFetcher(mock_client(json_handler(payload))).fetch()

        assert [o.risk for o in outlooks] == ["SLGT", "MRGL"]
        assert outlooks[0].valid_time >= before
        assert outlooks[1].valid_time == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestSlowSources:
    """Layoff extraction and the FRED snapshot"""

    @pytest.mark.parametrize(
        "title, company, count",
        [
            ("Google lays off 200 employees", "Google", 200),
            ("Layoffs at Meta hit 10% of staff", "Meta", 500),
            ("The great tech downsizing continues", "Company", 0),
        ],
    )
    def test_layoff_extraction(self, title, company, count):
        assert extract_company(title) == company
        assert extract_headcount(title) == count

    @pytest.mark.asyncio
    async def test_hn_layoffs_filters_titles(self, mock_client):
        payload = {
            "hits": [
                {"objectID": "1", "title": "Google layoffs hit 200 employees", "created_at": "2026-10-18T10:00:00Z"},
                {"objectID": "2", "title": "Show HN: a tiny database", "created_at": "2026-10-18T11:00:00Z"},
            ]
        }
        layoffs = await HNLayoffFetcher(mock_client(json_handler(payload))).fetch()

        assert len(layoffs) == 1
        assert (layoffs[0].external_id, layoffs[0].company, layoffs[0].count) == ("hn-1", "Google", 200)
        assert layoffs[0].announced_at == date(2026, 10, 18)

    @pytest.mark.asyncio
    async def test_fred_skips_missing_weeks(self, mock_client):
        payload = {
            "observations": [
                {"date": "2026-10-15", "value": "."},
                {"date": "2026-10-08", "value": "7000000"},
                {"date": "2026-10-01", "value": "6900000"},
            ]
        }
        snapshot = await FREDBalanceFetcher(mock_client(json_handler(payload)), api_key="k").fetch()

        assert snapshot.date == date(2026, 10, 8)
        assert snapshot.total_assets == pytest.approx(7.0e12)
        assert snapshot.change_weekly == pytest.approx(1.0e11)
        assert snapshot.change_percent == pytest.approx(100 / 69, rel=1e-6)
        assert "is_fallback" not in snapshot.data

    @pytest.mark.asyncio
    async def test_fred_without_key_uses_fallback(self, mock_client):
        snapshot = await FREDBalanceFetcher(mock_client(json_handler({})), api_key="").fetch()
        assert snapshot.total_assets == 6.8e12
        assert snapshot.data["is_fallback"] is True


    @pytest.mark.asyncio
    async def test_usaspending_large_awards(self, mock_client):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "results": [
                        {"Award ID": "A1", "Recipient Name": "Acme", "Award Amount": 5e6, "Awarding Agency": "DoD", "Description": "Widgets", "Start Date": "2026-10-15"},
                        {"Award ID": "A2", "Recipient Name": "Small", "Award Amount": 5e5, "Start Date": "2026-10-15"},
                        {"Recipient Name": "No id", "Award Amount": 9e6},
                    ]
                },
            )

        contracts = await USASpendingContractFetcher(mock_client(handler)).fetch()

        assert seen["method"] == "POST"
        assert seen["body"]["filters"]["award_type_codes"] == ["A", "B", "C", "D"]
        assert len(contracts) == 1
        contract = contracts[0]
        assert (contract.external_id, contract.recipient, contract.agency, contract.amount) == ("A1", "Acme", "DoD", 5e6)
        assert contract.award_date == date(2026, 10, 15)


class TestIntel:
    """Polymarket, Whale Alert and VIEWS"""

    @pytest.mark.asyncio
    async def test_polymarket_prices_and_volume_floor(self, mock_client):
        payload = {
            "data": [
                {"id": "m1", "question": "Will it rain?", "outcomePrices": '["0.62", "0.38"]', "volume": 50000, "category": "Weather"},
                {"id": "m2", "question": "Thin market", "outcomePrices": ["0.1", "0.9"], "volume": 999},
                {"id": "m3", "question": "No prices yet", "volume": 2000},
            ]
        }
        predictions = await PolymarketFetcher(mock_client(json_handler(payload))).fetch()

        assert [(p.external_id, p.probability) for p in predictions] == [("m1", 0.62), ("m3", 0.5)]
        assert predictions[0].category == "Weather"
        assert predictions[1].category == "general"

    @pytest.mark.asyncio
    async def test_whale_alert_transactions(self, mock_client):
        params = {}

        def handler(request):
            params.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "transactions": [
                        {"id": 1, "blockchain": "ethereum", "symbol": "eth", "amount": 1000, "amount_usd": 2_500_000, "from": {"owner": "binance", "address": "0xa"}, "to": {"address": "0xb"}, "timestamp": 1760000000, "hash": "0xabc"},
                        {"id": 2, "blockchain": "tron", "symbol": "usdt", "amount": 5_000_000, "amount_usd": 5_000_000, "from": {}, "to": {"owner": "coinbase"}, "timestamp": 1760000100, "hash": "0xdef"},
                        {"id": 3, "blockchain": "bitcoin", "symbol": "btc", "amount": 30, "amount_usd": 1_800_000, "timestamp": 1760000200},
                    ]
                },
            )

        transactions = await WhaleAlertFetcher(mock_client(handler), api_key="k").fetch()

        assert params["min_value"] == "1000000"
        assert [t.key for t in transactions] == ["0xdef", "0xabc"]
        top = transactions[1]
        assert (top.token, top.from_owner, top.to_owner, top.usd_value) == ("ETH", "binance", "unknown", 2_500_000)
        assert top.timestamp == datetime.fromtimestamp(1760000000, tz=timezone.utc)

    @pytest.mark.asyncio
    async def test_views_first_month_hotspots_and_arcs(self, mock_client):
        run = "fatalities003_2026_09_t01"

        def handler(request):
            if request.url.path == "/":
                return httpx.Response(200, json={"runs": ["fatalities002_2026_08_t01", run, "other_run"]})
            assert request.url.path == f"/{run}/cm/sb"
            return httpx.Response(
                200,
                json={
                    "start_date": 560,
                    "data": [
                        {"country_id": 1, "month_id": 560, "name": "Ukraine", "isoab": "UKR", "year": 2026, "month": 9, "main_mean": 150.0, "main_dich": 0.5},
                        {"country_id": 2, "month_id": 560, "name": "Russia", "isoab": "RUS", "year": 2026, "month": 9, "main_mean": 10.0, "main_dich": 0.3},
                        {"country_id": 1, "month_id": 561, "name": "Ukraine", "isoab": "UKR", "year": 2026, "month": 10, "main_mean": 900.0, "main_dich": 0.9},
                        {"country_id": 3, "month_id": 560, "name": "Atlantis", "isoab": "ATL", "year": 2026, "month": 9, "main_mean": 50.0, "main_dich": 0.9},
                    ],
                },
            )

        forecast = await VIEWSConflictFetcher(mock_client(handler)).fetch()

        assert forecast.run_id == run
        assert [(h.iso_code, h.intensity, h.fatalities) for h in forecast.hotspots] == [
            ("UKR", "critical", 150.0),
            ("RUS", "elevated", 10.0),
        ]
        ukraine = forecast.hotspots[0]
        assert (ukraine.lat, ukraine.lon) == (48.38, 31.17)
        assert ukraine.data["forecastRun"] == run
        assert ukraine.data["forecastMonth"] == "Sep 2026"
        assert [a.id for a in forecast.arcs] == ["views-arc-RUS-UKR"]
        assert forecast.arcs[0].intensity == "critical"
        assert ukraine.data["arcs"][0]["id"] == "views-arc-RUS-UKR"


class TestWeather:
    """NWS alert mapping"""

    @pytest.mark.asyncio
    async def test_alert_fields(self, mock_client):
        payload = {
            "features": [
                {
                    "properties": {
                        "id": "urn:oid:2.49.0.1.840.0.1",
                        "event": "Flood Warning",
                        "severity": "Severe",
                        "urgency": "Immediate",
                        "certainty": "Likely",
                        "areaDesc": "Harris, TX",
                        "headline": "Flood Warning issued",
                        "description": "River flooding",
                        "onset": "2026-10-19T10:00:00-05:00",
                        "expires": "2026-10-20T10:00:00-05:00",
                        "affectedZones": ["https://api.weather.gov/zones/county/TXC201"],
                        "messageType": "Alert",
                    },
                    "geometry": {"type": "Point", "coordinates": [-95.4, 29.8]},
                },
                {"properties": {"event": "No identifier"}},
            ]
        }
        alerts = await NWSAlertFetcher(mock_client(json_handler(payload))).fetch()

        assert len(alerts) == 1
        alert = alerts[0]
        assert (alert.external_id, alert.event, alert.severity, alert.area_desc) == (
            "urn:oid:2.49.0.1.840.0.1",
            "Flood Warning",
            "Severe",
            "Harris, TX",
        )
        assert alert.expires == datetime(2026, 10, 20, 15, 0, tzinfo=timezone.utc)
        assert alert.geometry["type"] == "Point"
        assert alert.data["affectedZones"] == ["https://api.weather.gov/zones/county/TXC201"]
        assert alert.data["messageType"] == "Alert"


class TestNews:
    """GDELT article identifiers"""

    ARTICLES = {
        "articles": [
            {"url": "https://news.test/story", "title": "Chip export rules", "seendate": "20261019T101500Z", "domain": "news.test"},
            {"url": "https://news.test/story", "title": "Chip export rules (dup)", "seendate": "20261019T101500Z", "domain": "news.test"},
            {"url": "  ", "title": "No link"},
        ]
    }

    @pytest.mark.asyncio
    async def test_identifiers_stable_across_fetches(self, mock_client):
        fetcher = GdeltNewsFetcher("tech", mock_client(json_handler(self.ARTICLES)), limiter=RateLimiter(0))

        first = await fetcher.fetch()
        second = await fetcher.fetch()

        assert [i.external_id for i in first] == [i.external_id for i in second]
        assert [i.external_id for i in first] == [article_id("tech", "https://news.test/story")]
        assert len(first[0].external_id) == len("gdelt-tech-") + 16
        assert first[0].published_at == datetime(2026, 10, 19, 10, 15, tzinfo=timezone.utc)
        assert first[0].source == "news.test"

    @pytest.mark.asyncio
    async def test_plain_text_reply_gives_nothing(self, mock_client):
        client = mock_client(lambda request: httpx.Response(200, text="Please limit requests to one every 5 seconds"))
        assert await GdeltNewsFetcher("ai", client, limiter=RateLimiter(0)).fetch() == []


UNREACHABLE_FETCHERS = [
    pytest.param(lambda c: USGSEarthquakeFetcher(c), id="usgs"),
    pytest.param(lambda c: WattTimeGridFetcher(c, username="u", password="p"), id="watttime"),
    pytest.param(lambda c: IODAOutageFetcher(c), id="ioda"),
    pytest.param(lambda c: CoinGeckoCryptoFetcher(c), id="coingecko"),
    pytest.param(lambda c: FinnhubQuoteFetcher("index", INDICES[:2], c, api_key="k", limiter=RateLimiter(0)), id="finnhub"),
    pytest.param(lambda c: GdeltNewsFetcher("tech", c, RateLimiter(0)), id="gdelt"),
    pytest.param(lambda c: SafecastRadiationFetcher(c), id="safecast"),
    pytest.param(lambda c: ReliefWebOutbreakFetcher(c), id="reliefweb"),
    pytest.param(lambda c: PolymarketFetcher(c), id="polymarket"),
    pytest.param(lambda c: WhaleAlertFetcher(c, api_key="k"), id="whale-alert"),
    pytest.param(lambda c: VIEWSConflictFetcher(c), id="views"),
    pytest.param(lambda c: NHCCycloneFetcher(c), id="nhc"),
    pytest.param(lambda c: SPCOutlookFetcher(c), id="spc"),
    pytest.param(lambda c: NWSAlertFetcher(c), id="nws"),
    pytest.param(lambda c: USASpendingContractFetcher(c), id="usaspending"),
    pytest.param(lambda c: HNLayoffFetcher(c), id="hn-layoffs"),
    pytest.param(lambda c: FREDBalanceFetcher(c, api_key="k"), id="fred"),
]


class TestUnreachableUpstream:
    """Every fetcher degrades to its documented fallback without raising"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("factory", UNREACHABLE_FETCHERS)
    async def test_fetch_returns_fallback(self, factory, unreachable_client):
        fetcher = factory(unreachable_client)
        assert await fetcher.fetch() == fetcher.fallback()

    @pytest.mark.asyncio
    async def test_world_leaders_keep_roster_without_news(self, unreachable_client):
        leaders = await WorldLeaderFetcher(unreachable_client, batch_interval=0).fetch()
        assert len(leaders) == len(WORLD_LEADERS)
        assert all(leader.data["news"] == [] for leader in leaders)
