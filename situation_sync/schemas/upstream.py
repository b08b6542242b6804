"""Input schemas for upstream API payloads.

Envelopes are parsed leniently and each item is validated on its own, so one
malformed element only drops itself. Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# =============================================================================
# News / GDELT
# =============================================================================
class GdeltArticle(UpstreamModel):
    url: str
    title: str = ""
    seendate: Optional[str] = None
    domain: Optional[str] = None
    socialimage: Optional[str] = None


class GdeltResponse(UpstreamModel):
    articles: List[Dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Markets
# =============================================================================
class CoinGeckoPrice(UpstreamModel):
    usd: float
    usd_24h_change: Optional[float] = None


class FinnhubQuote(UpstreamModel):
    c: float  # current
    d: Optional[float] = None  # change
    dp: Optional[float] = None  # percent change
    h: Optional[float] = None
    l: Optional[float] = None  # noqa: E741
    o: Optional[float] = None
    pc: float = 0.0  # previous close
    t: Optional[int] = None


# =============================================================================
# Hazards
# =============================================================================
class USGSProperties(UpstreamModel):
    mag: Optional[float] = None
    place: Optional[str] = None
    time: int
    url: Optional[str] = None


class USGSGeometry(UpstreamModel):
    coordinates: List[float]


class USGSFeature(UpstreamModel):
    id: str
    properties: USGSProperties
    geometry: USGSGeometry


class FeatureCollection(UpstreamModel):
    features: List[Dict[str, Any]] = Field(default_factory=list)


class WattTimeLogin(UpstreamModel):
    token: str


class WattTimeRegion(UpstreamModel):
    region: str


class WattTimePoint(UpstreamModel):
    value: Optional[float] = None
    point_time: Optional[str] = None


class WattTimeSignal(UpstreamModel):
    data: List[WattTimePoint] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)


class IODAEntity(UpstreamModel):
    code: str
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class IODASignal(UpstreamModel):
    entity: IODAEntity
    datasource: str
    value: float
    start: Optional[int] = Field(default=None, alias="from")


class IODAResponse(UpstreamModel):
    data: List[Any] = Field(default_factory=list)


# =============================================================================
# Environmental
# =============================================================================
class SafecastMeasurement(UpstreamModel):
    id: int
    value: float
    unit: str
    latitude: float
    longitude: float
    captured_at: str
    device_id: Optional[int] = None
    location_name: Optional[str] = None


class ReliefWebCountry(UpstreamModel):
    name: str


class ReliefWebFields(UpstreamModel):
    name: str = ""
    date: Dict[str, Any] = Field(default_factory=dict)
    country: List[ReliefWebCountry] = Field(default_factory=list)
    url: Optional[str] = None
    status: Optional[str] = None


class ReliefWebDisaster(UpstreamModel):
    id: Union[int, str]
    fields: ReliefWebFields


class ReliefWebResponse(UpstreamModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Intel
# =============================================================================
class PolymarketToken(UpstreamModel):
    outcome: Optional[str] = None
    price: Optional[float] = None


class PolymarketMarket(UpstreamModel):
    id: str = Field(validation_alias=AliasChoices("id", "condition_id"))
    question: str
    slug: Optional[str] = Field(default=None, validation_alias=AliasChoices("slug", "market_slug"))
    outcome_prices: Optional[Union[str, List[Any]]] = Field(default=None, alias="outcomePrices")
    tokens: List[PolymarketToken] = Field(default_factory=list)
    volume: Optional[float] = None
    category: Optional[str] = None
    end_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("endDate", "end_date_iso"))


class PolymarketResponse(UpstreamModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)


class WhaleParty(UpstreamModel):
    owner: Optional[str] = None
    address: Optional[str] = None


class WhaleAlertTransaction(UpstreamModel):
    id: Optional[Union[int, str]] = None
    blockchain: str
    symbol: str
    amount: float
    amount_usd: float
    sender: WhaleParty = Field(default_factory=WhaleParty, alias="from")
    receiver: WhaleParty = Field(default_factory=WhaleParty, alias="to")
    timestamp: int
    hash: str


class WhaleAlertResponse(UpstreamModel):
    transactions: List[Dict[str, Any]] = Field(default_factory=list)


class VIEWSPrediction(UpstreamModel):
    country_id: int
    month_id: int
    name: str
    isoab: str
    year: int
    month: int
    main_mean: float
    main_dich: float


class VIEWSResponse(UpstreamModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    start_date: Optional[int] = None


# =============================================================================
# Storms / weather
# =============================================================================
class NHCAdvisory(UpstreamModel):
    adv_num: Optional[str] = Field(default=None, alias="advNum")


class NHCStorm(UpstreamModel):
    id: Optional[str] = None
    bin_number: Optional[str] = Field(default=None, alias="binNumber")
    name: Optional[str] = None
    classification: Optional[str] = None
    intensity: Optional[float] = None
    pressure: Optional[float] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    latitude_numeric: Optional[float] = Field(default=None, alias="latitudeNumeric")
    longitude_numeric: Optional[float] = Field(default=None, alias="longitudeNumeric")
    last_update: Optional[str] = Field(default=None, alias="lastUpdate")
    movement_dir: Optional[float] = Field(default=None, alias="movementDir")
    movement_speed: Optional[float] = Field(default=None, alias="movementSpeed")
    public_advisory: Optional[NHCAdvisory] = Field(default=None, alias="publicAdvisory")


class NHCResponse(UpstreamModel):
    active_storms: List[Dict[str, Any]] = Field(default_factory=list, alias="activeStorms")


class SPCProperties(UpstreamModel):
    label: Optional[str] = Field(default=None, alias="LABEL")
    label2: Optional[str] = Field(default=None, alias="LABEL2")
    stroke: Optional[str] = None
    fill: Optional[str] = None
    valid: Optional[str] = Field(default=None, validation_alias=AliasChoices("VALID", "valid"))
    expire: Optional[str] = Field(default=None, validation_alias=AliasChoices("EXPIRE", "expire"))
    product_type: Optional[str] = Field(default=None, alias="PRODUCT_TYPE")


class SPCFeature(UpstreamModel):
    id: Optional[Union[int, str]] = None
    properties: SPCProperties = Field(default_factory=SPCProperties)
    geometry: Optional[Dict[str, Any]] = None


class NWSAlertProperties(UpstreamModel):
    id: str
    event: str = ""
    severity: str = "Unknown"
    urgency: str = "Unknown"
    certainty: str = "Unknown"
    area_desc: str = Field(default="", alias="areaDesc")
    headline: Optional[str] = None
    description: str = ""
    instruction: Optional[str] = None
    onset: Optional[str] = None
    expires: Optional[str] = None
    geocode: Dict[str, Any] = Field(default_factory=dict)
    affected_zones: List[str] = Field(default_factory=list, alias="affectedZones")
    sent: Optional[str] = None
    effective: Optional[str] = None
    ends: Optional[str] = None
    status: Optional[str] = None
    message_type: Optional[str] = Field(default=None, alias="messageType")
    category: Optional[str] = None
    sender: Optional[str] = None
    sender_name: Optional[str] = Field(default=None, alias="senderName")
    response: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)


class NWSAlertFeature(UpstreamModel):
    properties: NWSAlertProperties
    geometry: Optional[Dict[str, Any]] = None


# =============================================================================
# Slow-moving sources
# =============================================================================
class USASpendingAward(UpstreamModel):
    award_id: str = Field(validation_alias=AliasChoices("Award_ID", "Award ID"))
    recipient_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("Recipient_Name", "Recipient Name"))
    award_amount: float = Field(validation_alias=AliasChoices("Award_Amount", "Award Amount"))
    awarding_agency: Optional[str] = Field(default=None, validation_alias=AliasChoices("Awarding_Agency", "Awarding Agency"))
    description: Optional[str] = Field(default=None, validation_alias=AliasChoices("Award_Description", "Description"))
    start_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("Start_Date", "Start Date"))
    state: Optional[str] = Field(default=None, validation_alias=AliasChoices("Recipient_State_Code", "Place of Performance State Code"))
    naics_code: Optional[Any] = Field(default=None, validation_alias=AliasChoices("NAICS_Code", "NAICS"))
    contract_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("Contract_Award_Type", "Contract Award Type"))


class USASpendingResponse(UpstreamModel):
    results: List[Dict[str, Any]] = Field(default_factory=list)


class HNHit(UpstreamModel):
    object_id: Optional[str] = Field(default=None, alias="objectID")
    title: str = ""
    created_at: Optional[str] = None
    url: Optional[str] = None


class HNSearchResponse(UpstreamModel):
    hits: List[Dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Fed
# =============================================================================
class FREDObservation(UpstreamModel):
    date: str
    value: str


class FREDResponse(UpstreamModel):
    observations: List[FREDObservation] = Field(default_factory=list)
