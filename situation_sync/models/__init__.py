from situation_sync.models.base import Base
from situation_sync.models.environmental import DiseaseOutbreak, RadiationReading
from situation_sync.models.fed import FedBalance
from situation_sync.models.hazards import Earthquake, GridStress, Outage
from situation_sync.models.intel import Conflict, Prediction, WhaleTransaction
from situation_sync.models.markets import MarketData
from situation_sync.models.news import NewsItem
from situation_sync.models.slow import GovContract, Layoff, WorldLeader
from situation_sync.models.storms import ConvectiveOutlook, TropicalCyclone
from situation_sync.models.sync_status import SyncStatus
from situation_sync.models.weather import WeatherAlert

__all__ = [
    "Base",
    "MarketData",
    "NewsItem",
    "WeatherAlert",
    "Earthquake",
    "GridStress",
    "Outage",
    "TropicalCyclone",
    "ConvectiveOutlook",
    "Prediction",
    "WhaleTransaction",
    "Conflict",
    "RadiationReading",
    "DiseaseOutbreak",
    "GovContract",
    "Layoff",
    "WorldLeader",
    "FedBalance",
    "SyncStatus",
]
