"""Static geographic lookup tables.

All tables are read-only views; fetchers receive them through their constructors.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Centroid:
    lat: float
    lon: float
    name: str = ""


@dataclass(frozen=True)
class GridRegion:
    name: str
    lat: float
    lon: float
    country: str
    country_code: str
    area_km2: int


@dataclass(frozen=True)
class ConflictPair:
    source: str  # ISO3
    target: str  # ISO3
    description: str


def _freeze(table: dict) -> Mapping:
    return MappingProxyType(table)


# Country name -> centroid, used to geocode records that only carry a place name
COUNTRY_COORDS: Mapping[str, Centroid] = _freeze(
    {
        "Afghanistan": Centroid(33.93, 67.71),
        "Algeria": Centroid(28.03, 1.66),
        "Angola": Centroid(-11.2, 17.87),
        "Argentina": Centroid(-38.42, -63.62),
        "Australia": Centroid(-25.27, 133.78),
        "Bangladesh": Centroid(23.68, 90.36),
        "Brazil": Centroid(-14.24, -51.93),
        "Burkina Faso": Centroid(12.24, -1.56),
        "Burundi": Centroid(-3.37, 29.92),
        "Cambodia": Centroid(12.57, 104.99),
        "Cameroon": Centroid(7.37, 12.35),
        "Canada": Centroid(56.13, -106.35),
        "Chad": Centroid(15.45, 18.73),
        "Chile": Centroid(-35.68, -71.54),
        "China": Centroid(35.86, 104.2),
        "Colombia": Centroid(4.57, -74.3),
        "Democratic Republic of the Congo": Centroid(-4.04, 21.76),
        "DRC": Centroid(-4.04, 21.76),
        "DR Congo": Centroid(-4.04, 21.76),
        "Ecuador": Centroid(-1.83, -78.18),
        "Egypt": Centroid(26.82, 30.8),
        "Ethiopia": Centroid(9.15, 40.49),
        "France": Centroid(46.23, 2.21),
        "Germany": Centroid(51.17, 10.45),
        "Ghana": Centroid(7.95, -1.02),
        "Guinea": Centroid(9.95, -9.7),
        "Haiti": Centroid(18.97, -72.29),
        "India": Centroid(20.59, 78.96),
        "Indonesia": Centroid(-0.79, 113.92),
        "Iran": Centroid(32.43, 53.69),
        "Iraq": Centroid(33.22, 43.68),
        "Israel": Centroid(31.05, 34.85),
        "Italy": Centroid(41.87, 12.57),
        "Japan": Centroid(36.2, 138.25),
        "Kenya": Centroid(-0.02, 37.91),
        "Lebanon": Centroid(33.85, 35.86),
        "Liberia": Centroid(6.43, -9.43),
        "Libya": Centroid(26.34, 17.23),
        "Madagascar": Centroid(-18.77, 46.87),
        "Malawi": Centroid(-13.25, 34.3),
        "Malaysia": Centroid(4.21, 101.98),
        "Mali": Centroid(17.57, -4.0),
        "Mexico": Centroid(23.63, -102.55),
        "Morocco": Centroid(31.79, -7.09),
        "Mozambique": Centroid(-18.67, 35.53),
        "Myanmar": Centroid(21.91, 95.96),
        "Nepal": Centroid(28.39, 84.12),
        "Niger": Centroid(17.61, 8.08),
        "Nigeria": Centroid(9.08, 8.68),
        "Pakistan": Centroid(30.38, 69.35),
        "Peru": Centroid(-9.19, -75.02),
        "Philippines": Centroid(12.88, 121.77),
        "Poland": Centroid(51.92, 19.15),
        "Russia": Centroid(61.52, 105.32),
        "Rwanda": Centroid(-1.94, 29.87),
        "Saudi Arabia": Centroid(23.89, 45.08),
        "Senegal": Centroid(14.5, -14.45),
        "Sierra Leone": Centroid(8.46, -11.78),
        "Somalia": Centroid(5.15, 46.2),
        "South Africa": Centroid(-30.56, 22.94),
        "South Sudan": Centroid(6.88, 31.31),
        "Spain": Centroid(40.46, -3.75),
        "Sri Lanka": Centroid(7.87, 80.77),
        "Sudan": Centroid(12.86, 30.22),
        "Syria": Centroid(34.8, 39.0),
        "Taiwan": Centroid(23.7, 120.96),
        "Tanzania": Centroid(-6.37, 34.89),
        "Thailand": Centroid(15.87, 100.99),
        "Tunisia": Centroid(33.89, 9.54),
        "Turkey": Centroid(38.96, 35.24),
        "Uganda": Centroid(1.37, 32.29),
        "Ukraine": Centroid(48.38, 31.17),
        "United Kingdom": Centroid(55.38, -3.44),
        "United States": Centroid(37.09, -95.71),
        "USA": Centroid(37.09, -95.71),
        "Venezuela": Centroid(6.42, -66.59),
        "Vietnam": Centroid(14.06, 108.28),
        "Yemen": Centroid(15.55, 48.52),
        "Zambia": Centroid(-13.13, 27.85),
        "Zimbabwe": Centroid(-19.02, 29.15),
    }
)

# ISO3 -> centroid for conflict forecasts
ISO3_CENTROIDS: Mapping[str, Centroid] = _freeze(
    {
        "UKR": Centroid(48.38, 31.17, "Ukraine"),
        "ISR": Centroid(31.05, 34.85, "Israel"),
        "PSE": Centroid(31.95, 35.23, "Palestine"),
        "ETH": Centroid(9.15, 40.49, "Ethiopia"),
        "SOM": Centroid(5.15, 46.2, "Somalia"),
        "AFG": Centroid(33.94, 67.71, "Afghanistan"),
        "YEM": Centroid(15.55, 48.52, "Yemen"),
        "SYR": Centroid(34.8, 39.0, "Syria"),
        "MMR": Centroid(21.91, 95.96, "Myanmar"),
        "PAK": Centroid(30.38, 69.35, "Pakistan"),
        "NGA": Centroid(9.08, 8.68, "Nigeria"),
        "COD": Centroid(-4.04, 21.76, "DR Congo"),
        "MLI": Centroid(17.57, -4.0, "Mali"),
        "BFA": Centroid(12.24, -1.56, "Burkina Faso"),
        "SDN": Centroid(12.86, 30.22, "Sudan"),
        "SSD": Centroid(6.88, 31.31, "South Sudan"),
        "RUS": Centroid(61.52, 105.32, "Russia"),
        "IRN": Centroid(32.43, 53.69, "Iran"),
        "IRQ": Centroid(33.22, 43.68, "Iraq"),
        "LBN": Centroid(33.85, 35.86, "Lebanon"),
        "CHN": Centroid(35.86, 104.2, "China"),
        "TWN": Centroid(23.7, 121.0, "Taiwan"),
        "KOR": Centroid(35.91, 127.77, "South Korea"),
        "PRK": Centroid(40.34, 127.51, "North Korea"),
        "IND": Centroid(20.59, 78.96, "India"),
        "ERI": Centroid(15.18, 39.78, "Eritrea"),
    }
)

CONFLICT_PAIRS: tuple[ConflictPair, ...] = (
    ConflictPair("RUS", "UKR", "Russia-Ukraine War"),
    ConflictPair("ISR", "LBN", "Israel-Lebanon Tensions"),
    ConflictPair("ISR", "SYR", "Israel-Syria Tensions"),
    ConflictPair("IRN", "ISR", "Iran-Israel Proxy Conflict"),
    ConflictPair("CHN", "TWN", "Cross-Strait Tensions"),
    ConflictPair("PRK", "KOR", "Korean Peninsula"),
    ConflictPair("IND", "PAK", "India-Pakistan Tensions"),
    ConflictPair("ETH", "ERI", "Ethiopia-Eritrea Tensions"),
    ConflictPair("SDN", "SSD", "Sudan-South Sudan Conflict"),
)

GRID_REGIONS: tuple[GridRegion, ...] = (
    # US ISOs
    GridRegion("CAISO", 36.7783, -119.4179, "United States", "US", 380000),
    GridRegion("ERCOT Texas", 31.0, -100.0, "United States", "US", 695000),
    GridRegion("PJM", 40.0, -77.0, "United States", "US", 500000),
    GridRegion("MISO", 41.5, -93.0, "United States", "US", 920000),
    GridRegion("ISO-NE", 42.4072, -71.3824, "United States", "US", 165000),
    GridRegion("NYISO", 42.1657, -74.9481, "United States", "US", 140000),
    GridRegion("SPP", 36.0, -97.5, "United States", "US", 650000),
    # Europe
    GridRegion("Germany", 51.1657, 10.4515, "Germany", "DE", 357000),
    GridRegion("UK", 53.5, -2.0, "United Kingdom", "GB", 243000),
    GridRegion("France", 46.2276, 2.2137, "France", "FR", 640000),
    # Asia-Pacific
    GridRegion("Japan (Tokyo)", 35.6762, 139.6503, "Japan", "JP", 378000),
    GridRegion("Australia NEM", -33.8688, 151.2093, "Australia", "AU", 4500000),
)
