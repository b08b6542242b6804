"""Country-name geocoding against a static centroid table."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Tuple

from situation_sync.reference.geography import COUNTRY_COORDS, Centroid


def valid_coordinates(lat: Any, lon: Any) -> bool:
    """True for a finite pair inside [-90, 90] x [-180, 180]."""
    try:
        lat_f, lon_f = float(lat), float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        return False
    return -90 <= lat_f <= 90 and -180 <= lon_f <= 180


class CountryGeocoder:
    """Resolves a country/place name to a centroid.

    Lookup order: exact key, case-insensitive exact, then case-insensitive
    substring in either direction. Unknown names resolve to ``None``.
    """

    def __init__(self, table: Mapping[str, Centroid] = COUNTRY_COORDS):
        self.table = table
        self._lowered = [(name.lower(), centroid) for name, centroid in table.items()]

    def resolve(self, name: Optional[str]) -> Optional[Tuple[float, float]]:
        if not name or not name.strip():
            return None
        name = name.strip()

        hit = self.table.get(name)
        if hit:
            return hit.lat, hit.lon

        lowered = name.lower()
        for key, centroid in self._lowered:
            if key == lowered:
                return centroid.lat, centroid.lon

        for key, centroid in self._lowered:
            if key in lowered or lowered in key:
                return centroid.lat, centroid.lon

        return None
