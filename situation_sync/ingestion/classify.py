"""Threshold tables that turn raw upstream numbers into ordinal levels.

Every function here is pure: same input, same level. Enum members are declared
in ascending order so ``rank`` compares severities across records.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class _Ordinal(str, Enum):
    @property
    def rank(self) -> int:
        return list(type(self)).index(self)


class RadiationLevel(_Ordinal):
    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"
    DANGEROUS = "dangerous"


class Severity(_Ordinal):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class StressLevel(_Ordinal):
    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"
    CRITICAL = "critical"


class Intensity(_Ordinal):
    LOW = "low"
    ELEVATED = "elevated"
    HIGH = "high"
    CRITICAL = "critical"


class OutageSeverity(_Ordinal):
    PARTIAL = "partial"
    MAJOR = "major"


class OutbreakStatus(str, Enum):
    ACTIVE = "active"
    MONITORING = "monitoring"
    CONTAINED = "contained"


class OutlookRisk(_Ordinal):
    TSTM = "TSTM"
    MRGL = "MRGL"
    SLGT = "SLGT"
    ENH = "ENH"
    MDT = "MDT"
    HIGH = "HIGH"


class HazardType(str, Enum):
    TORNADO = "tornado"
    WIND = "wind"
    HAIL = "hail"
    CATEGORICAL = "categorical"


# -----------------------------------------------------------------------------
# Radiation
# -----------------------------------------------------------------------------
USV_TO_CPM = 350


def to_cpm(value: float, unit: str) -> float:
    return value * USV_TO_CPM if unit == "usv" else value


def radiation_level(value: float, unit: str = "cpm") -> RadiationLevel:
    cpm = to_cpm(value, unit)
    if cpm >= 350:
        return RadiationLevel.DANGEROUS
    if cpm >= 100:
        return RadiationLevel.HIGH
    if cpm >= 50:
        return RadiationLevel.ELEVATED
    return RadiationLevel.NORMAL


# -----------------------------------------------------------------------------
# Grid stress
# -----------------------------------------------------------------------------
def grid_stress_level(percent: float) -> StressLevel:
    if percent >= 98:
        return StressLevel.CRITICAL
    if percent >= 95:
        return StressLevel.HIGH
    if percent >= 85:
        return StressLevel.ELEVATED
    return StressLevel.NORMAL


_GRID_DESCRIPTIONS = {
    StressLevel.CRITICAL: "Extreme fossil fuel reliance",
    StressLevel.HIGH: "Very high fossil fuel reliance",
    StressLevel.ELEVATED: "Above-average emissions",
    StressLevel.NORMAL: "Normal emissions",
}


def grid_stress_description(level: StressLevel, percent: float) -> str:
    return f"{round(percent)}th percentile - {_GRID_DESCRIPTIONS[level]}"


# -----------------------------------------------------------------------------
# Earthquakes
# -----------------------------------------------------------------------------
def earthquake_severity(magnitude: float) -> Severity:
    if magnitude >= 7.0:
        return Severity.CRITICAL
    if magnitude >= 6.0:
        return Severity.HIGH
    if magnitude >= 5.0:
        return Severity.MODERATE
    return Severity.LOW


# -----------------------------------------------------------------------------
# Internet outages
# -----------------------------------------------------------------------------
def outage_severity(ratio: float) -> Optional[OutageSeverity]:
    """Connectivity ratio against baseline; ``None`` means no outage."""
    if ratio < 0.5:
        return OutageSeverity.MAJOR
    if ratio < 0.8:
        return OutageSeverity.PARTIAL
    return None


# -----------------------------------------------------------------------------
# Conflict forecasts
# -----------------------------------------------------------------------------
def conflict_intensity(fatalities: float, probability: float) -> Intensity:
    if fatalities >= 100 or probability >= 0.99:
        return Intensity.CRITICAL
    if fatalities >= 25 or probability >= 0.75:
        return Intensity.HIGH
    if fatalities >= 5 or probability >= 0.25:
        return Intensity.ELEVATED
    return Intensity.LOW


_CONFLICT_LABELS = {
    Intensity.CRITICAL: "Critical Conflict Risk",
    Intensity.HIGH: "High Conflict Risk",
    Intensity.ELEVATED: "Elevated Risk",
    Intensity.LOW: "Monitored Region",
}


def conflict_label(country: str, intensity: Intensity) -> str:
    return f"{country} - {_CONFLICT_LABELS[intensity]}"


def conflict_risk_description(intensity: Intensity, fatalities: float, probability: float) -> str:
    pct = round(probability * 100)
    if intensity is Intensity.CRITICAL:
        return f"CRITICAL: {pct}% probability of armed conflict. Forecast predicts ~{round(fatalities)} fatalities."
    if intensity is Intensity.HIGH:
        return f"HIGH RISK: {pct}% probability of conflict fatalities. Model predicts ~{round(fatalities)} deaths."
    if intensity is Intensity.ELEVATED:
        return f"ELEVATED: {pct}% probability of some violence. ~{fatalities:.1f} predicted fatalities."
    return f"LOW RISK: {pct}% probability of conflict. Minimal fatalities expected (~{fatalities:.1f})."


# -----------------------------------------------------------------------------
# Disease outbreaks
# -----------------------------------------------------------------------------
HIGH_FATALITY_DISEASES = ("ebola", "marburg", "mpox", "avian flu", "h5n1", "nipah", "plague")


def outbreak_severity(
    cases: Optional[int] = None,
    deaths: Optional[int] = None,
    disease: str = "",
) -> Severity:
    cases = cases or 0
    deaths = deaths or 0
    name = disease.lower()

    if any(d in name for d in HIGH_FATALITY_DISEASES):
        if deaths >= 100:
            return Severity.CRITICAL
        if deaths >= 10:
            return Severity.HIGH
        return Severity.MODERATE

    if cases >= 10000:
        return Severity.CRITICAL
    if cases >= 1000:
        return Severity.HIGH
    if cases >= 100:
        return Severity.MODERATE
    if deaths >= 10:
        return Severity.HIGH
    if deaths >= 1:
        return Severity.MODERATE
    return Severity.LOW


def outbreak_status(last_update: datetime, now: Optional[datetime] = None) -> OutbreakStatus:
    now = now or datetime.now(timezone.utc)
    days = (now - last_update).total_seconds() / 86400
    if days > 60:
        return OutbreakStatus.CONTAINED
    if days > 30:
        return OutbreakStatus.MONITORING
    return OutbreakStatus.ACTIVE


# -----------------------------------------------------------------------------
# Storms
# -----------------------------------------------------------------------------
def cyclone_category_from_wind(knots: float) -> str:
    if knots >= 157:
        return "C5"
    if knots >= 130:
        return "C4"
    if knots >= 111:
        return "C3"
    if knots >= 96:
        return "C2"
    if knots >= 74:
        return "C1"
    if knots >= 39:
        return "TS"
    return "TD"


def outlook_risk(label: str) -> OutlookRisk:
    upper = label.upper()
    if "HIGH" in upper:
        return OutlookRisk.HIGH
    if "MDT" in upper or "MODERATE" in upper:
        return OutlookRisk.MDT
    if "ENH" in upper:
        return OutlookRisk.ENH
    if "SLGT" in upper or "SLIGHT" in upper:
        return OutlookRisk.SLGT
    if "MRGL" in upper or "MARGINAL" in upper:
        return OutlookRisk.MRGL
    return OutlookRisk.TSTM


def outlook_hazard_type(label: str, product_type: Optional[str] = None) -> HazardType:
    lowered = label.lower()
    product = (product_type or "").lower()
    if "torn" in product or "torn" in lowered:
        return HazardType.TORNADO
    if "wind" in product or "wind" in lowered:
        return HazardType.WIND
    if "hail" in product or "hail" in lowered:
        return HazardType.HAIL
    return HazardType.CATEGORICAL
