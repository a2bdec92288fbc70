from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import sqrt

from .geo import GeoClassification

ENERGY_TRANSFER = 0.10           # fraction of yield coupled into the water column
MIN_EFFECTIVE_DEPTH_M = 100.0
MAX_HEIGHT_M = 100.0
MAX_AFFECTED_DISTANCE_KM = 2000.0
DEEP_WATER_SPEED_KMH = 720.0     # ~200 m/s
MIN_WARNING_TIME_H = 0.1


class TsunamiRisk(str, Enum):
    NONE = "None"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"
    EXTREME = "Extreme"


@dataclass(frozen=True)
class TsunamiEffect:
    height_m: float
    risk_band: TsunamiRisk
    affected_distance_km: float
    warning_time_hours: float


NO_TSUNAMI = TsunamiEffect(0.0, TsunamiRisk.NONE, 0.0, 0.0)


def tsunami_height_m(yield_tons: float, depth_m: float) -> float:
    """Ward & Asphaug style scaling: grows with yield, shrinks with water depth."""
    yield_kt = yield_tons / 1000.0
    h = 2.0 * (yield_kt * ENERGY_TRANSFER) ** 0.25 / sqrt(max(depth_m, MIN_EFFECTIVE_DEPTH_M) / 1000.0)
    return min(max(h, 0.0), MAX_HEIGHT_M)


def risk_band(height_m: float) -> TsunamiRisk:
    if height_m < 1.0:  return TsunamiRisk.LOW
    if height_m < 5.0:  return TsunamiRisk.MODERATE
    if height_m < 15.0: return TsunamiRisk.HIGH
    if height_m < 30.0: return TsunamiRisk.VERY_HIGH
    return TsunamiRisk.EXTREME


def affected_distance_km(yield_tons: float) -> float:
    yield_kt = yield_tons / 1000.0
    return min(200.0 * yield_kt ** 0.4, MAX_AFFECTED_DISTANCE_KM)


def warning_time_hours(distance_from_coast_km: float) -> float:
    return max(distance_from_coast_km / DEEP_WATER_SPEED_KMH, MIN_WARNING_TIME_H)


def compute_tsunami(yield_tons: float, classification: GeoClassification) -> TsunamiEffect:
    if classification.is_continental:
        return NO_TSUNAMI
    h = tsunami_height_m(yield_tons, classification.ocean_depth_m)
    return TsunamiEffect(
        height_m=h,
        risk_band=risk_band(h),
        affected_distance_km=affected_distance_km(yield_tons),
        warning_time_hours=warning_time_hours(classification.distance_from_coast_km),
    )
