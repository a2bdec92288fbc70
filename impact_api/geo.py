from __future__ import annotations
from dataclasses import dataclass
import logging
import math
import random
from typing import Optional

from .params import GeoLocation

logger = logging.getLogger(__name__)

R_EARTH_KM = 6371.0088

# Coarse landmass boxes: (name, min_lat, max_lat, min_lon, max_lon)
LANDMASS_BOXES = (
    ("North America", 15.0, 85.0, -180.0, -50.0),
    ("South America", -60.0, 15.0, -85.0, -30.0),
    ("Europe", 35.0, 75.0, -25.0, 45.0),
    ("Asia", 15.0, 75.0, 45.0, 180.0),
    ("Africa", -35.0, 40.0, -20.0, 55.0),
    ("Australia", -50.0, -10.0, 110.0, 180.0),
    ("Antarctica", -90.0, -60.0, -180.0, 180.0),
)

# Reference points on major coastlines (lat, lon)
MAJOR_COASTS = (
    ("New York", 40.7128, -74.0060),
    ("London", 51.5074, -0.1278),
    ("Tokyo", 35.6762, 139.6503),
    ("Sydney", -33.8688, 151.2093),
    ("Rio de Janeiro", -22.9068, -43.1729),
    ("Los Angeles", 33.7405, -118.2755),
    ("Lisbon", 38.7223, -9.1393),
    ("Cape Town", -33.9249, 18.4241),
    ("Mumbai", 19.0760, 72.8777),
    ("Shanghai", 31.2304, 121.4737),
    ("Lima", -12.0464, -77.0428),
    ("Honolulu", 21.3069, -157.8583),
)

# Ocean depth tiers by distance from coast: (max_distance_km, depth_m)
SHELF_MAX_KM, SHELF_DEPTH_M = 50.0, 100.0
SLOPE_MAX_KM, SLOPE_DEPTH_M = 200.0, 1500.0
DEEP_OCEAN_DEPTH_M = 4000.0

# Coastal elevation bands (m): (region, min_lat, max_lat, min_lon, max_lon, low, high); first match wins
ELEVATION_BANDS = (
    ("US West Coast", 25.0, 50.0, -125.0, -115.0, 500.0, 2000.0),
    ("US East Coast", 25.0, 50.0, -80.0, -65.0, 50.0, 250.0),
    ("Gulf Coast", 25.0, 35.0, -100.0, -80.0, 10.0, 60.0),
    ("Mediterranean", 35.0, 45.0, -10.0, 40.0, 200.0, 1000.0),
    ("Atlantic Europe", 35.0, 50.0, -10.0, 5.0, 100.0, 500.0),
    ("North Sea", 50.0, 60.0, -5.0, 10.0, 20.0, 100.0),
    ("Japan", 30.0, 45.0, 130.0, 145.0, 300.0, 1000.0),
    ("China", 20.0, 40.0, 110.0, 125.0, 100.0, 400.0),
    ("India", 8.0, 25.0, 70.0, 85.0, 50.0, 250.0),
    ("Great Dividing Range", -50.0, -10.0, 150.0, 155.0, 400.0, 1200.0),
    ("Western Australia", -50.0, -10.0, 110.0, 120.0, 100.0, 400.0),
    ("Andes", -60.0, 15.0, -85.0, -70.0, 1000.0, 3000.0),
    ("Brazilian Coast", -60.0, 15.0, -50.0, -30.0, 50.0, 250.0),
    ("Atlas Mountains", 30.0, 40.0, -10.0, 10.0, 800.0, 2000.0),
    ("South Africa", -35.0, -25.0, 15.0, 35.0, 200.0, 800.0),
)
DEFAULT_ELEVATION_BAND = (50.0, 200.0)


@dataclass(frozen=True)
class GeoClassification:
    is_continental: bool
    distance_from_coast_km: float
    ocean_depth_m: float
    coastal_elevation_m: float
    landmass: Optional[str] = None

    @property
    def terrain(self) -> str:
        return "Continental" if self.is_continental else "Oceanic"


def _in_box(lat: float, lon: float, min_lat: float, max_lat: float, min_lon: float, max_lon: float) -> bool:
    return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    φ1, φ2 = math.radians(lat1), math.radians(lat2)
    dφ = φ2 - φ1
    dλ = math.radians(lon2 - lon1)
    a = math.sin(dφ/2)**2 + math.cos(φ1)*math.cos(φ2)*math.sin(dλ/2)**2
    return 2 * R_EARTH_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def landmass_at(lat: float, lon: float) -> Optional[str]:
    for name, *box in LANDMASS_BOXES:
        if _in_box(lat, lon, *box):
            return name
    return None


def distance_from_coast_km(lat: float, lon: float) -> float:
    return min(haversine_km(lat, lon, c_lat, c_lon) for _, c_lat, c_lon in MAJOR_COASTS)


def ocean_depth_m(distance_km: float) -> float:
    if distance_km < SHELF_MAX_KM:
        return SHELF_DEPTH_M
    if distance_km < SLOPE_MAX_KM:
        return SLOPE_DEPTH_M
    return DEEP_OCEAN_DEPTH_M


def elevation_band(lat: float, lon: float) -> tuple[str | None, float, float]:
    for region, *rest in ELEVATION_BANDS:
        box, (low, high) = rest[:4], rest[4:]
        if _in_box(lat, lon, *box):
            return region, low, high
    return None, *DEFAULT_ELEVATION_BAND


class GeospatialClassifier:
    """
    Continental vs oceanic bucket + coarse depth/elevation for an impact point.
    Without `rng` the elevation is the midpoint of its regional band; pass a
    seeded random.Random to spread it across the band reproducibly.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng

    def coastal_elevation_m(self, lat: float, lon: float) -> float:
        _, low, high = elevation_band(lat, lon)
        if self.rng is None:
            return 0.5 * (low + high)
        return low + self.rng.random() * (high - low)

    def classify(self, location: GeoLocation) -> GeoClassification:
        lat, lon = location.latitude, location.longitude
        landmass = landmass_at(lat, lon)
        dist = distance_from_coast_km(lat, lon)
        if landmass is not None:
            out = GeoClassification(True, dist, 0.0, self.coastal_elevation_m(lat, lon), landmass)
        else:
            out = GeoClassification(False, dist, ocean_depth_m(dist), 0.0)
        logger.debug(f"[geo.classify] lat={lat} lon={lon} terrain={out.terrain} coast_km={dist:.1f}")
        return out


# -----------------------------
# Map output (GeoJSON circles)
# -----------------------------
def _destination_point(lon_deg: float, lat_deg: float, bearing_rad: float, distance_km: float):
    """Point reached from (lon,lat) going 'distance_km' along 'bearing_rad' on a sphere."""
    δ = distance_km / R_EARTH_KM
    φ1 = math.radians(lat_deg)
    λ1 = math.radians(lon_deg)
    θ = bearing_rad

    sinφ2 = math.sin(φ1)*math.cos(δ) + math.cos(φ1)*math.sin(δ)*math.cos(θ)
    φ2 = math.asin(sinφ2)
    y = math.sin(θ)*math.sin(δ)*math.cos(φ1)
    x = math.cos(δ) - math.sin(φ1)*math.sin(φ2)
    λ2 = λ1 + math.atan2(y, x)
    # normalize lon to [-180, 180)
    lon2 = math.degrees((λ2 + math.pi) % (2*math.pi) - math.pi)
    return lon2, math.degrees(φ2)


def circle_feature(location: GeoLocation, radius_km: float, properties: dict, steps: int = 64) -> dict:
    """Closed-ring polygon approximating a circle of `radius_km` around the impact point."""
    coords = []
    for i in range(steps + 1):
        b = 2 * math.pi * (i / steps)
        x, y = _destination_point(location.longitude, location.latitude, b, radius_km)
        coords.append([x, y])
    coords[-1] = coords[0]
    return {
        "type": "Feature",
        "properties": {**properties, "radius_km": radius_km, "radius_m": radius_km * 1000.0},
        "geometry": {"type": "Polygon", "coordinates": [coords]},
    }


def impact_zones_geojson(location: GeoLocation, assessment, steps: int = 64) -> dict:
    """
    Damage-zone circles for the map renderer, largest first so smaller
    zones draw on top.
    """
    zones = [
        ("blast", assessment.blast_radius_km),
        ("fireball", assessment.fireball_radius_km),
        ("crater", assessment.crater_diameter_km / 2.0),
    ]
    if assessment.tsunami.affected_distance_km > 0.0:
        zones.append(("tsunami", assessment.tsunami.affected_distance_km))
    zones.sort(key=lambda z: z[1], reverse=True)
    features = [circle_feature(location, r, {"zone": name}, steps=steps) for name, r in zones]
    logger.debug(f"[geojson.zones] center=[{location.longitude},{location.latitude}] zones={[z for z, _ in zones]}")
    return {"type": "FeatureCollection", "features": features}
