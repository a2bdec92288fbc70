from __future__ import annotations
from dataclasses import dataclass
import json
import logging
import math
import time
from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .geo import circle_feature, landmass_at
from .params import GeoLocation

logger = logging.getLogger(__name__)


class LocationDataUnavailable(RuntimeError):
    """Population data could not be obtained for a location. Callers degrade to 'unknown'."""


@dataclass(frozen=True)
class PopulationLookup:
    density_per_km2: Optional[float]
    place_name: str
    source: str


def mask_key(s: Optional[str]) -> Optional[str]:
    if not s:
        return s
    return s[:3] + "***" + s[-3:] if len(s) > 6 else "***"


# -------------------------------
# Place names
# -------------------------------
# (name, min_lat, max_lat, min_lon, max_lon)
MAJOR_CITIES = (
    ("New York City, NY", 40.7, 40.8, -74.1, -74.0),
    ("Los Angeles, CA", 34.0, 34.1, -118.3, -118.2),
    ("Miami, FL", 25.7, 25.8, -80.3, -80.2),
    ("Chicago, IL", 41.8, 41.9, -87.7, -87.6),
    ("Houston, TX", 29.7, 29.8, -95.4, -95.3),
    ("Atlanta, GA", 33.7, 33.8, -84.4, -84.3),
    ("London, UK", 51.5, 51.6, -0.2, -0.1),
    ("Paris, France", 48.8, 48.9, 2.3, 2.4),
    ("Tokyo, Japan", 35.6, 35.7, 139.7, 139.8),
    ("Sydney, Australia", -33.9, -33.8, 151.2, 151.3),
    ("Rio de Janeiro, Brazil", -23.0, -22.9, -43.2, -43.1),
)

UNKNOWN_PLACE = "Unknown location"


def place_name(location: GeoLocation) -> str:
    lat, lon = location.latitude, location.longitude
    for name, min_lat, max_lat, min_lon, max_lon in MAJOR_CITIES:
        if min_lat < lat < max_lat and min_lon < lon < max_lon:
            return name
    landmass = landmass_at(lat, lon)
    if landmass is not None:
        return landmass
    return UNKNOWN_PLACE


# -------------------------------
# Regional density table
# -------------------------------
# (region, min_lat, max_lat, min_lon, max_lon, people per km^2)
REGIONAL_DENSITIES = (
    ("Northeast US", 40.0, 45.0, -80.0, -70.0, 10_500.0),
    ("West Coast US", 32.0, 38.0, -125.0, -115.0, 8_000.0),
    ("Southeast US", 25.0, 30.0, -85.0, -80.0, 5_500.0),
    ("Western Europe", 45.0, 55.0, -10.0, 10.0, 10_000.0),
    ("East Asia", 30.0, 40.0, 130.0, 140.0, 14_000.0),
    ("South America", -40.0, -20.0, -60.0, -40.0, 2_500.0),
    ("Africa/Middle East", 20.0, 40.0, 0.0, 40.0, 1_750.0),
)


class RegionalPopulation:
    """Coarse, deterministic urban-region densities. Anything outside the table is unavailable."""
    source = "regional"

    def density(self, location: GeoLocation) -> float:
        lat, lon = location.latitude, location.longitude
        for region, min_lat, max_lat, min_lon, max_lon, density in REGIONAL_DENSITIES:
            if min_lat < lat < max_lat and min_lon < lon < max_lon:
                logger.debug(f"[population.regional] region={region} density={density}")
                return density
        raise LocationDataUnavailable(f"No regional population data for ({lat}, {lon}).")

    def lookup(self, location: GeoLocation) -> PopulationLookup:
        return PopulationLookup(self.density(location), place_name(location), self.source)


class NullPopulation:
    source = "none"

    def lookup(self, location: GeoLocation) -> PopulationLookup:
        raise LocationDataUnavailable("Population lookup is disabled.")


# -------------------------------
# WorldPop
# -------------------------------
WORLDPOP_STATS_URL = "https://api.worldpop.org/v1/services/stats"
WORLDPOP_TASK_URL = "https://api.worldpop.org/v1/tasks/{}"
PENDING_STATES = {"started", "created", "queued", "running"}


def _area_km2_of_circle(radius_km: float) -> float:
    return math.pi * radius_km * radius_km


def _radius_km_from_area(area_km2: float) -> float:
    return math.sqrt(area_km2 / math.pi)


class WorldPopPopulation:
    """
    Density = total_population / disk area, sampled on a disk around the point.
    The disk is shrunk to fit the per-request area allowance; density does not
    need the whole blast footprint.
    """
    source = "worldpop"

    def __init__(self, client: httpx.Client | None = None, api_key: Optional[str] = None,
                 dataset: str = "wpgppop", year: int = 2020, sample_radius_km: float = 10.0,
                 max_area_km2: float = 100_000.0, allowance_safety: float = 0.97,
                 max_wait_s: float = 20.0, poll_interval_s: float = 0.8):
        self.client = client
        self.api_key = api_key
        self.dataset = dataset
        self.year = year
        if not math.isfinite(sample_radius_km) or sample_radius_km <= 0:
            raise ValueError(f"sample_radius_km must be a finite number > 0, got {sample_radius_km}.")
        self.sample_radius_km = min(sample_radius_km,
                                    _radius_km_from_area(max_area_km2 * allowance_safety))
        self.max_wait_s = max_wait_s
        self.poll_interval_s = poll_interval_s

    def _get_json(self, client: httpx.Client, url: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        try:
            r = client.get(url, params=params)
            logger.debug(f"[worldpop.http] status={r.status_code} url={url}")
            r.raise_for_status()
            return r.json()
        except httpx.HTTPError as e:
            raise LocationDataUnavailable(f"WorldPop request failed: {e}") from e
        except ValueError as e:
            raise LocationDataUnavailable(f"WorldPop returned non-JSON: {e}") from e

    def _fetch_task_result(self, client: httpx.Client, taskid: str) -> Dict[str, Any]:
        """Poll /v1/tasks/{taskid} until finished or timeout."""
        deadline = time.monotonic() + self.max_wait_s
        attempt = 0
        while True:
            attempt += 1
            last = self._get_json(client, WORLDPOP_TASK_URL.format(taskid))
            status, error = last.get("status"), last.get("error")
            logger.debug(f"[worldpop.task] attempt#{attempt} taskid={taskid} state={status} error={error}")
            if error:
                raise LocationDataUnavailable(last.get("error_message") or "WorldPop task failed.")
            if status == "finished":
                return last.get("data") or {}
            if time.monotonic() >= deadline:
                raise LocationDataUnavailable(f"WorldPop task {taskid} is still {status}.")
            time.sleep(self.poll_interval_s)

    def total_population(self, client: httpx.Client, location: GeoLocation) -> float:
        gj = {"type": "FeatureCollection",
              "features": [circle_feature(location, self.sample_radius_km, {})]}
        params: Dict[str, Any] = {
            "dataset": self.dataset,
            "year": self.year,
            "geojson": json.dumps(gj, separators=(",", ":")),
            "runasync": "false",
        }
        if self.api_key:
            params["key"] = self.api_key
        logger.info(f"[worldpop.request] lat={location.latitude} lon={location.longitude} "
                    f"radius_km={self.sample_radius_km:.2f} dataset={self.dataset} year={self.year} "
                    f"key={mask_key(self.api_key)}")

        data = self._get_json(client, WORLDPOP_STATS_URL, params)
        payload = data.get("data") or {}
        if isinstance(payload, dict) and "total_population" in payload:
            return float(payload["total_population"])
        if data.get("error"):
            raise LocationDataUnavailable(data.get("error_message") or "WorldPop reported an error.")
        if data.get("taskid") and (data.get("status") in PENDING_STATES or data.get("status") == "finished"):
            tdata = self._fetch_task_result(client, data["taskid"])
            if "total_population" in tdata:
                return float(tdata["total_population"])
        raise LocationDataUnavailable("WorldPop payload missing 'total_population'.")

    def lookup(self, location: GeoLocation) -> PopulationLookup:
        if self.client is not None:
            pop = self.total_population(self.client, location)
        else:
            with httpx.Client(timeout=60.0) as client:
                pop = self.total_population(client, location)
        density = pop / _area_km2_of_circle(self.sample_radius_km)
        logger.info(f"[worldpop.done] population={pop} density_per_km2={density:.2f}")
        return PopulationLookup(density, place_name(location), self.source)


def population_source(settings: Settings):
    if settings.population_source == "worldpop":
        return WorldPopPopulation(
            api_key=settings.worldpop_api_key,
            dataset=settings.worldpop_dataset,
            year=settings.worldpop_year,
            sample_radius_km=settings.worldpop_sample_radius_km,
        )
    if settings.population_source == "regional":
        return RegionalPopulation()
    return NullPopulation()
