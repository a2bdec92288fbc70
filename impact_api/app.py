from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import logging
import math
import warnings
from typing import Any, Dict, Optional

from .assessment import ImpactAssessment, assess
from .config import Settings, get_settings
from .geo import GeospatialClassifier, impact_zones_geojson
from .params import (GeoLocation, ImpactParameters, UnknownCompositionWarning, ValidationError,
                     validate_location, validate_parameters)
from .population import LocationDataUnavailable, place_name, population_source
from .report import analysis_sections

logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Impact Consequence Engine", version="1.0.0")


@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning(f"[validation] path={request.url.path} field={exc.field} value={exc.value!r}")
    value = exc.value
    if isinstance(value, float) and not math.isfinite(value):
        value = str(value)
    return JSONResponse(status_code=422, content={"detail": {
        "field": exc.field,
        "value": value,
        "valid_range": exc.valid_range,
        "message": str(exc),
    }})


# -------------------------------
# Health + location endpoints
# -------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}


def get_population_source(settings: Settings = Depends(get_settings)):
    return population_source(settings)


@app.get("/classify")
def classify(
    lat: float = Query(..., description="Latitude in decimal degrees"),
    lon: float = Query(..., description="Longitude in decimal degrees"),
):
    loc = validate_location(GeoLocation(lat, lon))
    c = GeospatialClassifier().classify(loc)
    return {
        "place_name": place_name(loc),
        "terrain": c.terrain,
        "is_continental": c.is_continental,
        "landmass": c.landmass,
        "distance_from_coast_km": c.distance_from_coast_km,
        "ocean_depth_m": c.ocean_depth_m,
        "coastal_elevation_m": c.coastal_elevation_m,
    }


def _lookup_density(source, loc: GeoLocation) -> tuple[Optional[float], str]:
    try:
        found = source.lookup(loc)
        return found.density_per_km2, found.place_name
    except LocationDataUnavailable as e:
        logger.warning(f"[population.unavailable] source={source.source} lat={loc.latitude} lon={loc.longitude} reason={e}")
        return None, place_name(loc)


@app.get("/population")
def population(
    lat: float = Query(..., description="Latitude in decimal degrees"),
    lon: float = Query(..., description="Longitude in decimal degrees"),
    source=Depends(get_population_source),
):
    loc = validate_location(GeoLocation(lat, lon))
    density, name = _lookup_density(source, loc)
    return {"density_per_km2": density, "source": source.source, "place_name": name}


# -------------------------------
# Impact assessment endpoints
# -------------------------------
class AsteroidIn(BaseModel):
    diameter_m: float = Field(..., description="Impactor diameter in meters, (0, 10000]")
    velocity_kms: float = Field(..., description="Impact speed in km/s, (0, 100]")
    impact_angle_deg: float = Field(45.0, description="Entry angle to horizontal in degrees, [0, 90]")
    composition: str = Field("rocky", description="rocky | metallic | iron | icy | carbonaceous | mixed")


class LocationIn(BaseModel):
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")


class AssessmentRequest(BaseModel):
    asteroid: AsteroidIn
    location: LocationIn
    lead_time_hours: Optional[float] = Field(None, description="Hours until impact; defaults from settings")
    population_density: Optional[float] = Field(None, description="People per km^2; looked up when omitted")


def _run(req: AssessmentRequest, settings: Settings, source) -> tuple[ImpactAssessment, str]:
    params = ImpactParameters(
        diameter_m=req.asteroid.diameter_m,
        velocity_kms=req.asteroid.velocity_kms,
        impact_angle_deg=req.asteroid.impact_angle_deg,
        composition=req.asteroid.composition,
    )
    # Reject bad asteroid input before any remote population call; assess() warns again.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UnknownCompositionWarning)
        validate_parameters(params)
    loc = validate_location(GeoLocation(req.location.lat, req.location.lon))
    if req.population_density is not None:
        density, name = req.population_density, place_name(loc)
    else:
        density, name = _lookup_density(source, loc)
    lead = settings.default_lead_time_hours if req.lead_time_hours is None else req.lead_time_hours
    a = assess(params, loc, density, lead, strategies=settings.defense_strategies)
    return a, name


def assessment_to_dict(a: ImpactAssessment) -> Dict[str, Any]:
    p, c = a.parameters, a.classification
    return {
        "parameters": {"diameter_m": p.diameter_m, "velocity_kms": p.velocity_kms,
                       "impact_angle_deg": p.impact_angle_deg, "composition": p.composition.value,
                       "density_kgpm3": p.density_kgpm3},
        "location": {"lat": a.location.latitude, "lon": a.location.longitude},
        "classification": {"terrain": c.terrain, "is_continental": c.is_continental,
                           "distance_from_coast_km": c.distance_from_coast_km,
                           "ocean_depth_m": c.ocean_depth_m, "coastal_elevation_m": c.coastal_elevation_m},
        "mass_kg": a.mass_kg,
        "kinetic_energy_j": a.kinetic_energy_j,
        "explosive_yield_tons": a.explosive_yield_tons,
        "crater_diameter_km": a.crater_diameter_km,
        "fireball_radius_km": a.fireball_radius_km,
        "blast_radius_km": a.blast_radius_km,
        "seismic_magnitude": a.seismic_magnitude,
        "tsunami": {"height_m": a.tsunami.height_m, "risk_band": a.tsunami.risk_band.value,
                    "affected_distance_km": a.tsunami.affected_distance_km,
                    "warning_time_hours": a.tsunami.warning_time_hours},
        "casualties": {"estimated": a.casualties.estimated, "injured": a.casualties.injured,
                       "fatalities": a.casualties.fatalities},
        "population_density": a.population_density,
        "severity": a.severity.value,
        "lead_time_hours": a.lead_time_hours,
        "defense_strategies": [
            {"type": s.type, "name": s.name, "effectiveness": s.effectiveness,
             "recommended": s.recommended, "cost_tier": s.cost_tier, "time_required": s.time_required}
            for s in a.defense_strategies
        ],
        "notes": list(a.notes),
    }


@app.post("/impact/assessment")
def impact_assessment(req: AssessmentRequest,
                      settings: Settings = Depends(get_settings),
                      source=Depends(get_population_source)):
    a, name = _run(req, settings, source)
    out = assessment_to_dict(a)
    out["place_name"] = name
    out["report"] = analysis_sections(a)
    return out


@app.post("/impact/zones")
def impact_zones(req: AssessmentRequest,
                 steps: int = Query(64, ge=8, le=512, description="Resolution of circle discretization"),
                 settings: Settings = Depends(get_settings),
                 source=Depends(get_population_source)):
    a, _ = _run(req, settings, source)
    return impact_zones_geojson(a.location, a, steps=steps)
