from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Optional, Sequence

from .casualties import Casualties, estimate_casualties
from .defense import (
    DefenseOutcome, Severity, StrategyDescriptor,
    classify_severity, evaluate_strategies,
)
from .geo import GeoClassification, GeospatialClassifier
from .impact_model import PhysicalEffects, compute_effects
from .params import (
    COMPOSITION_DENSITIES, GeoLocation, ImpactParameters, ValidatedParameters,
    validate_location, validate_parameters,
)
from .tsunami import TsunamiEffect, compute_tsunami

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME_HOURS = 12 * 24.0


@dataclass(frozen=True)
class ImpactAssessment:
    parameters: ValidatedParameters
    location: GeoLocation
    classification: GeoClassification
    effects: PhysicalEffects
    tsunami: TsunamiEffect
    casualties: Casualties
    severity: Severity
    defense_strategies: tuple[DefenseOutcome, ...]
    population_density: Optional[float]
    lead_time_hours: float
    notes: tuple[str, ...] = ()

    # ---------- flat accessors ----------
    @property
    def mass_kg(self) -> float:
        return self.effects.mass_kg

    @property
    def kinetic_energy_j(self) -> float:
        return self.effects.kinetic_energy_j

    @property
    def explosive_yield_tons(self) -> float:
        return self.effects.explosive_yield_tons

    @property
    def crater_diameter_km(self) -> float:
        return self.effects.crater_diameter_km

    @property
    def fireball_radius_km(self) -> float:
        return self.effects.fireball_radius_km

    @property
    def blast_radius_km(self) -> float:
        return self.effects.blast_radius_km

    @property
    def seismic_magnitude(self) -> float:
        return self.effects.seismic_magnitude

    @property
    def recommended_strategies(self) -> tuple[DefenseOutcome, ...]:
        return tuple(s for s in self.defense_strategies if s.recommended)


def assess(params: ImpactParameters,
           location: GeoLocation,
           population_density: float | None = None,
           lead_time_hours: float | None = None,
           *,
           strategies: Sequence[StrategyDescriptor] | None = None,
           classifier: GeospatialClassifier | None = None) -> ImpactAssessment:
    """
    Full consequence pipeline for one impact scenario.

    Validation runs first and its ValidationError propagates unchanged; nothing
    below it executes on bad input. `population_density=None` means unknown and
    yields unknown casualties rather than an invented head count.
    """
    validated = validate_parameters(params)
    location = validate_location(location)
    lead_time = DEFAULT_LEAD_TIME_HOURS if lead_time_hours is None else float(lead_time_hours)

    effects = compute_effects(validated)
    classification = (classifier or GeospatialClassifier()).classify(location)
    tsunami = compute_tsunami(effects.explosive_yield_tons, classification)
    casualties = estimate_casualties(effects.blast_radius_km, population_density)
    severity = classify_severity(effects.explosive_yield_tons)
    defense = evaluate_strategies(lead_time, strategies)

    notes = []
    if validated.composition_fallback:
        density = COMPOSITION_DENSITIES[validated.composition]
        notes.append(f"Unknown composition '{validated.requested_composition}'; "
                     f"used {validated.composition.value} density {density:g} kg/m^3.")
    if not casualties.known:
        notes.append("Population density unavailable; casualty figures are unknown.")

    logger.info(f"[assess] d={validated.diameter_m}m v={validated.velocity_kms}km/s "
                f"comp={validated.composition.value} yield_t={effects.explosive_yield_tons:.4g} "
                f"terrain={classification.terrain} severity={severity.value}")

    return ImpactAssessment(
        parameters=validated,
        location=location,
        classification=classification,
        effects=effects,
        tsunami=tsunami,
        casualties=casualties,
        severity=severity,
        defense_strategies=defense,
        population_density=population_density,
        lead_time_hours=lead_time,
        notes=tuple(notes),
    )
