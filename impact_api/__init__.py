from .assessment import ImpactAssessment, assess
from .casualties import Casualties, estimate_casualties
from .defense import (
    DefenseOutcome, Severity, StrategyDescriptor, STRATEGY_CATALOG,
    classify_severity, evaluate_strategies,
)
from .geo import GeoClassification, GeospatialClassifier, impact_zones_geojson
from .impact_model import ImpactModel, PhysicalEffects, compute_effects
from .params import (
    Composition, GeoLocation, ImpactParameters, UnknownCompositionWarning,
    ValidatedParameters, ValidationError, validate_location, validate_parameters,
)
from .tsunami import TsunamiEffect, TsunamiRisk, compute_tsunami

__version__ = "1.0.0"
