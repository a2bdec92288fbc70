from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import isfinite
import logging
import warnings

logger = logging.getLogger(__name__)

# -----------------------------
# Input limits
# -----------------------------
DIAMETER_MAX_M = 10_000.0
VELOCITY_MAX_KMS = 100.0
ANGLE_MIN_DEG = 0.0
ANGLE_MAX_DEG = 90.0


class Composition(str, Enum):
    ROCKY = "rocky"
    METALLIC = "metallic"
    ICY = "icy"
    CARBONACEOUS = "carbonaceous"
    MIXED = "mixed"


# Bulk densities (kg/m^3)
COMPOSITION_DENSITIES = {
    Composition.ROCKY: 3000.0,         # chondrites
    Composition.METALLIC: 7800.0,      # iron-nickel
    Composition.ICY: 1500.0,           # cometary
    Composition.CARBONACEOUS: 2500.0,
    Composition.MIXED: 2500.0,
}

COMPOSITION_ALIASES = {
    "iron": Composition.METALLIC,
    "metal": Composition.METALLIC,
    "stony": Composition.ROCKY,
}

DEFAULT_COMPOSITION = Composition.MIXED


class ValidationError(ValueError):
    """An input field is outside its valid range. No partial result is produced."""

    def __init__(self, field: str, value, valid_range: str):
        self.field = field
        self.value = value
        self.valid_range = valid_range
        super().__init__(f"{field}={value!r} is outside the valid range {valid_range}")


class UnknownCompositionWarning(UserWarning):
    pass


@dataclass(frozen=True)
class ImpactParameters:
    diameter_m: float
    velocity_kms: float
    impact_angle_deg: float = 45.0  # to HORIZONTAL; carried, not used in the effect formulas
    composition: str = "rocky"


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ValidatedParameters:
    diameter_m: float
    velocity_kms: float
    impact_angle_deg: float
    composition: Composition
    density_kgpm3: float
    requested_composition: str
    composition_fallback: bool = False

    @property
    def velocity_mps(self) -> float:
        return self.velocity_kms * 1000.0


def _number(field: str, value) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, value, "a finite number") from None
    if not isfinite(x):
        raise ValidationError(field, value, "a finite number")
    return x


def resolve_composition(name: str | None) -> tuple[Composition, bool]:
    """
    Map a composition string to a known entry. Returns (composition, fell_back).
    Unknown strings fall back to mixed with an UnknownCompositionWarning.
    """
    key = (name or "").strip().lower()
    if key in COMPOSITION_ALIASES:
        return COMPOSITION_ALIASES[key], False
    try:
        return Composition(key), False
    except ValueError:
        pass
    density = COMPOSITION_DENSITIES[DEFAULT_COMPOSITION]
    logger.warning(f"[params] unknown composition={name!r}; using {DEFAULT_COMPOSITION.value} ({density:g} kg/m^3)")
    warnings.warn(
        f"Unknown composition {name!r}; falling back to {DEFAULT_COMPOSITION.value} density {density:g} kg/m^3",
        UnknownCompositionWarning,
        stacklevel=3,
    )
    return DEFAULT_COMPOSITION, True


def validate_parameters(params: ImpactParameters) -> ValidatedParameters:
    diameter = _number("diameter_m", params.diameter_m)
    if not 0.0 < diameter <= DIAMETER_MAX_M:
        raise ValidationError("diameter_m", params.diameter_m, f"(0, {DIAMETER_MAX_M:g}] m")

    velocity = _number("velocity_kms", params.velocity_kms)
    if not 0.0 < velocity <= VELOCITY_MAX_KMS:
        raise ValidationError("velocity_kms", params.velocity_kms, f"(0, {VELOCITY_MAX_KMS:g}] km/s")

    angle = _number("impact_angle_deg", params.impact_angle_deg)
    if not ANGLE_MIN_DEG <= angle <= ANGLE_MAX_DEG:
        raise ValidationError("impact_angle_deg", params.impact_angle_deg,
                              f"[{ANGLE_MIN_DEG:g}, {ANGLE_MAX_DEG:g}] deg")

    composition, fell_back = resolve_composition(params.composition)
    return ValidatedParameters(
        diameter_m=diameter,
        velocity_kms=velocity,
        impact_angle_deg=angle,
        composition=composition,
        density_kgpm3=COMPOSITION_DENSITIES[composition],
        requested_composition=params.composition or "",
        composition_fallback=fell_back,
    )


def validate_location(location: GeoLocation) -> GeoLocation:
    lat = _number("latitude", location.latitude)
    if not -90.0 <= lat <= 90.0:
        raise ValidationError("latitude", location.latitude, "[-90, 90] deg")
    lon = _number("longitude", location.longitude)
    if not -180.0 <= lon <= 180.0:
        raise ValidationError("longitude", location.longitude, "[-180, 180] deg")
    return GeoLocation(lat, lon)
