from __future__ import annotations
from dataclasses import dataclass
from math import pi, floor, isfinite
from typing import Optional

from .params import ValidationError

MAX_CASUALTY_RATE = 0.9
INJURED_SHARE = 0.3


@dataclass(frozen=True)
class Casualties:
    """Head counts inside the blast radius. All None when population density is unknown."""
    estimated: Optional[int]
    injured: Optional[int]
    fatalities: Optional[int]

    @property
    def known(self) -> bool:
        return self.estimated is not None


UNKNOWN_CASUALTIES = Casualties(None, None, None)


def round_half_up(x: float) -> int:
    return int(floor(x + 0.5))


def estimate_casualties(blast_radius_km: float, population_density: float | None) -> Casualties:
    if population_density is None:
        return UNKNOWN_CASUALTIES
    if not isfinite(population_density) or population_density < 0.0:
        raise ValidationError("population_density", population_density, "[0, inf) people/km^2")

    affected_area_km2 = pi * blast_radius_km**2
    affected_population = affected_area_km2 * population_density
    rate = min(MAX_CASUALTY_RATE, blast_radius_km / 100.0) if blast_radius_km > 0.0 else 0.0
    estimated = round_half_up(affected_population * rate)
    injured = round_half_up(estimated * INJURED_SHARE)
    # remainder instead of a second rounding keeps the split exact
    return Casualties(estimated, injured, estimated - injured)
