from __future__ import annotations
from dataclasses import dataclass
from math import pi, log10

from .params import ValidatedParameters

# -----------------------------
# Physical constants & floors
# -----------------------------
J_PER_TON_TNT = 4.184e9          # J in 1 ton TNT

MIN_CRATER_DIAMETER_KM = 0.1
MIN_FIREBALL_RADIUS_KM = 0.05
MIN_BLAST_RADIUS_KM = 0.1
MIN_SEISMIC_MAGNITUDE = 1.0


@dataclass(frozen=True)
class PhysicalEffects:
    mass_kg: float
    kinetic_energy_j: float
    explosive_yield_tons: float
    crater_diameter_km: float
    fireball_radius_km: float
    blast_radius_km: float
    seismic_magnitude: float


class ImpactModel:
    """
    Energetics + empirical damage-zone scaling for a spherical impactor.
    All scaling laws take the TNT-equivalent yield in tons.
    """

    def __init__(self, params: ValidatedParameters):
        self.p = params

    # ---------- Energetics ----------
    @property
    def radius_m(self) -> float:
        return 0.5 * self.p.diameter_m

    @property
    def volume_m3(self) -> float:
        return (4.0 / 3.0) * pi * self.radius_m**3

    @property
    def mass_kg(self) -> float:
        return self.volume_m3 * self.p.density_kgpm3

    def kinetic_energy_J(self) -> float:
        return 0.5 * self.mass_kg * self.p.velocity_mps**2

    def yield_tons_tnt(self) -> float:
        return self.kinetic_energy_J() / J_PER_TON_TNT

    # ---------- Scaling laws ----------
    @staticmethod
    def crater_diameter_km(yield_t: float) -> float:
        """Simplified crater scaling (Collins et al. 2005)."""
        return max(1.16 * yield_t**0.294, MIN_CRATER_DIAMETER_KM)

    @staticmethod
    def fireball_radius_km(yield_t: float) -> float:
        """Glasstone & Dolan 1977."""
        return max(0.28 * yield_t**0.4, MIN_FIREBALL_RADIUS_KM)

    @staticmethod
    def blast_radius_km(yield_t: float) -> float:
        """5 psi overpressure radius (Glasstone & Dolan 1977)."""
        return max(0.45 * yield_t**0.33, MIN_BLAST_RADIUS_KM)

    @staticmethod
    def seismic_magnitude(yield_t: float) -> float:
        # a sub-denormal diameter can underflow the yield to 0.0
        if yield_t <= 0.0:
            return MIN_SEISMIC_MAGNITUDE
        return max(0.67 * log10(yield_t) + 4.0, MIN_SEISMIC_MAGNITUDE)

    def effects(self) -> PhysicalEffects:
        E = self.kinetic_energy_J()
        Y = E / J_PER_TON_TNT
        return PhysicalEffects(
            mass_kg=self.mass_kg,
            kinetic_energy_j=E,
            explosive_yield_tons=Y,
            crater_diameter_km=self.crater_diameter_km(Y),
            fireball_radius_km=self.fireball_radius_km(Y),
            blast_radius_km=self.blast_radius_km(Y),
            seismic_magnitude=self.seismic_magnitude(Y),
        )


def compute_effects(params: ValidatedParameters) -> PhysicalEffects:
    return ImpactModel(params).effects()
