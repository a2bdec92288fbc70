from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import isfinite
from typing import Iterable, Sequence

from .params import ValidationError

HOURS_PER_YEAR = 8760.0
RECOMMENDATION_THRESHOLD = 0.6


# -----------------------------
# Severity
# -----------------------------
class Severity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"
    CATASTROPHIC = "catastrophic"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


# Upper bounds (tons TNT), half-open
SEVERITY_BANDS = (
    (0.1, Severity.LOW),
    (1.0, Severity.MODERATE),
    (10.0, Severity.HIGH),
    (100.0, Severity.SEVERE),
)


def classify_severity(yield_tons: float) -> Severity:
    for upper, sev in SEVERITY_BANDS:
        if yield_tons < upper:
            return sev
    return Severity.CATASTROPHIC


# -----------------------------
# Deflection strategies
# -----------------------------
@dataclass(frozen=True)
class StrategyDescriptor:
    """effectiveness = min(ceiling, base + (lead_time_h / horizon_hours) * gain)"""
    id: str
    name: str
    base: float
    gain: float
    horizon_hours: float
    ceiling: float
    cost_tier: str
    time_required: str

    def effectiveness(self, lead_time_hours: float) -> float:
        return min(self.ceiling, self.base + (lead_time_hours / self.horizon_hours) * self.gain)


STRATEGY_CATALOG = {
    "kinetic": StrategyDescriptor(
        id="kinetic", name="Kinetic Impactor",
        base=0.5, gain=0.4, horizon_hours=HOURS_PER_YEAR, ceiling=0.9,
        cost_tier="High", time_required="6-24 months",
    ),
    "gravity": StrategyDescriptor(
        id="gravity", name="Gravity Tractor",
        base=0.4, gain=0.45, horizon_hours=2 * HOURS_PER_YEAR, ceiling=0.85,
        cost_tier="Very High", time_required="2-10 years",
    ),
}

DEFAULT_STRATEGY_IDS = ("kinetic", "gravity")


def strategies_from_ids(ids: Iterable[str]) -> tuple[StrategyDescriptor, ...]:
    out = []
    for sid in ids:
        key = sid.strip().lower()
        if key not in STRATEGY_CATALOG:
            raise ValueError(f"Unknown defense strategy '{sid}'. Known: {', '.join(STRATEGY_CATALOG)}")
        out.append(STRATEGY_CATALOG[key])
    return tuple(out)


@dataclass(frozen=True)
class DefenseOutcome:
    type: str
    name: str
    effectiveness: float
    recommended: bool
    cost_tier: str
    time_required: str


def evaluate_strategies(lead_time_hours: float,
                        strategies: Sequence[StrategyDescriptor] | None = None) -> tuple[DefenseOutcome, ...]:
    if not isfinite(lead_time_hours) or lead_time_hours < 0.0:
        raise ValidationError("lead_time_hours", lead_time_hours, "[0, inf) h")
    if strategies is None:
        strategies = strategies_from_ids(DEFAULT_STRATEGY_IDS)
    outcomes = []
    for s in strategies:
        eff = s.effectiveness(lead_time_hours)
        outcomes.append(DefenseOutcome(
            type=s.id,
            name=s.name,
            effectiveness=eff,
            recommended=eff > RECOMMENDATION_THRESHOLD,
            cost_tier=s.cost_tier,
            time_required=s.time_required,
        ))
    return tuple(outcomes)
