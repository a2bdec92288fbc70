from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from math import isfinite
import os
from typing import Optional

from dotenv import load_dotenv

from .defense import DEFAULT_STRATEGY_IDS, StrategyDescriptor, strategies_from_ids

POPULATION_SOURCES = ("none", "regional", "worldpop")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    defense_strategies: tuple[StrategyDescriptor, ...]
    default_lead_time_hours: float = 288.0
    population_source: str = "regional"
    worldpop_api_key: Optional[str] = None
    worldpop_dataset: str = "wpgppop"
    worldpop_year: int = 2020
    worldpop_sample_radius_km: float = 10.0
    log_level: str = "INFO"


def load_settings(env: dict | None = None) -> Settings:
    """Build Settings from the process environment (after .env), or from `env` when given."""
    if env is None:
        load_dotenv()
        env = os.environ

    ids = env.get("IMPACT_DEFENSE_STRATEGIES") or ",".join(DEFAULT_STRATEGY_IDS)
    source = (env.get("IMPACT_POPULATION_SOURCE") or "regional").strip().lower()
    if source not in POPULATION_SOURCES:
        raise ValueError(f"IMPACT_POPULATION_SOURCE must be one of {POPULATION_SOURCES}, got '{source}'.")

    lead_time = float(env.get("IMPACT_DEFAULT_LEAD_TIME_HOURS") or 288.0)
    if not isfinite(lead_time) or lead_time < 0:
        raise ValueError(f"IMPACT_DEFAULT_LEAD_TIME_HOURS must be a finite number >= 0, got {lead_time}.")

    sample_radius = float(env.get("WORLDPOP_SAMPLE_RADIUS_KM") or 10.0)
    if not isfinite(sample_radius) or sample_radius <= 0:
        raise ValueError(f"WORLDPOP_SAMPLE_RADIUS_KM must be a finite number > 0, got {sample_radius}.")

    log_level = (env.get("IMPACT_LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"IMPACT_LOG_LEVEL must be one of {LOG_LEVELS}, got '{log_level}'.")

    return Settings(
        defense_strategies=strategies_from_ids(s for s in ids.split(",") if s.strip()),
        default_lead_time_hours=lead_time,
        population_source=source,
        worldpop_api_key=env.get("WORLDPOP_API_KEY") or None,
        worldpop_dataset=env.get("WORLDPOP_DATASET") or "wpgppop",
        worldpop_year=int(env.get("WORLDPOP_YEAR") or 2020),
        worldpop_sample_radius_km=sample_radius,
        log_level=log_level,
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
