"""Pre-formatted strings for report, modal and notification renderers."""
from __future__ import annotations

from .casualties import Casualties
from .defense import Severity

SEVERITY_TEXT = {
    Severity.LOW: "Low Impact",
    Severity.MODERATE: "Moderate Impact",
    Severity.HIGH: "High Impact",
    Severity.SEVERE: "Severe Impact",
    Severity.CATASTROPHIC: "Catastrophic Impact",
}

# notification styling per tier
SEVERITY_ALERT = {
    Severity.LOW: "info",
    Severity.MODERATE: "info",
    Severity.HIGH: "warning",
    Severity.SEVERE: "error",
    Severity.CATASTROPHIC: "error",
}


def severity_text(severity: Severity) -> str:
    return SEVERITY_TEXT.get(severity, "Unknown")


def format_large_number(n: float) -> str:
    if n >= 1e12: return f"{n / 1e12:.2f}T"
    if n >= 1e9:  return f"{n / 1e9:.2f}B"
    if n >= 1e6:  return f"{n / 1e6:.2f}M"
    if n >= 1e3:  return f"{n / 1e3:.2f}K"
    s = f"{n:,.2f}".rstrip("0").rstrip(".")
    return s or "0"


def format_lead_time(hours: float) -> str:
    if hours < 24:
        return f"{hours:g} hours"
    if hours < 8760:
        return f"{round(hours / 24)} days"
    return f"{round(hours / 8760, 1):g} years"


def format_casualties(c: Casualties) -> dict:
    if not c.known:
        return {"estimated": "unknown", "injured": "unknown", "fatalities": "unknown"}
    return {"estimated": f"{c.estimated:,}", "injured": f"{c.injured:,}", "fatalities": f"{c.fatalities:,}"}


def analysis_sections(a) -> dict:
    """Everything the report modal shows, keyed by section."""
    out = {
        "physical": {
            "crater_diameter": f"{a.crater_diameter_km:.1f} km",
            "fireball_radius": f"{a.fireball_radius_km:.1f} km",
            "blast_radius": f"{a.blast_radius_km:.1f} km",
            "seismic_magnitude": f"{a.seismic_magnitude:.1f}",
            "explosive_yield": f"{format_large_number(a.explosive_yield_tons)} t TNT",
            "kinetic_energy": f"{a.kinetic_energy_j:.3e} J",
        },
        "human": format_casualties(a.casualties),
        "terrain": a.classification.terrain,
        "severity": {
            "tier": a.severity.value,
            "text": severity_text(a.severity),
            "alert": SEVERITY_ALERT[a.severity],
        },
        "lead_time": format_lead_time(a.lead_time_hours),
    }
    if not a.classification.is_continental:
        out["tsunami"] = {
            "height": f"{a.tsunami.height_m:.1f} m",
            "risk": a.tsunami.risk_band.value,
            "affected_distance": f"{a.tsunami.affected_distance_km:.0f} km",
            "warning_time": f"{a.tsunami.warning_time_hours:.1f} hours",
        }
    else:
        out["tsunami"] = "No tsunami generated - impact location is on land"
    return out
