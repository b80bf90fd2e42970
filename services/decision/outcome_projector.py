# services/decision/outcome_projector.py
"""
Deterministic multi-horizon outcome projection.

Each dimension is a weighted blend of the factor ratios scaled by a fixed
horizon multiplier. Values are signed percentage deltas, so they are not
re-clamped after rounding.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Tuple

from services.decision.factors import DecisionFactors, risk_band, financial_band
from utils.common_helpers import round_half_up


class Horizon(str, Enum):
    THREE_MONTHS = "threeMonths"
    ONE_YEAR = "oneYear"
    FIVE_YEARS = "fiveYears"


HORIZON_MULTIPLIERS: Dict[Horizon, float] = {
    Horizon.THREE_MONTHS: 0.3,
    Horizon.ONE_YEAR: 0.7,
    Horizon.FIVE_YEARS: 1.0,
}

DIMENSIONS = ("financial", "emotional", "social", "skills", "stress")

# (dimension, horizon) -> label. Static; labels do not depend on the values.
DIMENSION_LABELS: Dict[Tuple[str, Horizon], str] = {
    ("financial", Horizon.THREE_MONTHS): "Income dip",
    ("financial", Horizon.ONE_YEAR): "Portfolio growth",
    ("financial", Horizon.FIVE_YEARS): "Wealth stability",
    ("emotional", Horizon.THREE_MONTHS): "New rhythm",
    ("emotional", Horizon.ONE_YEAR): "Confidence boost",
    ("emotional", Horizon.FIVE_YEARS): "Inner peace",
    ("social", Horizon.THREE_MONTHS): "Network growth",
    ("social", Horizon.ONE_YEAR): "Relationship shifts",
    ("social", Horizon.FIVE_YEARS): "Deep connections",
    ("skills", Horizon.THREE_MONTHS): "Learning curve",
    ("skills", Horizon.ONE_YEAR): "Skill mastery",
    ("skills", Horizon.FIVE_YEARS): "Expert status",
    ("stress", Horizon.THREE_MONTHS): "High uncertainty",
    ("stress", Horizon.ONE_YEAR): "Managing stress",
    ("stress", Horizon.FIVE_YEARS): "Stress mastery",
}

# dimension -> weighted blend of ratios, before * 100 * multiplier
_BLENDS: Dict[str, Callable[[Dict[str, float]], float]] = {
    "financial": lambda r: r["risk"] * 0.6 + r["financial"] * 0.4,
    "emotional": lambda r: r["discipline"] * 0.5 + r["support"] * 0.5,
    "social": lambda r: r["support"] * 0.7 + r["risk"] * 0.3,
    "skills": lambda r: r["discipline"] * 0.8 + r["risk"] * 0.2,
    "stress": lambda r: 1 - (r["financial"] * 0.5 + r["support"] * 0.5),
}

_RISK_APPROACH = {"low": "cautious", "moderate": "balanced", "high": "ambitious"}

ALTERNATIVE_CONSERVATIVE = (
    "A more conservative approach might provide earlier stability but slower growth."
)
ALTERNATIVE_BOLDER = (
    "Taking bigger risks earlier could accelerate your timeline but increase initial stress."
)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class OutcomeDimension:
    value: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "label": self.label}


@dataclass(frozen=True)
class HorizonOutcome:
    financial: OutcomeDimension
    emotional: OutcomeDimension
    social: OutcomeDimension
    skills: OutcomeDimension
    stress: OutcomeDimension

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name).to_dict() for name in DIMENSIONS}


@dataclass(frozen=True)
class SimulationResult:
    three_months: HorizonOutcome
    one_year: HorizonOutcome
    five_years: HorizonOutcome
    summary: str
    alternative_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threeMonths": self.three_months.to_dict(),
            "oneYear": self.one_year.to_dict(),
            "fiveYears": self.five_years.to_dict(),
            "summary": self.summary,
            "alternativePath": self.alternative_path,
        }


# ============================================================================
# PROJECTION
# ============================================================================

def project_horizon(factors: DecisionFactors, horizon: Horizon) -> HorizonOutcome:
    ratios = factors.ratios()
    multiplier = HORIZON_MULTIPLIERS[horizon]
    dims = {
        name: OutcomeDimension(
            value=round_half_up(_BLENDS[name](ratios) * 100 * multiplier),
            label=DIMENSION_LABELS[(name, horizon)],
        )
        for name in DIMENSIONS
    }
    return HorizonOutcome(**dims)


def _summary(factors: DecisionFactors, three_months: HorizonOutcome) -> str:
    approach = _RISK_APPROACH[risk_band(factors)]
    outlook = "promising" if three_months.emotional.value > 50 else "mixed"
    return (
        f"Based on your {approach} approach with {financial_band(factors)} financial backing, "
        f"your decision shows {outlook} short-term emotional outcomes, "
        f"with significant improvements by year 5."
    )


def project(factors: DecisionFactors) -> SimulationResult:
    """Pure: same factors in, a fresh value-equal SimulationResult out."""
    three_months = project_horizon(factors, Horizon.THREE_MONTHS)
    one_year = project_horizon(factors, Horizon.ONE_YEAR)
    five_years = project_horizon(factors, Horizon.FIVE_YEARS)

    alternative = (
        ALTERNATIVE_CONSERVATIVE if factors.risk_tolerance > 60 else ALTERNATIVE_BOLDER
    )

    return SimulationResult(
        three_months=three_months,
        one_year=one_year,
        five_years=five_years,
        summary=_summary(factors, three_months),
        alternative_path=alternative,
    )
