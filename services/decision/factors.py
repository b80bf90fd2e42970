# services/decision/factors.py
"""
Readiness factors: the four 0-100 scores every simulation and consultation
starts from. `validate_factors` is the guard used at every entry point.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from services.decision.errors import ValidationError
from utils.common_helpers import round_half_up

FACTOR_FIELDS = ("riskTolerance", "financialStability", "disciplineLevel", "supportSystem")

SCORE_MIN = 0
SCORE_MAX = 100

MAX_DECISION_LENGTH = 1000


@dataclass(frozen=True)
class DecisionFactors:
    risk_tolerance: int
    financial_stability: int
    discipline_level: int
    support_system: int

    def ratios(self) -> Dict[str, float]:
        return {
            "risk": self.risk_tolerance / 100,
            "financial": self.financial_stability / 100,
            "discipline": self.discipline_level / 100,
            "support": self.support_system / 100,
        }

    def to_dict(self) -> Dict[str, int]:
        return {
            "riskTolerance": self.risk_tolerance,
            "financialStability": self.financial_stability,
            "disciplineLevel": self.discipline_level,
            "supportSystem": self.support_system,
        }


def _check_score(field: str, value: Any) -> int:
    # bool is an int subclass; True/False are never valid scores
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, "must be a number")
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValidationError(field, "must be a finite number")
        if not value.is_integer():
            raise ValidationError(field, "must be a whole number")
        value = int(value)
    if value < SCORE_MIN or value > SCORE_MAX:
        raise ValidationError(field, f"must be between {SCORE_MIN} and {SCORE_MAX}")
    return value


def validate_factors(raw: Any) -> DecisionFactors:
    """
    Accepts a DecisionFactors (re-checked) or a camelCase mapping and returns
    a validated DecisionFactors. Raises ValidationError naming the bad field.
    """
    if isinstance(raw, DecisionFactors):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        raise ValidationError("factors", "must be an object with four scores")

    values = {}
    for field in FACTOR_FIELDS:
        if field not in raw:
            raise ValidationError(field, "is required")
        values[field] = _check_score(field, raw[field])

    return DecisionFactors(
        risk_tolerance=values["riskTolerance"],
        financial_stability=values["financialStability"],
        discipline_level=values["disciplineLevel"],
        support_system=values["supportSystem"],
    )


def validate_decision(decision: Any, *, max_length: int = MAX_DECISION_LENGTH) -> str:
    if not isinstance(decision, str):
        raise ValidationError("decision", "must be a string")
    text = decision.strip()
    if not text:
        raise ValidationError("decision", "is required")
    if len(text) > max_length:
        raise ValidationError("decision", f"must be at most {max_length} characters")
    return text


# ============================================================================
# BANDS & PROFILE
# ============================================================================

def risk_band(factors: DecisionFactors) -> str:
    if factors.risk_tolerance > 60:
        return "high"
    if factors.risk_tolerance < 40:
        return "low"
    return "moderate"


def financial_band(factors: DecisionFactors) -> str:
    return "secure" if factors.financial_stability > 60 else "challenging"


def _mean_score(factors: DecisionFactors) -> float:
    return (
        factors.risk_tolerance
        + factors.financial_stability
        + factors.discipline_level
        + factors.support_system
    ) / 4


def decision_confidence(factors: DecisionFactors) -> int:
    return round_half_up(_mean_score(factors))


_INSIGHT_PATTERNS = (
    ("risk_tolerance", "You favor bold moves and calculated risks."),
    ("financial_stability", "You prioritize security and stability."),
    ("discipline_level", "You trust systems and consistent effort."),
    ("support_system", "You value community and shared journeys."),
)


def insight_pattern(factors: DecisionFactors) -> str:
    avg = _mean_score(factors)
    for attr, sentence in _INSIGHT_PATTERNS:
        if getattr(factors, attr) > avg + 10:
            return sentence
    return "You maintain a balanced approach to decisions."


def factor_profile(factors: DecisionFactors) -> Dict[str, Any]:
    return {
        "riskBand": risk_band(factors),
        "financialBand": financial_band(factors),
        "decisionConfidence": decision_confidence(factors),
        "insightPattern": insight_pattern(factors),
    }
