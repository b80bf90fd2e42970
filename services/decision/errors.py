# services/decision/errors.py
"""
Error taxonomy for the decision core.

- ValidationError: malformed factors / decision text / advisor selection.
  Raised at the entry points, never silently corrected.
- ProviderError: external text-generation failure or malformed reply.
  Carried inside a GenerationFailure and recovered by the deterministic
  fallback; it is logged, never raised to the caller.
- AggregationError: empty analysis set handed to the aggregator.
- AnalysisUnavailableError: single-call decision analysis asked for while no
  text-generation provider is configured (or USE_MOCK_AI is set).
"""
from __future__ import annotations

from typing import Optional


class DecisionError(Exception):
    """Base class for decision-core errors."""


class ValidationError(DecisionError):
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict:
        return {"error": "Validation failed", "field": self.field, "detail": self.message}


class UnknownAdvisorError(ValidationError):
    def __init__(self, advisor_id: str):
        self.advisor_id = advisor_id
        super().__init__("agentId", f"unknown advisor '{advisor_id}'")


class ProviderError(DecisionError):
    """External generation failed or replied with something unusable."""

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        msg = reason if not detail else f"{reason}: {detail}"
        super().__init__(msg)


class AggregationError(DecisionError):
    pass


class AnalysisUnavailableError(DecisionError):
    """Generated decision analysis requested while no provider is usable."""
