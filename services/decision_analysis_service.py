# services/decision_analysis_service.py
"""
Single-call decision analysis: one generated read of the decision with pros,
cons, a recommendation and a readiness score.

Unlike the advisor consultation there is no template variant; without a
configured provider the service is unavailable. Once a call is made, provider
trouble and unusable replies resolve to a fixed fallback result (score 50)
instead of an error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from config.advisory_config import AdvisoryConfig
from services.ai.advisors.generated import (
    GenerationFailure,
    GenerationOutcome,
    GenerationSuccess,
    call_llm,
)
from services.ai.json_helpers import extract_json_object
from services.ai.llm_service import LLMService, Message, get_llm_service
from services.decision.errors import AnalysisUnavailableError, ProviderError
from services.decision.factors import (
    DecisionFactors,
    financial_band,
    risk_band,
    validate_decision,
    validate_factors,
)
from utils.common_helpers import as_str_list, clamp_score

logger = logging.getLogger(__name__)

MAX_ANALYSIS_DECISION_LENGTH = 500
FALLBACK_SCORE = 50
FALLBACK_EXCERPT_CHARS = 200

FALLBACK_ANALYSIS = "A detailed analysis is not available right now."
FALLBACK_PROS = ("Consider the potential benefits", "Growth opportunity", "New experiences")
FALLBACK_CONS = ("Uncertainty involved", "Requires commitment", "May face challenges")
FALLBACK_RECOMMENDATION = "Take time to reflect on your priorities before deciding."

SYSTEM_PROMPT = (
    "You are a wise decision advisor. Provide thoughtful, balanced analysis of life "
    "decisions. Be encouraging but realistic. Always respond with valid JSON."
)

ANALYZE_PROMPT = """Analyze this life decision and provide structured feedback:

Decision: "{decision}"

User Profile:
- Risk Tolerance: {risk_level} ({risk}%)
- Financial Stability: {financial_level} ({financial}%)
- Discipline Level: {discipline_level} ({discipline}%)
- Support System: {support_level} ({support}%)

Provide a JSON response with:
1. analysis: A thoughtful 2-3 sentence analysis considering their profile
2. pros: Array of 3-4 specific pros for this decision
3. cons: Array of 3-4 specific cons for this decision
4. recommendation: A personalized recommendation (1-2 sentences)
5. confidenceScore: A number 0-100 representing confidence in this decision based on their readiness factors

Format as valid JSON only."""


@dataclass(frozen=True)
class DecisionAnalysis:
    analysis: str
    pros: Tuple[str, ...]
    cons: Tuple[str, ...]
    recommendation: str
    confidence_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "recommendation": self.recommendation,
            "confidenceScore": self.confidence_score,
        }


def discipline_band(factors: DecisionFactors) -> str:
    return "high" if factors.discipline_level > 60 else "developing"


def support_band(factors: DecisionFactors) -> str:
    return "strong" if factors.support_system > 60 else "limited"


def build_messages(decision: str, factors: DecisionFactors) -> List[Message]:
    prompt = ANALYZE_PROMPT.format(
        decision=decision,
        risk_level=risk_band(factors),
        risk=factors.risk_tolerance,
        financial_level=financial_band(factors),
        financial=factors.financial_stability,
        discipline_level=discipline_band(factors),
        discipline=factors.discipline_level,
        support_level=support_band(factors),
        support=factors.support_system,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def analysis_from_reply(data: Dict[str, Any]) -> DecisionAnalysis:
    return DecisionAnalysis(
        analysis=str(data.get("analysis") or "").strip() or FALLBACK_ANALYSIS,
        pros=tuple(as_str_list(data.get("pros"))),
        cons=tuple(as_str_list(data.get("cons"))),
        recommendation=str(data.get("recommendation") or "").strip() or FALLBACK_RECOMMENDATION,
        confidence_score=clamp_score(data.get("confidenceScore"), default=FALLBACK_SCORE),
    )


def fallback_analysis(reply: str = "") -> DecisionAnalysis:
    """Fixed result; an unparseable reply still contributes its opening text."""
    excerpt = (reply or "").strip()[:FALLBACK_EXCERPT_CHARS]
    return DecisionAnalysis(
        analysis=excerpt or FALLBACK_ANALYSIS,
        pros=FALLBACK_PROS,
        cons=FALLBACK_CONS,
        recommendation=FALLBACK_RECOMMENDATION,
        confidence_score=FALLBACK_SCORE,
    )


class DecisionAnalysisService:
    def __init__(self, llm: Optional[LLMService] = None, config: Optional[AdvisoryConfig] = None):
        self.llm = llm if llm is not None else get_llm_service()
        self.config = config or AdvisoryConfig.from_env()

    @property
    def is_available(self) -> bool:
        return self.llm.is_configured and not self.config.use_mock_ai

    async def try_analyze(
        self, decision: str, factors: DecisionFactors
    ) -> Tuple[GenerationOutcome[DecisionAnalysis], str]:
        """Outcome plus the raw reply text ("" when no reply arrived)."""
        raw = await call_llm(
            self.llm,
            build_messages(decision, factors),
            temperature=self.config.analysis_temperature,
            max_tokens=self.config.decision_analysis_max_tokens,
            timeout_s=self.config.advisor_timeout_s,
        )
        if isinstance(raw, GenerationFailure):
            return raw, ""
        if not (raw or "").strip():
            return GenerationFailure(ProviderError("empty_response")), ""

        data, stage = extract_json_object(raw)
        if data is None:
            return GenerationFailure(ProviderError("unparseable_reply", f"{len(raw)} chars")), raw
        return GenerationSuccess(analysis_from_reply(data), parse_stage=stage), raw

    async def analyze(self, decision: Any, factors: Any) -> DecisionAnalysis:
        decision = validate_decision(decision, max_length=MAX_ANALYSIS_DECISION_LENGTH)
        factors = validate_factors(factors)
        if not self.is_available:
            raise AnalysisUnavailableError("AI analysis not configured")

        outcome, raw = await self.try_analyze(decision, factors)
        if isinstance(outcome, GenerationFailure):
            logger.warning("[DecisionAnalysis] fallback reason=%s", outcome.error)
            return fallback_analysis(raw)

        logger.info("[DecisionAnalysis] generated parse=%s", outcome.parse_stage)
        return outcome.value


_analysis_singleton: Optional[DecisionAnalysisService] = None


def get_decision_analysis_service() -> DecisionAnalysisService:
    global _analysis_singleton
    if _analysis_singleton is None:
        _analysis_singleton = DecisionAnalysisService()
    return _analysis_singleton
