# services/decision/consensus.py
"""
Reduce N independent advisor analyses to one verdict.

Everything here is a function of the analysis *set*: counts, a mean and
lookups by advisor id. Input order never changes the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from services.ai.advisors.catalog import OPPORTUNITY_COACH_ID, RISK_ANALYST_ID
from services.ai.advisors.types import AgentAnalysis
from services.decision.errors import AggregationError
from utils.common_helpers import clamp_score, mean

POSITIVE_KEYWORDS = ("proceed", "good", "well", "recommend")
CAUTIOUS_KEYWORDS = ("caution", "consider", "careful")

CONSENSUS_STRONG = "Strong consensus to proceed with appropriate preparation."
CONSENSUS_MODERATE = "Moderate support for proceeding. Address key concerns first."
CONSENSUS_CAUTION = "Advisors recommend caution. Consider delaying or adjusting approach."
CONSENSUS_MIXED = "Mixed opinions. Gather more information before deciding."

DIVERGENCE_MORE_RISKS = "Risk Analyst sees more challenges than Opportunity Coach sees benefits"
DIVERGENCE_CONFIDENCE_GAP = "Opportunity Coach is significantly more confident than Risk Analyst"


@dataclass(frozen=True)
class ConsensusResult:
    consensus: str
    divergent_points: Tuple[str, ...] = ()
    overall_confidence: int = 0
    positive_count: int = 0
    cautious_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consensus": self.consensus,
            "divergentPoints": list(self.divergent_points),
            "overallConfidence": self.overall_confidence,
        }


def _mentions_any(text: str, keywords: Sequence[str]) -> bool:
    lowered = (text or "").lower()
    return any(k in lowered for k in keywords)


def count_sentiment(analyses: Sequence[AgentAnalysis]) -> tuple:
    """(positive, cautious) analysis counts. One analysis may count toward both."""
    positive = sum(1 for a in analyses if _mentions_any(a.recommendation, POSITIVE_KEYWORDS))
    cautious = sum(1 for a in analyses if _mentions_any(a.recommendation, CAUTIOUS_KEYWORDS))
    return positive, cautious


def consensus_text(positive_count: int, cautious_count: int) -> str:
    if positive_count >= 3:
        return CONSENSUS_STRONG
    if positive_count >= 2:
        return CONSENSUS_MODERATE
    if cautious_count >= 3:
        return CONSENSUS_CAUTION
    return CONSENSUS_MIXED


def _find(analyses: Sequence[AgentAnalysis], agent_id: str) -> Optional[AgentAnalysis]:
    return next((a for a in analyses if a.agent_id == agent_id), None)


def divergence_findings(analyses: Sequence[AgentAnalysis]) -> List[str]:
    risk = _find(analyses, RISK_ANALYST_ID)
    opportunity = _find(analyses, OPPORTUNITY_COACH_ID)
    if risk is None or opportunity is None:
        return []

    findings: List[str] = []
    if len(risk.risks) > len(opportunity.opportunities) + 2:
        findings.append(DIVERGENCE_MORE_RISKS)
    if risk.confidence < 60 and opportunity.confidence > 80:
        findings.append(DIVERGENCE_CONFIDENCE_GAP)
    return findings


def overall_confidence(analyses: Sequence[AgentAnalysis]) -> int:
    return clamp_score(mean([a.confidence for a in analyses]))


def aggregate(analyses: Sequence[AgentAnalysis]) -> ConsensusResult:
    if not analyses:
        raise AggregationError("cannot aggregate an empty analysis set")

    positive, cautious = count_sentiment(analyses)
    return ConsensusResult(
        consensus=consensus_text(positive, cautious),
        divergent_points=tuple(divergence_findings(analyses)),
        overall_confidence=overall_confidence(analyses),
        positive_count=positive,
        cautious_count=cautious,
    )
