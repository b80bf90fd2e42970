# services/consultation_service.py
"""
Consultation orchestration.

- consult: validate -> fan out one analysis per selected advisor -> join ->
  consensus. Each advisor's coroutine already resolves its own fallback, so
  one slow or failing provider call cannot affect the others.
- continue_conversation: one stateless chat turn; the caller resends the
  whole history every time.
- plan: action plan for an existing set of analyses.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from services.ai.advisors.catalog import AdvisorCatalog, default_catalog
from services.ai.advisors.provider import PerspectiveProvider
from services.ai.advisors.types import AgentAnalysis, ChatTurn
from services.decision.action_plan import ActionPlan, synthesize
from services.decision.consensus import aggregate
from services.decision.errors import ValidationError
from services.decision.factors import DecisionFactors, validate_decision, validate_factors

logger = logging.getLogger(__name__)

MAX_CHAT_MESSAGE_LENGTH = 500
CHAT_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class Consultation:
    decision: str
    factors: DecisionFactors
    analyses: Tuple[AgentAnalysis, ...]
    consensus: str
    divergent_points: Tuple[str, ...]
    overall_confidence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decision": self.decision,
            "factors": self.factors.to_dict(),
            "analyses": [a.to_dict() for a in self.analyses],
            "consensus": self.consensus,
            "divergentPoints": list(self.divergent_points),
            "overallConfidence": self.overall_confidence,
        }


def parse_history(raw: Optional[Sequence[Any]]) -> List[ChatTurn]:
    """Accept ChatTurn objects or {"role", "content"} mappings."""
    turns: List[ChatTurn] = []
    for i, item in enumerate(raw or []):
        if isinstance(item, ChatTurn):
            turns.append(item)
            continue
        role = item.get("role") if isinstance(item, dict) else None
        content = item.get("content") if isinstance(item, dict) else None
        if role not in CHAT_ROLES:
            raise ValidationError(f"messageHistory[{i}].role", "must be 'user' or 'assistant'")
        if not isinstance(content, str):
            raise ValidationError(f"messageHistory[{i}].content", "must be a string")
        turns.append(ChatTurn(role=role, content=content))
    return turns


def validate_chat_message(message: Any) -> str:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("userMessage", "is required")
    text = message.strip()
    if len(text) > MAX_CHAT_MESSAGE_LENGTH:
        raise ValidationError("userMessage", f"must be at most {MAX_CHAT_MESSAGE_LENGTH} characters")
    return text


class ConsultationService:
    def __init__(
        self,
        provider: Optional[PerspectiveProvider] = None,
        catalog: Optional[AdvisorCatalog] = None,
    ):
        self.provider = provider or PerspectiveProvider()
        self.catalog = catalog or default_catalog()

    async def consult(self, decision: Any, factors: Any, advisor_ids: Sequence[str]) -> Consultation:
        decision = validate_decision(decision)
        factors = validate_factors(factors)
        advisors = self.catalog.select(advisor_ids)

        # gather preserves argument order, not completion order
        analyses = await asyncio.gather(
            *(self.provider.analyze(decision, factors, adv) for adv in advisors)
        )
        result = aggregate(analyses)

        logger.info(
            "[Consultation] advisors=%s overall_confidence=%d divergent=%d",
            ",".join(a.id for a in advisors),
            result.overall_confidence,
            len(result.divergent_points),
        )
        return Consultation(
            decision=decision,
            factors=factors,
            analyses=tuple(analyses),
            consensus=result.consensus,
            divergent_points=tuple(result.divergent_points),
            overall_confidence=result.overall_confidence,
        )

    async def continue_conversation(
        self,
        decision: Any,
        factors: Any,
        advisor_id: str,
        history: Optional[Sequence[Any]],
        message: Any,
    ) -> str:
        decision = validate_decision(decision)
        factors = validate_factors(factors)
        message = validate_chat_message(message)
        turns = parse_history(history)
        advisor = self.catalog.require(advisor_id)

        return await self.provider.continue_chat(decision, factors, advisor, turns, message)

    def plan(self, analyses: Sequence[AgentAnalysis], decision: Any) -> ActionPlan:
        return synthesize(analyses, validate_decision(decision))


_service_singleton: Optional[ConsultationService] = None


def get_consultation_service() -> ConsultationService:
    global _service_singleton
    if _service_singleton is None:
        _service_singleton = ConsultationService()
    return _service_singleton
