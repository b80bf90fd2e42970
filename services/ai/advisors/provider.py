# services/ai/advisors/provider.py
"""
PerspectiveProvider: the single entry point for advisor analyses and chat
replies.

Selection policy:
- generated variant only if the LLM is configured and USE_MOCK_AI is off
- otherwise the template variant directly
A generated attempt that fails is replaced, once, by the template result for
the same advisor and factors.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional

from config.advisory_config import AdvisoryConfig
from services.ai.advisors.catalog import AdvisorDefinition
from services.ai.advisors.generated import GenerationFailure, GeneratedPerspectiveProvider
from services.ai.advisors.templates import TemplatePerspectiveProvider
from services.ai.advisors.types import AgentAnalysis, ChatTurn
from services.ai.llm_service import LLMService, get_llm_service
from services.decision.factors import DecisionFactors

logger = logging.getLogger(__name__)


class PerspectiveProvider:
    def __init__(
        self,
        llm: Optional[LLMService] = None,
        config: Optional[AdvisoryConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or AdvisoryConfig.from_env()
        self.templates = TemplatePerspectiveProvider(rng=rng)
        llm = llm if llm is not None else get_llm_service()
        self.generated: Optional[GeneratedPerspectiveProvider] = None
        if llm.is_configured and not self.config.use_mock_ai:
            self.generated = GeneratedPerspectiveProvider(llm, self.config)

    @property
    def uses_generation(self) -> bool:
        return self.generated is not None

    async def analyze(
        self, decision: str, factors: DecisionFactors, advisor: AdvisorDefinition
    ) -> AgentAnalysis:
        if self.generated is None:
            return self.templates.build_analysis(decision, factors, advisor)

        outcome = await self.generated.try_analyze(decision, factors, advisor)
        if isinstance(outcome, GenerationFailure):
            logger.warning(
                "[Advisor] analysis fallback advisor=%s reason=%s", advisor.id, outcome.error
            )
            return self.templates.build_analysis(decision, factors, advisor)

        logger.info("[Advisor] generated analysis advisor=%s parse=%s", advisor.id, outcome.parse_stage)
        return outcome.value

    async def continue_chat(
        self,
        decision: str,
        factors: DecisionFactors,
        advisor: AdvisorDefinition,
        history: List[ChatTurn],
        message: str,
    ) -> str:
        if self.generated is None:
            return self.templates.reply(advisor)

        outcome = await self.generated.try_continue(decision, factors, advisor, history, message)
        if isinstance(outcome, GenerationFailure):
            logger.warning(
                "[Advisor] chat fallback advisor=%s reason=%s", advisor.id, outcome.error
            )
            return self.templates.reply(advisor)
        return outcome.value
