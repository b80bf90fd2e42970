# services/ai/advisors/generated.py
"""
Generated advisor variant: one call to the text-generation provider per
request, parsed leniently.

Nothing here raises for provider trouble. Each attempt resolves to either
GenerationSuccess or GenerationFailure (carrying a ProviderError), and the
caller decides what to do with a failure. There is no retry.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, TypeVar, Union

import httpx

from config.advisory_config import AdvisoryConfig
from services.ai.advisors.catalog import AdvisorDefinition
from services.ai.advisors.prompts import build_analysis_messages, build_chat_messages
from services.ai.advisors.types import AgentAnalysis, ChatTurn
from services.ai.json_helpers import extract_json_object
from services.ai.llm_service import LLMService, Message
from services.decision.errors import ProviderError
from services.decision.factors import DecisionFactors
from utils.common_helpers import as_str_list, clamp_score

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_CHAT_REPLY = "I apologize, but I could not generate a response at this time."


# ============================================================================
# OUTCOME TYPE
# ============================================================================

@dataclass(frozen=True)
class GenerationSuccess(Generic[T]):
    value: T
    parse_stage: str = "n/a"


@dataclass(frozen=True)
class GenerationFailure:
    error: ProviderError

    @property
    def reason(self) -> str:
        return self.error.reason


GenerationOutcome = Union[GenerationSuccess[T], GenerationFailure]


# ============================================================================
# BOUNDED CALL
# ============================================================================

async def call_llm(
    llm: LLMService,
    messages: List[Message],
    *,
    temperature: float,
    max_tokens: int,
    timeout_s: float,
) -> Union[str, GenerationFailure]:
    """One bounded provider call. Returns the raw text or a GenerationFailure; never raises."""
    try:
        return await asyncio.wait_for(
            llm.complete(messages, temperature=temperature, max_tokens=max_tokens),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError:
        return GenerationFailure(ProviderError("timeout", f"{timeout_s}s"))
    except httpx.HTTPStatusError as e:
        return GenerationFailure(ProviderError("http_status", str(e.response.status_code)))
    except httpx.HTTPError as e:
        return GenerationFailure(ProviderError("transport", type(e).__name__))
    except Exception as e:
        # SDK-specific errors (google-genai, gateway payload shape, ...)
        return GenerationFailure(ProviderError("provider", type(e).__name__))


# ============================================================================
# REPLY NORMALIZATION
# ============================================================================

def analysis_from_reply(data: Dict[str, Any], advisor: AdvisorDefinition) -> AgentAnalysis:
    """Map a parsed reply onto AgentAnalysis, filling gaps with neutral defaults."""
    perspective = str(data.get("perspective") or "").strip() or "Analysis completed."
    recommendation = (
        str(data.get("recommendation") or "").strip() or "Consider all factors carefully."
    )
    return AgentAnalysis(
        agent_id=advisor.id,
        agent_name=advisor.name,
        perspective=perspective,
        recommendation=recommendation,
        confidence=clamp_score(data.get("confidence"), default=70),
        key_insights=tuple(as_str_list(data.get("keyInsights"))),
        risks=tuple(as_str_list(data.get("risks"))),
        opportunities=tuple(as_str_list(data.get("opportunities"))),
        action_items=tuple(as_str_list(data.get("actionItems"))),
    )


# ============================================================================
# PROVIDER
# ============================================================================

class GeneratedPerspectiveProvider:
    def __init__(self, llm: LLMService, config: AdvisoryConfig):
        self.llm = llm
        self.config = config

    async def _call(
        self, messages: List[Message], *, temperature: float, max_tokens: int
    ) -> Union[str, GenerationFailure]:
        return await call_llm(
            self.llm,
            messages,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout_s=self.config.advisor_timeout_s,
        )

    async def try_analyze(
        self, decision: str, factors: DecisionFactors, advisor: AdvisorDefinition
    ) -> GenerationOutcome[AgentAnalysis]:
        raw = await self._call(
            build_analysis_messages(decision, factors, advisor),
            temperature=self.config.analysis_temperature,
            max_tokens=self.config.analysis_max_tokens,
        )
        if isinstance(raw, GenerationFailure):
            return raw
        if not (raw or "").strip():
            return GenerationFailure(ProviderError("empty_response"))

        data, stage = extract_json_object(raw)
        if data is None:
            return GenerationFailure(ProviderError("unparseable_reply", f"{len(raw)} chars"))

        return GenerationSuccess(analysis_from_reply(data, advisor), parse_stage=stage)

    async def try_continue(
        self,
        decision: str,
        factors: DecisionFactors,
        advisor: AdvisorDefinition,
        history: List[ChatTurn],
        message: str,
    ) -> GenerationOutcome[str]:
        raw = await self._call(
            build_chat_messages(decision, factors, advisor, history, message),
            temperature=self.config.chat_temperature,
            max_tokens=self.config.chat_max_tokens,
        )
        if isinstance(raw, GenerationFailure):
            return raw
        text = (raw or "").strip()
        return GenerationSuccess(text or EMPTY_CHAT_REPLY)
