from __future__ import annotations

from typing import List

from services.ai.advisors.catalog import AdvisorDefinition
from services.ai.advisors.types import ChatTurn
from services.ai.llm_service import Message
from services.decision.factors import DecisionFactors


ANALYSIS_PROMPT = """Please analyze the following decision and provide your perspective:

DECISION: "{decision}"

USER PROFILE:
{profile}

Please provide your analysis in the following JSON format:
{{
  "perspective": "Your overall perspective on this decision (2-3 sentences)",
  "recommendation": "Your primary recommendation (1-2 sentences)",
  "confidence": 75,
  "keyInsights": ["Insight 1", "Insight 2", "Insight 3"],
  "risks": ["Risk 1", "Risk 2", "Risk 3"],
  "opportunities": ["Opportunity 1", "Opportunity 2"],
  "actionItems": ["Action 1", "Action 2", "Action 3"]
}}

Confidence should be a number between 0-100 representing how confident you are in your analysis.
Provide 2-4 items for each array field. Be specific and actionable.
Return ONLY JSON. No markdown. No extra text.
"""

CHAT_CONTEXT_PROMPT = """Context for this conversation:
- User is deciding: "{decision}"
{profile}

Keep responses concise (2-4 sentences) and focused on helping the user make their decision.
"""


def factor_summary(factors: DecisionFactors, bullet: str = "- ") -> str:
    return "\n".join(
        [
            f"{bullet}Risk Tolerance: {factors.risk_tolerance}/100",
            f"{bullet}Financial Stability: {factors.financial_stability}/100",
            f"{bullet}Discipline Level: {factors.discipline_level}/100",
            f"{bullet}Support System: {factors.support_system}/100",
        ]
    )


def build_analysis_messages(
    decision: str, factors: DecisionFactors, advisor: AdvisorDefinition
) -> List[Message]:
    return [
        {"role": "system", "content": advisor.persona},
        {
            "role": "user",
            "content": ANALYSIS_PROMPT.format(decision=decision, profile=factor_summary(factors)),
        },
    ]


def build_chat_messages(
    decision: str,
    factors: DecisionFactors,
    advisor: AdvisorDefinition,
    history: List[ChatTurn],
    message: str,
) -> List[Message]:
    """Persona + decision context first, then the caller's history, then the new message."""
    context = CHAT_CONTEXT_PROMPT.format(decision=decision, profile=factor_summary(factors))
    out: List[Message] = [{"role": "system", "content": f"{advisor.persona}\n\n{context}"}]
    out.extend(turn.to_message() for turn in history)
    out.append({"role": "user", "content": message})
    return out
