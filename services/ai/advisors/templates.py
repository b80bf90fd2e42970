# services/ai/advisors/templates.py
"""
Deterministic advisor analyses and chat lines.

Used directly when no text-generation provider is configured (or it is
disabled), and as the substitute when a generated analysis fails. Output
depends only on the advisor id and coarse factor bands, so this path never
fails.
"""
from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Tuple

from services.ai.advisors.catalog import (
    AdvisorDefinition,
    FINANCIAL_ADVISOR_ID,
    LIFE_MENTOR_ID,
    OPPORTUNITY_COACH_ID,
    RISK_ANALYST_ID,
)
from services.ai.advisors.types import AgentAnalysis, ChatTurn
from services.decision.factors import DecisionFactors, financial_band, risk_band
from utils.common_helpers import clamp_score


def _risk_analyst(f: DecisionFactors) -> dict:
    return {
        "perspective": (
            f"With {risk_band(f)} risk tolerance and {financial_band(f)} finances, "
            "this decision requires careful consideration of potential downsides."
        ),
        "recommendation": (
            "Your risk tolerance is high, but ensure you have contingency plans."
            if f.risk_tolerance > 60
            else "Consider smaller steps to minimize exposure while moving forward."
        ),
        "confidence": 75,
        "key_insights": (
            "Market conditions could shift unexpectedly",
            "Your support network will be crucial",
            "Financial buffer recommended",
        ),
        "risks": (
            "Initial income instability",
            "Unexpected costs",
            "Market competition",
        ),
        "opportunities": (
            "Learning from early challenges",
            "Building resilience",
        ),
        "action_items": (
            "Build 6-month emergency fund",
            "Create contingency plan",
            "Identify exit strategies",
        ),
    }


def _opportunity_coach(f: DecisionFactors) -> dict:
    return {
        "perspective": (
            f"Your discipline ({f.discipline_level}%) and support ({f.support_system}%) "
            "position you well for growth."
        ),
        "recommendation": "This decision opens doors to significant development.",
        "confidence": 82,
        "key_insights": (
            "Skills are highly transferable",
            "Network effects will compound",
            "Early mover advantage",
        ),
        "risks": (
            "Opportunity cost of delay",
            "Increasing competition",
        ),
        "opportunities": (
            "Rapid skill acquisition",
            "Valuable network building",
            "Exponential growth potential",
            "Personal fulfillment gains",
        ),
        "action_items": (
            "Start building portfolio",
            "Connect with 3 professionals",
            "Set up progress tracking",
        ),
    }


def _financial_advisor(f: DecisionFactors) -> dict:
    secure = f.financial_stability > 60
    return {
        "perspective": (
            "Financial outlook: "
            + ("Stable with growth potential" if secure else "Challenging initially")
            + "."
        ),
        "recommendation": (
            "You have cushion to weather initial turbulence."
            if secure
            else "Consider phased approach."
        ),
        "confidence": 68,
        "key_insights": (
            "Break-even at 8-12 months",
            "Multiple revenue streams needed",
            "Tax implications favorable",
        ),
        "risks": (
            "Cash flow gaps in months 3-6",
            "Healthcare cost increases",
        ),
        "opportunities": (
            "Tax deductions available",
            "Higher earning ceiling",
            "Investment in skills",
        ),
        "action_items": (
            "Set up business account",
            "Consult tax professional",
            "Create monthly budget",
        ),
    }


def _life_mentor(f: DecisionFactors) -> dict:
    return {
        "perspective": (
            f"Life impact: Aligns {'well' if f.discipline_level > 60 else 'moderately'} "
            "with your values."
        ),
        "recommendation": "Prioritize relationships during transition.",
        "confidence": 85,
        "key_insights": (
            "Greater autonomy improves satisfaction",
            "Flexible schedule benefits relationships",
            "Alignment with personal values",
        ),
        "risks": (
            "Work-life boundaries may blur",
            "Social isolation risk",
            "Stress on relationships",
        ),
        "opportunities": (
            "More time for family",
            "Reduced commute stress",
            "Greater sense of purpose",
            "Improved mental health",
        ),
        "action_items": (
            "Schedule regular check-ins",
            "Establish work boundaries",
            "Prioritize self-care",
        ),
    }


def _generic(f: DecisionFactors) -> dict:
    # advisors supplied by a custom catalog without a dedicated template
    return {
        "perspective": (
            f"With {risk_band(f)} risk tolerance and {financial_band(f)} finances, "
            "weigh this decision against your own priorities."
        ),
        "recommendation": "Consider all factors carefully.",
        "confidence": 70,
        "key_insights": ("Review your decision carefully", "Consider all factors"),
        "risks": ("Uncertainty in outcomes",),
        "opportunities": ("Potential for growth",),
        "action_items": ("Gather more information", "Consult with advisors"),
    }


TEMPLATE_BUILDERS: Dict[str, Callable[[DecisionFactors], dict]] = {
    RISK_ANALYST_ID: _risk_analyst,
    OPPORTUNITY_COACH_ID: _opportunity_coach,
    FINANCIAL_ADVISOR_ID: _financial_advisor,
    LIFE_MENTOR_ID: _life_mentor,
}

CANNED_REPLIES: Dict[str, Tuple[str, ...]] = {
    RISK_ANALYST_ID: (
        "That's a valid concern. Have you considered building a 6-month emergency fund before proceeding?",
        "From a risk perspective, I'd recommend starting with a smaller test run to validate your approach.",
        "The key is having contingency plans. What would you do if things don't go as expected?",
        "Your risk tolerance suggests you can handle uncertainty, but don't skip the planning phase.",
    ),
    OPPORTUNITY_COACH_ID: (
        "That's exactly the right mindset! This could be a huge growth opportunity for you.",
        "Have you thought about who in your network could help accelerate this journey?",
        "The skills you'll gain will be valuable regardless of the outcome. That's a win-win.",
        "I see massive potential here. What's holding you back from starting today?",
    ),
    FINANCIAL_ADVISOR_ID: (
        "Let's run the numbers. What's your current monthly burn rate and runway?",
        "From a financial standpoint, diversifying your income streams would reduce risk.",
        "Have you calculated the tax implications? There might be deductions you're missing.",
        "I'd recommend setting up a separate business account to track expenses properly.",
    ),
    LIFE_MENTOR_ID: (
        "How does this decision align with your core values and long-term vision?",
        "Remember to prioritize your wellbeing during this transition. Self-care isn't selfish.",
        "Have you discussed this with the important people in your life? Their support matters.",
        "Trust your intuition. You know what's right for you better than anyone else.",
    ),
}


class TemplatePerspectiveProvider:
    """Static-table advisor. Never fails, never touches the network."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def build_analysis(
        self, decision: str, factors: DecisionFactors, advisor: AdvisorDefinition
    ) -> AgentAnalysis:
        builder = TEMPLATE_BUILDERS.get(advisor.id, _generic)
        t = builder(factors)
        return AgentAnalysis(
            agent_id=advisor.id,
            agent_name=advisor.name,
            perspective=t["perspective"],
            recommendation=t["recommendation"],
            confidence=clamp_score(t["confidence"]),
            key_insights=tuple(t["key_insights"]),
            risks=tuple(t["risks"]),
            opportunities=tuple(t["opportunities"]),
            action_items=tuple(t["action_items"]),
        )

    def reply(self, advisor: AdvisorDefinition) -> str:
        lines = CANNED_REPLIES.get(advisor.id, CANNED_REPLIES[RISK_ANALYST_ID])
        return self._rng.choice(lines)

    async def analyze(
        self, decision: str, factors: DecisionFactors, advisor: AdvisorDefinition
    ) -> AgentAnalysis:
        return self.build_analysis(decision, factors, advisor)

    async def continue_chat(
        self,
        decision: str,
        factors: DecisionFactors,
        advisor: AdvisorDefinition,
        history: List[ChatTurn],
        message: str,
    ) -> str:
        # canned lines do not depend on the conversation so far
        return self.reply(advisor)
