# services/decision/guidance.py
"""Static, read-only decision guidance served next to the simulator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from services.decision.outcome_projector import Horizon


@dataclass(frozen=True)
class DecisionFramework:
    id: str
    title: str
    description: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "description": self.description, "icon": self.icon}


@dataclass(frozen=True)
class Explanation:
    title: str
    description: str
    tips: Tuple[str, ...] = ()
    what_to_expect: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "description": self.description, "tips": list(self.tips)}
        if self.what_to_expect:
            out["whatToExpect"] = list(self.what_to_expect)
        return out


@dataclass(frozen=True)
class AdvisoryOverview:
    title: str
    description: str
    steps: Tuple[Tuple[str, str], ...] = ()  # (title, description)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "steps": [{"title": t, "description": d} for t, d in self.steps],
        }


@dataclass(frozen=True)
class SuccessMetric:
    title: str
    indicators: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "indicators": list(self.indicators)}


ADVISORY_OVERVIEW = AdvisoryOverview(
    "How AI Advisory Works",
    "Our AI agents use different frameworks and perspectives to analyze your decision.",
    steps=(
        ("Multiple Perspectives",
         "Each AI agent specializes in a different aspect: risks, opportunities, finances, and life balance."),
        ("Personalized Analysis",
         "Agents consider your specific situation, risk tolerance, and personal factors."),
        ("Consensus Building",
         "We synthesize all perspectives to give you a balanced recommendation."),
        ("Actionable Guidance",
         "Get specific steps, resources, and milestones to guide your journey."),
    ),
)

# keyed like the outcome dimensions; stress has no success indicators
SUCCESS_METRICS: Dict[str, SuccessMetric] = {
    "financial": SuccessMetric(
        "Financial Health",
        (
            "Stable or growing income",
            "Emergency fund maintained",
            "Debt reduction or elimination",
            "Investment in growth",
        ),
    ),
    "emotional": SuccessMetric(
        "Emotional Wellbeing",
        (
            "Sense of fulfillment",
            "Stress levels manageable",
            "Confidence in decisions",
            "Work-life balance",
        ),
    ),
    "social": SuccessMetric(
        "Social Connections",
        (
            "Strong professional network",
            "Supportive relationships",
            "Meaningful collaborations",
            "Community involvement",
        ),
    ),
    "skills": SuccessMetric(
        "Skill Development",
        (
            "New competencies gained",
            "Expertise recognized by others",
            "Continuous learning habit",
            "Ability to teach others",
        ),
    ),
}


DECISION_FRAMEWORKS: Tuple[DecisionFramework, ...] = (
    DecisionFramework(
        "swot", "SWOT Analysis",
        "Evaluate Strengths, Weaknesses, Opportunities, and Threats to get a comprehensive view of your decision.",
        "grid",
    ),
    DecisionFramework(
        "pros-cons", "Pros & Cons",
        "List all advantages and disadvantages, then weigh them by importance to see which side wins.",
        "scale",
    ),
    DecisionFramework(
        "regret-minimization", "Regret Minimization",
        "Project yourself to age 80 and ask: Will I regret not doing this? This clarifies long-term priorities.",
        "clock",
    ),
    DecisionFramework(
        "second-order", "Second-Order Thinking",
        "Consider not just the immediate effects, but the consequences of those consequences.",
        "git-branch",
    ),
)

FACTOR_EXPLANATIONS: Dict[str, Explanation] = {
    "riskTolerance": Explanation(
        "Risk Tolerance",
        "How comfortable are you with uncertainty and potential setbacks?",
        tips=(
            "High risk tolerance: You handle uncertainty well and bounce back quickly from setbacks",
            "Low risk tolerance: You prefer stability and predictability",
            "Consider your financial cushion and support system when assessing",
        ),
    ),
    "financialStability": Explanation(
        "Financial Stability",
        "Your current financial security and ability to weather storms.",
        tips=(
            "Include emergency funds, stable income, and low debt",
            "Consider runway: how long can you sustain without income?",
            "Factor in healthcare, insurance, and unexpected costs",
        ),
    ),
    "disciplineLevel": Explanation(
        "Discipline Level",
        "Your ability to stick to plans, routines, and long-term goals.",
        tips=(
            "High discipline: You consistently follow through on commitments",
            "Consider your track record with similar challenges",
            "Self-employment and major changes require strong self-discipline",
        ),
    ),
    "supportSystem": Explanation(
        "Support System",
        "The network of people who can help, advise, and encourage you.",
        tips=(
            "Include family, friends, mentors, and professional networks",
            "Emotional support is as important as practical help",
            "Consider who you can call when things get tough",
        ),
    ),
}

HORIZON_EXPLANATIONS: Dict[Horizon, Explanation] = {
    Horizon.THREE_MONTHS: Explanation(
        "3 Months: The Adjustment Period",
        "The initial phase where you face the steepest learning curve and highest uncertainty.",
        what_to_expect=(
            "Income may dip or become irregular",
            "New routines and habits are forming",
            "High stress but also excitement",
            "Many unknowns and surprises",
        ),
        tips=(
            "Focus on learning, not perfection",
            "Build systems and routines early",
            "Track progress to see growth",
            "Lean on your support network",
        ),
    ),
    Horizon.ONE_YEAR: Explanation(
        "1 Year: The Growth Phase",
        "You've found your footing and are building momentum. Patterns emerge.",
        what_to_expect=(
            "More predictable income and workflow",
            "Skills have improved significantly",
            "Confidence is higher",
            "New challenges replace old ones",
        ),
        tips=(
            "Optimize your systems",
            "Invest in skill development",
            "Build long-term relationships",
            "Review and adjust goals",
        ),
    ),
    Horizon.FIVE_YEARS: Explanation(
        "5 Years: The Mastery Phase",
        "You've achieved stability and are operating at a high level.",
        what_to_expect=(
            "Expert-level competence",
            "Strong professional network",
            "Financial stability achieved",
            "Clear sense of direction",
        ),
        tips=(
            "Mentor others starting their journey",
            "Consider scaling or new ventures",
            "Focus on legacy and impact",
            "Maintain work-life balance",
        ),
    ),
}


def guidance_payload() -> Dict[str, Any]:
    return {
        "frameworks": [f.to_dict() for f in DECISION_FRAMEWORKS],
        "factors": {k: v.to_dict() for k, v in FACTOR_EXPLANATIONS.items()},
        "horizons": {h.value: e.to_dict() for h, e in HORIZON_EXPLANATIONS.items()},
        "advisory": ADVISORY_OVERVIEW.to_dict(),
        "successMetrics": {k: v.to_dict() for k, v in SUCCESS_METRICS.items()},
    }
