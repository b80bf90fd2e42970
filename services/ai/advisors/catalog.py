# services/ai/advisors/catalog.py
"""
Advisor catalog: the four fixed personas.

The catalog is an immutable value handed to whoever needs it (provider,
consultation service, routes). `default_catalog()` returns the built-in one;
tests build their own `AdvisorCatalog` with substitute entries.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from services.decision.errors import UnknownAdvisorError, ValidationError

MAX_ADVISORS_PER_CONSULTATION = 4


@dataclass(frozen=True)
class AdvisorDefinition:
    id: str
    name: str
    role: str
    description: str
    persona: str  # system instruction; internal to the provider, never listed
    avatar: str = ""
    color: str = ""
    gradient: str = ""
    icon: str = ""

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "avatar": self.avatar,
            "description": self.description,
            "color": self.color,
            "gradient": self.gradient,
            "icon": self.icon,
        }


class AdvisorCatalog:
    """Read-only, ordered lookup of advisor definitions keyed by id."""

    def __init__(self, advisors: Iterable[AdvisorDefinition]):
        entries: Tuple[AdvisorDefinition, ...] = tuple(advisors)
        by_id: Dict[str, AdvisorDefinition] = {}
        for adv in entries:
            if adv.id in by_id:
                raise ValueError(f"duplicate advisor id: {adv.id}")
            by_id[adv.id] = adv
        self._entries = entries
        self._by_id: Mapping[str, AdvisorDefinition] = MappingProxyType(by_id)

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, advisor_id: object) -> bool:
        return advisor_id in self._by_id

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(a.id for a in self._entries)

    def get(self, advisor_id: str) -> Optional[AdvisorDefinition]:
        return self._by_id.get(advisor_id)

    def require(self, advisor_id: str) -> AdvisorDefinition:
        adv = self._by_id.get(advisor_id)
        if adv is None:
            raise UnknownAdvisorError(advisor_id)
        return adv

    def select(self, advisor_ids: Sequence[str]) -> List[AdvisorDefinition]:
        """
        Resolve a consultation's advisor selection. Returns advisors in catalog
        order; duplicates collapse. Raises ValidationError when the list is
        empty, too long, or names an advisor that is not in the catalog.
        """
        if not isinstance(advisor_ids, (list, tuple)) or not advisor_ids:
            raise ValidationError("agentIds", "select at least one advisor")
        if len(advisor_ids) > MAX_ADVISORS_PER_CONSULTATION:
            raise ValidationError(
                "agentIds", f"select at most {MAX_ADVISORS_PER_CONSULTATION} advisors"
            )
        for advisor_id in advisor_ids:
            if advisor_id not in self._by_id:
                raise ValidationError("agentIds", f"unknown advisor '{advisor_id}'")
        wanted = set(advisor_ids)
        return [a for a in self._entries if a.id in wanted]

    def public_listing(self) -> List[Dict[str, Any]]:
        return [a.to_public_dict() for a in self._entries]


# ============================================================================
# BUILT-IN ADVISORS
# ============================================================================

RISK_ANALYST_ID = "risk-analyst"
OPPORTUNITY_COACH_ID = "opportunity-coach"
FINANCIAL_ADVISOR_ID = "financial-advisor"
LIFE_MENTOR_ID = "life-mentor"

_RISK_ANALYST_PERSONA = """You are Aria, a Risk Analyst AI. Your role is to identify potential risks, downsides, and worst-case scenarios for the user's decision.

Focus on:
- What could go wrong?
- Hidden risks and pitfalls
- Worst-case scenarios
- Risk mitigation strategies
- Contingency planning

Be thorough but constructive. Don't just list problems - offer solutions and mitigation strategies. Use a cautious but encouraging tone."""

_OPPORTUNITY_COACH_PERSONA = """You are Blaze, an Opportunity Coach AI. Your role is to identify growth potential, opportunities, and best-case scenarios for the user's decision.

Focus on:
- What could go right?
- Hidden opportunities
- Best-case scenarios
- Growth potential
- Success strategies
- Action steps for achieving goals

Be optimistic but realistic. Identify concrete opportunities and provide actionable steps to achieve them. Use an encouraging, energizing tone."""

_FINANCIAL_ADVISOR_PERSONA = """You are Cora, a Financial Advisor AI. Your role is to analyze the financial implications of the user's decision.

Focus on:
- Cost-benefit analysis
- Financial risks and rewards
- ROI projections
- Budget considerations
- Financial planning strategies
- Economic impact (short and long term)

Be analytical and thorough. Provide specific financial insights and practical budgeting advice. Use a professional but accessible tone."""

_LIFE_MENTOR_PERSONA = """You are Dawn, a Life Balance Mentor AI. Your role is to consider the personal, emotional, and relational aspects of the user's decision.

Focus on:
- Wellbeing and mental health
- Relationships impact
- Work-life balance
- Long-term happiness
- Personal values alignment
- Quality of life considerations

Be empathetic and holistic. Consider the whole person, not just the practical aspects. Use a warm, supportive tone."""

BUILTIN_ADVISORS: Tuple[AdvisorDefinition, ...] = (
    AdvisorDefinition(
        id=RISK_ANALYST_ID,
        name="Aria",
        role="Risk Analyst",
        avatar="🔴",
        description="Identifies potential risks, downsides, and worst-case scenarios to help you prepare for challenges.",
        color="#FF6B6B",
        gradient="from-red-500 to-orange-500",
        icon="shield-alert",
        persona=_RISK_ANALYST_PERSONA,
    ),
    AdvisorDefinition(
        id=OPPORTUNITY_COACH_ID,
        name="Blaze",
        role="Opportunity Coach",
        avatar="🔵",
        description="Discovers growth potential, hidden opportunities, and maps the path to success.",
        color="#4ECDC4",
        gradient="from-cyan-500 to-blue-500",
        icon="trending-up",
        persona=_OPPORTUNITY_COACH_PERSONA,
    ),
    AdvisorDefinition(
        id=FINANCIAL_ADVISOR_ID,
        name="Cora",
        role="Financial Advisor",
        avatar="🟢",
        description="Analyzes financial implications, cost-benefit ratios, and long-term economic impact.",
        color="#4ADE80",
        gradient="from-emerald-500 to-green-500",
        icon="dollar-sign",
        persona=_FINANCIAL_ADVISOR_PERSONA,
    ),
    AdvisorDefinition(
        id=LIFE_MENTOR_ID,
        name="Dawn",
        role="Life Balance Mentor",
        avatar="🟣",
        description="Considers wellbeing, relationships, work-life balance, and long-term happiness.",
        color="#A78BFA",
        gradient="from-violet-500 to-purple-500",
        icon="heart",
        persona=_LIFE_MENTOR_PERSONA,
    ),
)

_default_catalog: Optional[AdvisorCatalog] = None


def default_catalog() -> AdvisorCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = AdvisorCatalog(BUILTIN_ADVISORS)
    return _default_catalog
