# services/decision/action_plan.py
"""
Action plan synthesis.

The plan is currently a fixed catalog: it needs a non-empty analysis set and
a decision, but its items do not vary with what the advisors concluded.
Every call builds new item objects, so a caller can tick `completed` on its
copy without affecting anyone else's plan.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from services.ai.advisors.types import AgentAnalysis
from services.decision.errors import ValidationError


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Timeframe(str, Enum):
    IMMEDIATE = "immediate"
    WEEK = "week"
    MONTH = "month"


class ResourceType(str, Enum):
    ARTICLE = "article"
    TOOL = "tool"
    BOOK = "book"
    VIDEO = "video"
    COURSE = "course"


@dataclass
class ActionItem:
    id: str
    title: str
    description: str
    priority: Priority
    timeframe: Timeframe
    agent_source: str
    completed: bool = False  # owned by the caller

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "timeframe": self.timeframe.value,
            "agentSource": self.agent_source,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class Resource:
    id: str
    title: str
    type: ResourceType
    description: str
    agent_source: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "description": self.description,
            "agentSource": self.agent_source,
        }
        if self.url:
            out["url"] = self.url
        return out


@dataclass(frozen=True)
class Milestone:
    id: str
    title: str
    description: str
    target_date: str
    success_criteria: str
    agent_source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "targetDate": self.target_date,
            "successCriteria": self.success_criteria,
            "agentSource": self.agent_source,
        }


@dataclass
class ActionPlan:
    short_term: List[ActionItem] = field(default_factory=list)
    medium_term: List[ActionItem] = field(default_factory=list)
    long_term: List[ActionItem] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shortTerm": [i.to_dict() for i in self.short_term],
            "mediumTerm": [i.to_dict() for i in self.medium_term],
            "longTerm": [i.to_dict() for i in self.long_term],
            "resources": [r.to_dict() for r in self.resources],
            "milestones": [m.to_dict() for m in self.milestones],
        }


# ============================================================================
# CATALOG
# ============================================================================

def _short_term() -> List[ActionItem]:
    return [
        ActionItem("1", "Research and validate your decision",
                   "Gather more information about your chosen path",
                   Priority.HIGH, Timeframe.IMMEDIATE, "Risk Analyst"),
        ActionItem("2", "Build emergency fund",
                   "Save 3-6 months of expenses before making the leap",
                   Priority.HIGH, Timeframe.MONTH, "Financial Advisor"),
        ActionItem("3", "Connect with mentors",
                   "Reach out to people who have made similar transitions",
                   Priority.MEDIUM, Timeframe.WEEK, "Opportunity Coach"),
    ]


def _medium_term() -> List[ActionItem]:
    return [
        ActionItem("4", "Develop core skills",
                   "Focus on the 3 most important skills for success",
                   Priority.HIGH, Timeframe.MONTH, "Opportunity Coach"),
        ActionItem("5", "Create portfolio/samples",
                   "Build evidence of your capabilities",
                   Priority.MEDIUM, Timeframe.MONTH, "Opportunity Coach"),
    ]


def _long_term() -> List[ActionItem]:
    return [
        ActionItem("6", "Establish sustainable systems",
                   "Build routines and processes for long-term success",
                   Priority.MEDIUM, Timeframe.MONTH, "Life Mentor"),
    ]


RESOURCES = (
    Resource("r1", "The Lean Startup", ResourceType.BOOK,
             "Essential reading for anyone starting a new venture", "Opportunity Coach"),
    Resource("r2", "Personal Finance Dashboard", ResourceType.TOOL,
             "Track your finances during the transition", "Financial Advisor"),
    Resource("r3", "Work-Life Balance Guide", ResourceType.ARTICLE,
             "Strategies for maintaining balance during transitions", "Life Mentor"),
)

MILESTONES = (
    Milestone("m1", "Decision Made", "Commit to your path", "Week 1",
              "Clear decision documented with reasoning", "All Agents"),
    Milestone("m2", "Financial Safety Net", "Emergency fund in place", "Month 1-3",
              "6 months expenses saved", "Financial Advisor"),
    Milestone("m3", "First Client/Project", "Initial validation of your path", "Month 3-6",
              "First paid work completed", "Opportunity Coach"),
)


def synthesize(analyses: Sequence[AgentAnalysis], decision: str) -> ActionPlan:
    if not analyses:
        raise ValidationError("analyses", "at least one analysis is required")
    if not (decision or "").strip():
        raise ValidationError("decision", "is required")

    return ActionPlan(
        short_term=_short_term(),
        medium_term=_medium_term(),
        long_term=_long_term(),
        resources=list(RESOURCES),
        milestones=list(MILESTONES),
    )
