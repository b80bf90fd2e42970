from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple

from utils.common_helpers import clamp_score

ChatRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class AgentAnalysis:
    agent_id: str
    agent_name: str
    perspective: str
    recommendation: str
    confidence: int  # always clamped to [0, 100] before construction
    key_insights: Tuple[str, ...] = ()
    risks: Tuple[str, ...] = ()
    opportunities: Tuple[str, ...] = ()
    action_items: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agentId": self.agent_id,
            "agentName": self.agent_name,
            "perspective": self.perspective,
            "recommendation": self.recommendation,
            "confidence": self.confidence,
            "keyInsights": list(self.key_insights),
            "risks": list(self.risks),
            "opportunities": list(self.opportunities),
            "actionItems": list(self.action_items),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentAnalysis":
        return cls(
            agent_id=str(data.get("agentId", "")),
            agent_name=str(data.get("agentName", "")),
            perspective=str(data.get("perspective", "")),
            recommendation=str(data.get("recommendation", "")),
            confidence=clamp_score(data.get("confidence")),
            key_insights=tuple(data.get("keyInsights") or ()),
            risks=tuple(data.get("risks") or ()),
            opportunities=tuple(data.get("opportunities") or ()),
            action_items=tuple(data.get("actionItems") or ()),
        )


@dataclass(frozen=True)
class ChatTurn:
    role: ChatRole
    content: str

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}
