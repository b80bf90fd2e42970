from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, StrictFloat


# ── Requests ────────────────────────────────────────────────────────────
# Shapes only. Ranges and business rules are enforced by the decision core,
# which raises ValidationError naming the offending field.

class FactorsIn(BaseModel):
    # strict: no "50" strings or booleans; ints still come through
    riskTolerance: StrictFloat
    financialStability: StrictFloat
    disciplineLevel: StrictFloat
    supportSystem: StrictFloat


class ChatMessageIn(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(max_length=8000)


class AnalyzeRequest(BaseModel):
    decision: str
    factors: FactorsIn
    agentIds: List[str]


class ChatRequest(BaseModel):
    decision: str
    factors: FactorsIn
    agentId: str
    messageHistory: List[ChatMessageIn] = Field(default_factory=list)
    userMessage: str


class AnalysisIn(BaseModel):
    agentId: str
    agentName: str
    perspective: str = ""
    recommendation: str = ""
    confidence: Any = None
    keyInsights: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    actionItems: List[str] = Field(default_factory=list)


class ActionPlanRequest(BaseModel):
    decision: str
    analyses: List[AnalysisIn]


class ProjectionRequest(BaseModel):
    factors: FactorsIn


class DecisionAnalysisRequest(BaseModel):
    decision: str
    factors: FactorsIn


# ── Responses ───────────────────────────────────────────────────────────

class AdvisorOut(BaseModel):
    id: str
    name: str
    role: str
    avatar: str
    description: str
    color: str
    gradient: str
    icon: str


class AdvisorListResponse(BaseModel):
    agents: List[AdvisorOut]


class AnalysisOut(BaseModel):
    agentId: str
    agentName: str
    perspective: str
    recommendation: str
    confidence: int
    keyInsights: List[str]
    risks: List[str]
    opportunities: List[str]
    actionItems: List[str]


class ConsultationResponse(BaseModel):
    decision: str
    factors: Dict[str, int]
    analyses: List[AnalysisOut]
    consensus: str
    divergentPoints: List[str]
    overallConfidence: int


class ChatResponse(BaseModel):
    response: str


class DimensionOut(BaseModel):
    value: int
    label: str


class HorizonOut(BaseModel):
    financial: DimensionOut
    emotional: DimensionOut
    social: DimensionOut
    skills: DimensionOut
    stress: DimensionOut


class SimulationOut(BaseModel):
    threeMonths: HorizonOut
    oneYear: HorizonOut
    fiveYears: HorizonOut
    summary: str
    alternativePath: str


class FactorProfileOut(BaseModel):
    riskBand: str
    financialBand: str
    decisionConfidence: int
    insightPattern: str


class ProjectionResponse(BaseModel):
    result: SimulationOut
    profile: FactorProfileOut
    factors: Dict[str, int]


class DecisionAnalysisResponse(BaseModel):
    analysis: str
    pros: List[str]
    cons: List[str]
    recommendation: str
    confidenceScore: int


class ErrorResponse(BaseModel):
    error: str
    field: Optional[str] = None
    detail: Optional[str] = None
