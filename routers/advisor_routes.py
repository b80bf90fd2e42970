# routers/advisor_routes.py
"""
FastAPI routes for advisor consultations.
"""
from __future__ import annotations

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from middleware.rate_limit import limiter
from schemas.decision import (
    ActionPlanRequest,
    AdvisorListResponse,
    AnalyzeRequest,
    ChatRequest,
    ChatResponse,
    ConsultationResponse,
)
from services.ai.advisors.types import AgentAnalysis
from services.consultation_service import ConsultationService, get_consultation_service
from services.decision.errors import DecisionError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/list", response_model=AdvisorListResponse)
async def list_advisors(service: ConsultationService = Depends(get_consultation_service)):
    """Public advisor listing. Persona instructions are never included."""
    return {"agents": service.catalog.public_listing()}


@router.post("/analyze", response_model=ConsultationResponse)
@limiter.limit("10/minute")
async def analyze_decision(
    request: Request,
    body: AnalyzeRequest,
    service: ConsultationService = Depends(get_consultation_service),
):
    """
    Run every selected advisor on the decision and reduce the results to a
    consensus, divergence findings and an overall confidence.

    Never fails because a text-generation provider is down: affected
    advisors answer from their deterministic templates instead.
    """
    try:
        consultation = await service.consult(
            body.decision, body.factors.model_dump(), body.agentIds
        )
    except DecisionError:
        raise
    except Exception:
        logger.exception("Consultation failed")
        raise HTTPException(status_code=500, detail="Failed to generate analysis")
    return consultation.to_dict()


@router.post("/chat", response_model=ChatResponse)
@limiter.limit("20/minute")
async def chat_with_advisor(
    request: Request,
    body: ChatRequest,
    service: ConsultationService = Depends(get_consultation_service),
):
    """One stateless chat turn; send the full history with every request."""
    try:
        reply = await service.continue_conversation(
            body.decision,
            body.factors.model_dump(),
            body.agentId,
            [m.model_dump() for m in body.messageHistory],
            body.userMessage,
        )
    except DecisionError:
        raise
    except Exception:
        logger.exception("Advisor chat failed")
        raise HTTPException(status_code=500, detail="Failed to generate response")
    return {"response": reply}


@router.post("/action-plan")
@limiter.limit("20/minute")
async def build_action_plan(
    request: Request,
    body: ActionPlanRequest,
    service: ConsultationService = Depends(get_consultation_service),
):
    analyses = [AgentAnalysis.from_dict(a.model_dump()) for a in body.analyses]
    return service.plan(analyses, body.decision).to_dict()
