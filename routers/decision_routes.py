# routers/decision_routes.py
"""
FastAPI route for the single-call decision analysis.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from middleware.rate_limit import limiter
from schemas.decision import DecisionAnalysisRequest, DecisionAnalysisResponse
from services.decision.errors import DecisionError
from services.decision_analysis_service import (
    DecisionAnalysisService,
    get_decision_analysis_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=DecisionAnalysisResponse)
@limiter.limit("10/minute")
async def analyze_decision(
    request: Request,
    body: DecisionAnalysisRequest,
    service: DecisionAnalysisService = Depends(get_decision_analysis_service),
):
    """
    Pros, cons, a recommendation and a 0-100 readiness score for one decision.
    503 when no text-generation provider is configured.
    """
    try:
        result = await service.analyze(body.decision, body.factors.model_dump())
    except DecisionError:
        raise
    except Exception:
        logger.exception("Decision analysis failed")
        raise HTTPException(status_code=500, detail="Failed to analyze decision")
    return result.to_dict()
