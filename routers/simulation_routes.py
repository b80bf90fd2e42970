# routers/simulation_routes.py
from __future__ import annotations

from fastapi import APIRouter

from schemas.decision import ProjectionRequest, ProjectionResponse
from services.decision.factors import factor_profile, validate_factors
from services.decision.guidance import guidance_payload
from services.decision.outcome_projector import project

router = APIRouter()


@router.post("/simulations/project", response_model=ProjectionResponse)
async def project_outcomes(body: ProjectionRequest):
    """Deterministic 3-month / 1-year / 5-year outcome projection."""
    factors = validate_factors(body.factors.model_dump())
    return {
        "result": project(factors).to_dict(),
        "profile": factor_profile(factors),
        "factors": factors.to_dict(),
    }


@router.get("/guidance")
async def get_guidance():
    return guidance_payload()
