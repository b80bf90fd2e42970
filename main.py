# main.py
import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config.logging_config import configure_logging
from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.advisor_routes import router as advisor_router
from routers.decision_routes import router as decision_router
from routers.simulation_routes import router as simulation_router
from services.consultation_service import ConsultationService, get_consultation_service
from services.decision.errors import (
    AggregationError,
    AnalysisUnavailableError,
    UnknownAdvisorError,
    ValidationError,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Decision Simulator API")

origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(UnknownAdvisorError)
async def unknown_advisor_handler(_request: Request, exc: UnknownAdvisorError):
    return JSONResponse(status_code=404, content={"error": "Agent not found", "field": exc.field})


@app.exception_handler(ValidationError)
async def validation_error_handler(_request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    # report the first offending field the same way the decision core does
    first = (exc.errors() or [{}])[0]
    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation failed",
            "field": loc[-1] if loc else None,
            "detail": first.get("msg", "invalid request"),
        },
    )


@app.exception_handler(AnalysisUnavailableError)
async def analysis_unavailable_handler(_request: Request, exc: AnalysisUnavailableError):
    return JSONResponse(status_code=503, content={"error": "AI analysis not configured"})


@app.exception_handler(AggregationError)
async def aggregation_error_handler(_request: Request, exc: AggregationError):
    logger.error("aggregation invoked with no analyses: %s", exc)
    return JSONResponse(status_code=500, content={"error": "Failed to generate analysis"})


# Include routers
app.include_router(advisor_router, prefix="/api/agents")
app.include_router(decision_router, prefix="/api/decisions")
app.include_router(simulation_router, prefix="/api")


@app.get("/health")
async def health(service: ConsultationService = Depends(get_consultation_service)):
    return {"status": "ok", "generatedAdvisors": service.provider.uses_generation}
