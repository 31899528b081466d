"""
POST /v1/risk/evaluate

Stateless scoring: structured profile in, full assessment out.
Nothing is persisted; saving goes through the session flow.
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException

from app.api.dependencies import get_model
from app.core.config import get_settings
from app.schemas.profile import OperationalProfile
from app.schemas.risk_response import AssessmentResult
from app.scoring.engine import evaluate
from app.scoring.model import ScoringModel

logger = structlog.get_logger()
router = APIRouter(prefix="/v1/risk", tags=["risk"])


@router.post(
    "/evaluate",
    response_model=AssessmentResult,
    summary="Score water risk for a facility profile",
    description="Fills gaps from the industry benchmark, scores five risk dimensions, returns recommendations.",
)
async def evaluate_risk(
    profile: OperationalProfile,
    model: ScoringModel = Depends(get_model),
) -> AssessmentResult:

    logger.info(
        "risk_evaluation_started",
        industry=profile.industry_sector.value,
        country=profile.country,
        model_version=model.version,
    )

    try:
        return evaluate(profile, model)
    except Exception as e:
        logger.error("scoring_failed", industry=profile.industry_sector.value, error=str(e))
        raise HTTPException(status_code=500, detail=f"Scoring engine error: {e}")


@router.get("/health", tags=["health"])
async def health():
    settings = get_settings()
    return {"status": "ok", "service": settings.app_name, "model_version": settings.scoring_model_version}
