"""
v1.0 Water Risk Scoring Engine

Orchestrates:
  1. Profile normalization (benchmark gap-filling + provenance)
  2. All 5 dimension scores
  3. Weighted composite score
  4. Risk level assignment
  5. Recommendation generation
  6. Industry benchmark comparison

Pure and synchronous; the scoring model is always passed in.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

import structlog

from app.schemas.profile import NormalizedProfile, OperationalProfile
from app.schemas.risk_response import (
    AssessmentResult,
    RiskDimensionScore,
    RiskLevel,
    RiskProfile,
)
from app.scoring import factors
from app.scoring.model import DimensionWeights, ScoringModel
from app.scoring.normalizer import normalize
from app.scoring.recommendations import generate_recommendations
from app.services.benchmark_comparison import compare_to_benchmark

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# Composite
#   overall = Σ score × weight, in Decimal, rounded half-up once
# ═══════════════════════════════════════════════════════════════
def aggregate(
    physical: int,
    regulatory: int,
    reputational: int,
    financial: int,
    water_quality: int,
    weights: DimensionWeights,
) -> int:
    total = (
        Decimal(physical) * weights.physical
        + Decimal(regulatory) * weights.regulatory
        + Decimal(reputational) * weights.reputational
        + Decimal(financial) * weights.financial
        + Decimal(water_quality) * weights.water_quality
    )
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def risk_level(score: int, bands: tuple[int, int] = (30, 60)) -> RiskLevel:
    low, medium = bands
    if score <= low:
        return RiskLevel.LOW
    if score <= medium:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def score_profile(profile: NormalizedProfile, model: ScoringModel) -> RiskProfile:
    """Five dimensions + composite for an already-normalized profile."""
    tables = model.tables

    physical = factors.score_physical(profile, tables)
    results = [
        physical,
        factors.score_regulatory(profile, tables),
        factors.score_reputational(profile, tables),
        factors.score_financial(profile, tables, physical.score, model.financial_compounding_threshold),
        factors.score_water_quality(profile, tables),
    ]

    scores = [
        RiskDimensionScore(
            dimension=r.dimension,
            score=r.score,
            level=risk_level(r.score, model.level_bands),
            factors=r.factors,
        )
        for r in results
    ]

    overall = aggregate(*(s.score for s in scores), weights=model.weights)

    return RiskProfile(
        physical=scores[0],
        regulatory=scores[1],
        reputational=scores[2],
        financial=scores[3],
        water_quality=scores[4],
        overall=overall,
        overall_level=risk_level(overall, model.level_bands),
        physical_lookup_tier=physical.lookup_tier,
        model_version=model.version,
    )


def evaluate(profile: OperationalProfile, model: ScoringModel) -> AssessmentResult:
    """
    Main scoring entry point.
    """
    t0 = time.perf_counter_ns()

    normalized = normalize(profile, model.tables)
    risk_profile = score_profile(normalized, model)
    recommendations = generate_recommendations(risk_profile, normalized, model)
    benchmark = compare_to_benchmark(normalized, model.tables)

    elapsed_ms = int((time.perf_counter_ns() - t0) / 1_000_000)

    logger.info(
        "risk_evaluation_complete",
        model_version=model.version,
        industry=normalized.industry_sector.value,
        country=normalized.country,
        overall=risk_profile.overall,
        level=risk_profile.overall_level.value,
        lookup_tier=risk_profile.physical_lookup_tier.value,
        inferred_fields=len(normalized.inferred_fields()),
        recommendations_count=len(recommendations),
        elapsed_ms=elapsed_ms,
    )

    return AssessmentResult(
        profile=normalized,
        risk_profile=risk_profile,
        recommendations=recommendations,
        benchmark=benchmark,
        evaluated_at=datetime.now(timezone.utc),
        processing_time_ms=elapsed_ms,
    )
