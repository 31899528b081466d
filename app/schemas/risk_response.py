"""
Assessment output payload.

The review screen uses: the five dimension scores with their factors,
overall + level, the lookup-tier provenance, the recommendations and the
normalized profile (so inferred fields can be corrected).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.profile import NormalizedProfile


class RiskDimension(str, Enum):
    PHYSICAL = "Physical"
    REGULATORY = "Regulatory"
    REPUTATIONAL = "Reputational"
    FINANCIAL = "Financial"
    WATER_QUALITY = "Water Quality"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LookupTier(str, Enum):
    REGION = "region match"
    COUNTRY = "country match"
    DEFAULT = "default estimation"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BenchmarkStatus(str, Enum):
    EFFICIENT = "efficient"
    AVERAGE = "average"
    HIGH = "high"


class RiskDimensionScore(BaseModel):
    """One risk dimension, score 0-100 (higher = riskier)."""
    dimension: RiskDimension
    score: int = Field(ge=0, le=100)
    level: RiskLevel
    factors: list[str] = Field(description="Contributing factors, most significant first")


class RiskProfile(BaseModel):
    physical: RiskDimensionScore
    regulatory: RiskDimensionScore
    reputational: RiskDimensionScore
    financial: RiskDimensionScore
    water_quality: RiskDimensionScore
    overall: int = Field(ge=0, le=100, description="Fixed-weight composite, rounded once")
    overall_level: RiskLevel
    physical_lookup_tier: LookupTier
    model_version: str

    def dimensions(self) -> list[RiskDimensionScore]:
        return [self.physical, self.regulatory, self.reputational, self.financial, self.water_quality]


class ExampleProject(BaseModel):
    """A comparable real-world project attached to a recommendation."""
    name: str
    technology_type: str
    sector: str
    country: str
    water_saved_m3_year: Optional[float] = None
    roi_percent: Optional[float] = None


class Recommendation(BaseModel):
    title: str
    priority: Priority
    description: str
    expected_impact: str
    dimension: RiskDimension = Field(description="Dimension whose rule produced this action")
    example_project: Optional[ExampleProject] = None


class BenchmarkComparison(BaseModel):
    """Annual water use against the industry benchmark for the same facility count."""
    user_consumption_m3: float
    industry_average_m3: float
    percentage_difference: float
    status: BenchmarkStatus
    insight: str


class AssessmentResult(BaseModel):
    """
    Output of one engine run. Reproducible from `profile` + model version.
    """
    profile: NormalizedProfile
    risk_profile: RiskProfile
    recommendations: list[Recommendation] = Field(description="Bounded by the scoring model's max_recommendations")
    benchmark: BenchmarkComparison

    # ── Metadata ──
    evaluated_at: datetime
    processing_time_ms: int
