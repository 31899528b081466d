"""
Scoring models — versioned, immutable configuration.

A ScoringModel bundles everything the engine reads besides the profile:
dimension weights, recommendation thresholds and reference tables.
The engine takes the model as a parameter, so a new calibration is a new
model version in MODEL_REGISTRY, never an edit to call sites.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from app.scoring.reference_data import DEFAULT_TABLES, ReferenceTables, Trigger


@dataclass(frozen=True)
class DimensionWeights:
    """
    Composite weights. All five are required and must sum to 1.0;
    replace the whole set to recalibrate.
    """
    physical: Decimal
    regulatory: Decimal
    reputational: Decimal
    financial: Decimal
    water_quality: Decimal

    def __post_init__(self):
        total = self.physical + self.regulatory + self.reputational + self.financial + self.water_quality
        if total != Decimal("1"):
            raise ValueError(f"Weights must sum to 1.0, got {total}")


# ═══════════════════════════════════════════════════════════════
# v1.0 calibration
# ═══════════════════════════════════════════════════════════════
DEFAULT_WEIGHTS = DimensionWeights(
    physical=Decimal("0.25"),
    regulatory=Decimal("0.20"),
    reputational=Decimal("0.15"),
    financial=Decimal("0.20"),
    water_quality=Decimal("0.20"),
)

# Strictly-greater-than trigger thresholds, in evaluation order
DEFAULT_TRIGGER_THRESHOLDS: Mapping[Trigger, int] = MappingProxyType({
    Trigger.PHYSICAL: 60,
    Trigger.FINANCIAL: 60,
    Trigger.REGULATORY: 60,
    Trigger.REPUTATIONAL: 50,
    Trigger.WATER_QUALITY: 50,
    Trigger.GOVERNANCE: 60,
})

# Risk level bands: score <= 30 → low, <= 60 → medium, else high
DEFAULT_LEVEL_BANDS: tuple[int, int] = (30, 60)


@dataclass(frozen=True)
class ScoringModel:
    version: str
    weights: DimensionWeights
    trigger_thresholds: Mapping[Trigger, int]
    tables: ReferenceTables
    level_bands: tuple[int, int] = DEFAULT_LEVEL_BANDS
    max_recommendations: int = 4
    resilience_physical_threshold: int = 30
    financial_compounding_threshold: int = 60


MODEL_V1_0 = ScoringModel(
    version="1.0",
    weights=DEFAULT_WEIGHTS,
    trigger_thresholds=DEFAULT_TRIGGER_THRESHOLDS,
    tables=DEFAULT_TABLES,
)

MODEL_REGISTRY: Mapping[str, ScoringModel] = MappingProxyType({
    MODEL_V1_0.version: MODEL_V1_0,
})


class UnknownModelVersion(KeyError):
    pass


@lru_cache
def get_scoring_model(version: str) -> ScoringModel:
    try:
        return MODEL_REGISTRY[version]
    except KeyError:
        raise UnknownModelVersion(
            f"Unknown scoring model version {version!r}; available: {sorted(MODEL_REGISTRY)}"
        ) from None
