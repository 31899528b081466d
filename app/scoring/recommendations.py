"""
Recommendation Generator

Walks the triggers in evaluation order (Physical, Financial, Regulatory,
Reputational, Water-Quality, Governance). A trigger fires when its
dimension score is strictly above the model threshold and contributes its
catalog entries. With nothing fired, the default set applies.

Output: deduplicated by title, stable-sorted high → medium → low,
truncated to the model's maximum.
"""
from __future__ import annotations

from typing import Optional

from app.schemas.profile import IndustrySector, NormalizedProfile
from app.schemas.risk_response import (
    ExampleProject,
    Priority,
    Recommendation,
    RiskDimension,
    RiskProfile,
)
from app.scoring.model import ScoringModel
from app.scoring.reference_data import (
    TRIGGER_DIMENSION,
    CatalogEntry,
    ExampleProjectRecord,
    Trigger,
)

PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

_DIMENSION_FIELD = {
    RiskDimension.PHYSICAL: "physical",
    RiskDimension.REGULATORY: "regulatory",
    RiskDimension.REPUTATIONAL: "reputational",
    RiskDimension.FINANCIAL: "financial",
    RiskDimension.WATER_QUALITY: "water_quality",
}


def _dimension_score(risk_profile: RiskProfile, dimension: RiskDimension) -> int:
    return getattr(risk_profile, _DIMENSION_FIELD[dimension]).score


def find_example_project(
    technology_types: tuple[str, ...],
    sector: IndustrySector,
    projects: tuple[ExampleProjectRecord, ...],
) -> Optional[ExampleProject]:
    """First project with a matching technology tag, same-sector projects first."""
    if not technology_types:
        return None
    matches = [p for p in projects if p.technology_type in technology_types]
    same_sector = [p for p in matches if p.sector == sector]
    chosen = (same_sector or matches or [None])[0]
    if chosen is None:
        return None
    return ExampleProject(
        name=chosen.name,
        technology_type=chosen.technology_type,
        sector=chosen.sector.value,
        country=chosen.country,
        water_saved_m3_year=chosen.water_saved_m3_year,
        roi_percent=chosen.roi_percent,
    )


def fired_triggers(risk_profile: RiskProfile, model: ScoringModel) -> list[Trigger]:
    fired = []
    for trigger in Trigger:
        score = _dimension_score(risk_profile, TRIGGER_DIMENSION[trigger])
        if score > model.trigger_thresholds[trigger]:
            fired.append(trigger)
    return fired


def generate_recommendations(
    risk_profile: RiskProfile,
    profile: NormalizedProfile,
    model: ScoringModel,
) -> list[Recommendation]:
    tables = model.tables
    candidates: list[tuple[CatalogEntry, RiskDimension]] = []

    triggers = fired_triggers(risk_profile, model)
    for trigger in triggers:
        for entry in tables.recommendation_catalog[trigger]:
            candidates.append((entry, TRIGGER_DIMENSION[trigger]))

    if not triggers:
        candidates.append((tables.baseline_recommendation, RiskDimension.FINANCIAL))
        if risk_profile.physical.score > model.resilience_physical_threshold:
            candidates.append((tables.resilience_recommendation, RiskDimension.PHYSICAL))

    seen: set[str] = set()
    unique = []
    for entry, dimension in candidates:
        if entry.title in seen:
            continue
        seen.add(entry.title)
        unique.append((entry, dimension))

    # Stable sort: equal priorities keep evaluation + catalog order
    unique.sort(key=lambda pair: PRIORITY_RANK[pair[0].priority])

    return [
        Recommendation(
            title=entry.title,
            priority=entry.priority,
            description=entry.description,
            expected_impact=entry.expected_impact,
            dimension=dimension,
            example_project=find_example_project(
                entry.technology_types, profile.industry_sector, tables.example_projects,
            ),
        )
        for entry, dimension in unique[: model.max_recommendations]
    ]
