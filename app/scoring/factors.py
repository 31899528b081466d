"""
v1.0 Scoring Model — 5 Risk Dimension Scorers

Each scorer:
  1. Takes the normalized profile and the model's reference tables
  2. Starts from a base score and adds situational adjustments
  3. Clamps to [0, 100] and reports the contributions that drove it

Weights are applied in the engine, not here.

Convention: HIGHER score = HIGHER risk.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.schemas.profile import (
    DischargeMethod,
    NormalizedProfile,
    TreatmentLevel,
    UpstreamPollutionSource,
    WaterSource,
)
from app.schemas.risk_response import LookupTier, RiskDimension
from app.scoring.reference_data import ReferenceTables

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class Contribution:
    label: str
    points: int


@dataclass(frozen=True)
class DimensionResult:
    dimension: RiskDimension
    score: int
    contributions: tuple[Contribution, ...]
    lookup_tier: Optional[LookupTier] = None

    @property
    def factors(self) -> list[str]:
        """Contribution labels, largest first; equal points keep evaluation order."""
        ranked = sorted(self.contributions, key=lambda c: c.points, reverse=True)
        return [f"{c.label} (+{c.points})" for c in ranked]


def clamp(score: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, score))


def _result(dimension: RiskDimension, contributions: list[Contribution], tier=None) -> DimensionResult:
    total = sum(c.points for c in contributions)
    return DimensionResult(dimension, clamp(total), tuple(contributions), tier)


# ═══════════════════════════════════════════════════════════════
# 1. PHYSICAL  (weight = 0.25)
#    Base from water-stress geography: region > country > default,
#    refined by the facility's own supply exposure.
# ═══════════════════════════════════════════════════════════════
def resolve_water_stress(country: str, region: Optional[str], tables: ReferenceTables):
    """Returns (base score, lookup tier, note) for a location."""
    country_key = tables.canonical_country(country)

    if region:
        region_key = " ".join(region.split()).casefold()
        hit = tables.region_water_stress.get((country_key, region_key))
        if hit is not None:
            return hit.score, LookupTier.REGION, hit.note

    hit = tables.country_water_stress.get(country_key)
    if hit is not None:
        return hit.score, LookupTier.COUNTRY, hit.note

    return tables.default_water_stress, LookupTier.DEFAULT, None


def score_physical(profile: NormalizedProfile, tables: ReferenceTables) -> DimensionResult:
    base, tier, note = resolve_water_stress(profile.country, profile.region, tables)

    location = f"{profile.region}, {profile.country}" if tier == LookupTier.REGION else profile.country
    if tier == LookupTier.DEFAULT:
        label = f"No water-stress data for {profile.country}, default baseline"
    elif note:
        label = f"Water stress in {location}: {note}"
    else:
        label = f"Water stress baseline for {location}"
    contributions = [Contribution(label, base)]

    if profile.water_disruptions_past_5y:
        contributions.append(Contribution("Supply disruptions in the past 5 years", 10))

    sources = set(profile.water_sources)
    if WaterSource.GROUNDWATER in sources and WaterSource.MUNICIPAL not in sources:
        contributions.append(Contribution("Groundwater supply without municipal backup", 5))

    return _result(RiskDimension.PHYSICAL, contributions, tier)


# ═══════════════════════════════════════════════════════════════
# 2. REGULATORY  (weight = 0.20)
# ═══════════════════════════════════════════════════════════════
def score_regulatory(profile: NormalizedProfile, tables: ReferenceTables) -> DimensionResult:
    contributions = [Contribution("Baseline regulatory exposure", 30)]

    if profile.industry_sector in tables.high_regulation_sectors:
        contributions.append(Contribution(f"{profile.industry_sector.value} is a highly regulated sector", 25))

    if profile.current_treatment in (TreatmentLevel.NONE, TreatmentLevel.BASIC):
        contributions.append(Contribution(f"On-site treatment level: {profile.current_treatment.value}", 20))

    if profile.discharge_compliance_concerns:
        contributions.append(Contribution("Discharge permit compliance concerns", 15))

    if profile.discharge_method == DischargeMethod.SURFACE_WATER:
        contributions.append(Contribution("Direct discharge to surface water", 10))

    return _result(RiskDimension.REGULATORY, contributions)


# ═══════════════════════════════════════════════════════════════
# 3. REPUTATIONAL  (weight = 0.15)
# ═══════════════════════════════════════════════════════════════
def score_reputational(profile: NormalizedProfile, tables: ReferenceTables) -> DimensionResult:
    contributions = [Contribution("Baseline reputational exposure", 30)]

    if profile.industry_sector in tables.high_visibility_sectors:
        contributions.append(Contribution(f"{profile.industry_sector.value} is a high-visibility sector", 25))

    if profile.current_treatment == TreatmentLevel.NONE:
        contributions.append(Contribution("No on-site water treatment", 15))

    if profile.discharge_compliance_concerns:
        contributions.append(Contribution("Discharge compliance concerns visible to communities", 20))

    return _result(RiskDimension.REPUTATIONAL, contributions)


# ═══════════════════════════════════════════════════════════════
# 4. FINANCIAL  (weight = 0.20)
#    Compounds with physical risk: scarce water correlates with
#    price volatility, so a high physical score adds here too.
# ═══════════════════════════════════════════════════════════════
def score_financial(
    profile: NormalizedProfile,
    tables: ReferenceTables,
    physical_score: int,
    compounding_threshold: int = 60,
) -> DimensionResult:
    contributions = [Contribution("Baseline water cost exposure", 30)]

    if profile.water_disruptions_past_5y:
        contributions.append(Contribution("Production losses from past supply disruptions", 25))

    if profile.industry_sector in tables.water_intensive_sectors:
        contributions.append(Contribution(f"{profile.industry_sector.value} is a water-intensive sector", 20))

    if physical_score > compounding_threshold:
        contributions.append(Contribution("Price volatility from high physical water stress", 15))

    return _result(RiskDimension.FINANCIAL, contributions)


# ═══════════════════════════════════════════════════════════════
# 5. WATER QUALITY / GOVERNANCE  (weight = 0.20)
#    Intake rating + contaminants + upstream pollution + monitoring gap
# ═══════════════════════════════════════════════════════════════
def score_water_quality(profile: NormalizedProfile, tables: ReferenceTables) -> DimensionResult:
    intake = profile.intake_water_quality
    contributions = [Contribution(f"Intake water quality: {intake.value}", tables.intake_quality_base[intake])]

    contaminants = [c for c in profile.primary_contaminants if c not in tables.contaminant_markers]
    if contaminants:
        contributions.append(Contribution(
            f"{len(contaminants)} contaminant(s) present in source water",
            min(len(contaminants) * 3, 15),
        ))

    severe = [c.value for c in contaminants if c in tables.severe_contaminants]
    if severe:
        contributions.append(Contribution(f"Severe contaminants: {', '.join(severe)}", 10))

    # "None known" on its own reports no upstream pressure; any other entry counts
    upstream = list(profile.upstream_pollution_sources)
    if upstream == [UpstreamPollutionSource.NONE_KNOWN]:
        upstream = []
    if upstream:
        contributions.append(Contribution(
            f"{len(upstream)} upstream pollution source(s)",
            min(len(upstream) * 5, 15),
        ))

    frequency = profile.water_quality_testing_frequency
    gap = tables.monitoring_gap_penalty[frequency]
    if gap:
        contributions.append(Contribution(f"Monitoring gap, testing frequency: {frequency.value}", gap))

    return _result(RiskDimension.WATER_QUALITY, contributions)
