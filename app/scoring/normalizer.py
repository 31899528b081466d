"""
Profile Normalizer

Fills every unset field of an OperationalProfile from the industry benchmark
and tags it `inferred`. Fields that arrived with a value keep the provenance
the extractor gave them, or `stated` for a structured form.

Never raises: an unrecognized sector falls through to the 'Other' benchmark.
"""
from __future__ import annotations

from app.schemas.profile import (
    PROFILE_FIELDS,
    NormalizedProfile,
    OperationalProfile,
    Provenance,
    WaterUnit,
)
from app.scoring.reference_data import ReferenceTables

# Fields whose benchmark default is taken verbatim
_BENCHMARK_FIELDS = (
    "water_sources",
    "current_treatment",
    "intake_water_quality",
    "primary_contaminants",
    "discharge_method",
    "discharge_compliance_concerns",
    "upstream_pollution_sources",
    "water_quality_testing_frequency",
    "water_disruptions_past_5y",
)


def normalize(profile: OperationalProfile, tables: ReferenceTables) -> NormalizedProfile:
    benchmark = tables.benchmark_for(profile.industry_sector)
    values = profile.model_dump(exclude={"provenance"})
    provenance: dict[str, Provenance] = {}

    for name in PROFILE_FIELDS:
        if values.get(name) is not None:
            provenance[name] = profile.provenance.get(name, Provenance.STATED)

    if values["facilities_count"] is None:
        values["facilities_count"] = benchmark.facilities_count
        provenance["facilities_count"] = Provenance.INFERRED

    # Volume scales with facility count; an inferred volume is always in m³/year
    if values["annual_water_volume"] is None:
        values["annual_water_volume"] = benchmark.water_use_per_facility * values["facilities_count"]
        values["water_unit"] = WaterUnit.M3_PER_YEAR
        provenance["annual_water_volume"] = Provenance.INFERRED
        provenance["water_unit"] = Provenance.INFERRED
    elif "water_unit" not in profile.model_fields_set and "water_unit" not in profile.provenance:
        # Stated volume without a unit: m³/year is assumed
        provenance["water_unit"] = Provenance.INFERRED

    for name in _BENCHMARK_FIELDS:
        if values[name] is None:
            values[name] = getattr(benchmark, name)
            provenance[name] = Provenance.INFERRED

    # Region has no benchmark; it stays empty and the physical scorer uses the country tier
    if values["region"] is None:
        provenance["region"] = Provenance.INFERRED

    for name in ("water_sources", "primary_contaminants", "upstream_pollution_sources"):
        values[name] = tuple(values[name])

    return NormalizedProfile(**values, provenance=provenance)
