"""
Tests for profile validation and benchmark gap-filling.
"""
import pytest
from pydantic import ValidationError

from app.schemas.profile import (
    PROFILE_FIELDS,
    Contaminant,
    DischargeMethod,
    IndustrySector,
    IntakeQuality,
    MonitoringFrequency,
    OperationalProfile,
    PartialOperationalProfile,
    Provenance,
    TreatmentLevel,
    WaterSource,
    WaterUnit,
)
from app.scoring.normalizer import normalize
from app.scoring.reference_data import DEFAULT_TABLES


class TestOperationalProfileValidation:
    def test_industry_required(self):
        with pytest.raises(ValidationError):
            OperationalProfile(country="Germany")

    def test_country_required(self):
        with pytest.raises(ValidationError):
            OperationalProfile(industry_sector="Mining")

    def test_blank_country_rejected(self):
        with pytest.raises(ValidationError):
            OperationalProfile(industry_sector="Mining", country="   ")

    def test_unknown_enum_value_rejected(self):
        with pytest.raises(ValidationError):
            OperationalProfile(industry_sector="Mining", country="Chile", current_treatment="Partial")

    def test_non_positive_facilities_rejected(self):
        with pytest.raises(ValidationError):
            OperationalProfile(industry_sector="Mining", country="Chile", facilities_count=0)

    def test_duplicates_removed_in_order(self):
        p = OperationalProfile(
            industry_sector="Mining",
            country="Chile",
            water_sources=["Groundwater", "Surface water", "Groundwater"],
        )
        assert p.water_sources == [WaterSource.GROUNDWATER, WaterSource.SURFACE_WATER]

    def test_blank_region_is_unset(self):
        p = OperationalProfile(industry_sector="Mining", country="Chile", region="  ")
        assert p.region is None


class TestPartialProfile:
    def test_unknown_sector_becomes_other(self):
        assert PartialOperationalProfile(industry_sector="Shipbuilding").industry_sector == IndustrySector.OTHER

    def test_sector_match_ignores_case(self):
        p = PartialOperationalProfile(industry_sector="data centers")
        assert p.industry_sector == IndustrySector.DATA_CENTERS

    def test_everything_optional(self):
        assert PartialOperationalProfile().model_dump(exclude_none=True) == {}


class TestNormalize:
    def test_minimal_profile_filled_from_benchmark(self):
        n = normalize(OperationalProfile(industry_sector="Semiconductors", country="Taiwan"), DEFAULT_TABLES)

        assert n.facilities_count == 1
        assert n.annual_water_volume == 5_500_000
        assert n.water_unit == WaterUnit.M3_PER_YEAR
        assert n.water_sources == (WaterSource.MUNICIPAL,)
        assert n.current_treatment == TreatmentLevel.ADVANCED
        assert n.intake_water_quality == IntakeQuality.GOOD
        assert n.primary_contaminants == ()
        assert n.discharge_method == DischargeMethod.MUNICIPAL_SEWER
        assert n.discharge_compliance_concerns is False
        assert n.upstream_pollution_sources == ()
        assert n.water_quality_testing_frequency == MonitoringFrequency.NEVER
        assert n.water_disruptions_past_5y is False

    def test_provenance_tags(self):
        n = normalize(OperationalProfile(industry_sector="Semiconductors", country="Taiwan"), DEFAULT_TABLES)

        assert n.provenance["industry_sector"] == Provenance.STATED
        assert n.provenance["country"] == Provenance.STATED
        assert set(n.provenance) == set(PROFILE_FIELDS)
        assert set(n.inferred_fields()) == set(PROFILE_FIELDS) - {"industry_sector", "country"}

    def test_volume_scales_with_facilities(self):
        n = normalize(
            OperationalProfile(industry_sector="Data Centers", country="Ireland", facilities_count=3),
            DEFAULT_TABLES,
        )
        assert n.annual_water_volume == 4_500_000
        assert n.provenance["facilities_count"] == Provenance.STATED
        assert n.provenance["annual_water_volume"] == Provenance.INFERRED

    def test_stated_volume_keeps_unit(self):
        n = normalize(
            OperationalProfile(
                industry_sector="Food & Beverage",
                country="Mexico",
                annual_water_volume=750,
                water_unit=WaterUnit.ML_PER_YEAR,
            ),
            DEFAULT_TABLES,
        )
        assert n.annual_water_volume == 750
        assert n.water_unit == WaterUnit.ML_PER_YEAR
        assert n.provenance["annual_water_volume"] == Provenance.STATED
        assert n.provenance["water_unit"] == Provenance.STATED

    def test_volume_without_unit_infers_unit(self):
        n = normalize(
            OperationalProfile(industry_sector="Food & Beverage", country="Mexico", annual_water_volume=750_000),
            DEFAULT_TABLES,
        )
        assert n.water_unit == WaterUnit.M3_PER_YEAR
        assert n.provenance["annual_water_volume"] == Provenance.STATED
        assert n.provenance["water_unit"] == Provenance.INFERRED

    def test_extractor_provenance_preserved(self):
        n = normalize(
            OperationalProfile(
                industry_sector="Mining",
                country="Chile",
                intake_water_quality="Poor",
                provenance={"intake_water_quality": "inferred"},
            ),
            DEFAULT_TABLES,
        )
        assert n.intake_water_quality == IntakeQuality.POOR
        assert n.provenance["intake_water_quality"] == Provenance.INFERRED
        assert n.provenance["country"] == Provenance.STATED

    def test_explicit_values_not_overwritten(self):
        n = normalize(
            OperationalProfile(
                industry_sector="Agriculture",
                country="Spain",
                primary_contaminants=[Contaminant.NUTRIENTS],
                water_disruptions_past_5y=True,
            ),
            DEFAULT_TABLES,
        )
        assert n.primary_contaminants == (Contaminant.NUTRIENTS,)
        assert n.water_disruptions_past_5y is True
        assert n.current_treatment == TreatmentLevel.NONE

    def test_other_sector_benchmark(self):
        n = normalize(OperationalProfile(industry_sector="Other", country="Peru"), DEFAULT_TABLES)
        assert n.annual_water_volume == 500_000
        assert n.current_treatment == TreatmentLevel.BASIC

    def test_normalized_profile_is_frozen(self):
        n = normalize(OperationalProfile(industry_sector="Other", country="Peru"), DEFAULT_TABLES)
        with pytest.raises(ValidationError):
            n.country = "Chile"
