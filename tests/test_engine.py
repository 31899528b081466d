"""
Integration tests for the full scoring engine.
Tests end-to-end scoring with realistic facility scenarios.
"""
from dataclasses import replace
from decimal import Decimal
from itertools import product

import pytest

from app.schemas.profile import (
    Contaminant,
    DischargeMethod,
    IndustrySector,
    IntakeQuality,
    MonitoringFrequency,
    OperationalProfile,
    TreatmentLevel,
    UpstreamPollutionSource,
    WaterSource,
)
from app.schemas.risk_response import LookupTier, RiskLevel
from app.scoring.engine import aggregate, evaluate, risk_level, score_profile
from app.scoring.model import (
    DEFAULT_WEIGHTS,
    MODEL_V1_0,
    DimensionWeights,
    UnknownModelVersion,
    get_scoring_model,
)
from app.scoring.normalizer import normalize


def _make_profile(**overrides) -> OperationalProfile:
    """Build a baseline low-risk facility, then override specific fields."""
    kwargs = {
        "company_name": "Nordic Parts AS",
        "industry_sector": "Manufacturing",
        "country": "Norway",
        "facilities_count": 1,
        "water_sources": [WaterSource.MUNICIPAL],
        "annual_water_volume": 500_000,
        "current_treatment": TreatmentLevel.ADVANCED,
        "intake_water_quality": IntakeQuality.EXCELLENT,
        "primary_contaminants": [Contaminant.NONE_KNOWN],
        "discharge_method": DischargeMethod.MUNICIPAL_SEWER,
        "discharge_compliance_concerns": False,
        "upstream_pollution_sources": [UpstreamPollutionSource.NONE_KNOWN],
        "water_quality_testing_frequency": MonitoringFrequency.CONTINUOUS,
        "water_disruptions_past_5y": False,
    }
    kwargs.update(overrides)
    return OperationalProfile(**kwargs)


class TestAggregate:
    def test_fixed_weight_sum(self):
        # 10×.25 + 30×.20 + 30×.15 + 30×.20 + 5×.20 = 20.0
        assert aggregate(10, 30, 30, 30, 5, weights=DEFAULT_WEIGHTS) == 20

    def test_rounds_half_up(self):
        assert aggregate(2, 0, 0, 0, 0, weights=DEFAULT_WEIGHTS) == 1  # 0.5

    def test_rounds_once_not_per_term(self):
        # .25 + .20 + .15 + .20 + .20 = 1.0; per-term rounding would give 0
        assert aggregate(1, 1, 1, 1, 1, weights=DEFAULT_WEIGHTS) == 1

    def test_extremes(self):
        assert aggregate(0, 0, 0, 0, 0, weights=DEFAULT_WEIGHTS) == 0
        assert aggregate(100, 100, 100, 100, 100, weights=DEFAULT_WEIGHTS) == 100

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            DimensionWeights(
                physical=Decimal("0.30"),
                regulatory=Decimal("0.20"),
                reputational=Decimal("0.15"),
                financial=Decimal("0.20"),
                water_quality=Decimal("0.20"),
            )

    def test_weights_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_WEIGHTS.physical = Decimal("0.5")


class TestRiskLevel:
    @pytest.mark.parametrize("score,level", [
        (0, RiskLevel.LOW),
        (30, RiskLevel.LOW),
        (31, RiskLevel.MEDIUM),
        (60, RiskLevel.MEDIUM),
        (61, RiskLevel.HIGH),
        (100, RiskLevel.HIGH),
    ])
    def test_bands(self, score, level):
        assert risk_level(score) == level


class TestEngineEndToEnd:

    def test_low_risk_facility(self):
        result = evaluate(_make_profile(), MODEL_V1_0)
        rp = result.risk_profile

        assert [d.score for d in rp.dimensions()] == [10, 30, 30, 30, 5]
        assert rp.overall == 20
        assert rp.overall_level == RiskLevel.LOW
        assert rp.physical_lookup_tier == LookupTier.COUNTRY
        assert rp.model_version == "1.0"
        assert [r.title for r in result.recommendations] == ["Water Efficiency Audit & Quick Wins"]

    def test_stressed_fab(self):
        """Arizona fab, disruptions, basic treatment, permit concerns → high risk."""
        result = evaluate(
            _make_profile(
                industry_sector="Semiconductors",
                country="United States",
                region="Arizona",
                water_disruptions_past_5y=True,
                current_treatment=TreatmentLevel.BASIC,
                discharge_compliance_concerns=True,
            ),
            MODEL_V1_0,
        )
        rp = result.risk_profile

        assert rp.physical.score == 85
        assert rp.regulatory.score == 90
        assert rp.reputational.score == 50
        assert rp.financial.score == 90
        assert rp.water_quality.score == 5
        # 85×.25 + 90×.20 + 50×.15 + 90×.20 + 5×.20 = 65.75
        assert rp.overall == 66
        assert rp.overall_level == RiskLevel.HIGH
        assert rp.physical_lookup_tier == LookupTier.REGION
        assert 1 <= len(result.recommendations) <= 4

    def test_minimal_profile_scores(self):
        result = evaluate(OperationalProfile(industry_sector="Semiconductors", country="Atlantis"), MODEL_V1_0)
        assert result.risk_profile.physical.score == 35
        assert result.risk_profile.physical_lookup_tier == LookupTier.DEFAULT
        assert "water_sources" in result.profile.inferred_fields()

    def test_scenario_taiwan_disruptions(self):
        result = evaluate(
            OperationalProfile(
                industry_sector="Semiconductors",
                country="Taiwan",
                water_disruptions_past_5y=True,
            ),
            MODEL_V1_0,
        )
        assert result.risk_profile.physical.score == 70
        assert result.risk_profile.physical_lookup_tier == LookupTier.COUNTRY

    def test_scenario_food_and_beverage_untreated(self):
        result = evaluate(
            _make_profile(industry_sector="Food & Beverage", current_treatment=TreatmentLevel.NONE),
            MODEL_V1_0,
        )
        assert result.risk_profile.regulatory.score >= 50
        assert result.risk_profile.reputational.score >= 70

    def test_scenario_pfas_and_heavy_metals_untested(self):
        result = evaluate(
            _make_profile(
                intake_water_quality=IntakeQuality.UNKNOWN,
                primary_contaminants=[Contaminant.PFAS, Contaminant.HEAVY_METALS],
                water_quality_testing_frequency=MonitoringFrequency.NEVER,
            ),
            MODEL_V1_0,
        )
        assert result.risk_profile.water_quality.score == 66

    def test_benchmark_attached(self):
        result = evaluate(_make_profile(annual_water_volume=400_000), MODEL_V1_0)
        assert result.benchmark.industry_average_m3 == 500_000
        assert result.benchmark.status == "efficient"

    def test_company_name_carried_through(self):
        result = evaluate(_make_profile(), MODEL_V1_0)
        assert result.profile.company_name == "Nordic Parts AS"


class TestProperties:

    def test_deterministic(self):
        normalized = normalize(_make_profile(country="India", water_disruptions_past_5y=True), MODEL_V1_0.tables)
        assert score_profile(normalized, MODEL_V1_0) == score_profile(normalized, MODEL_V1_0)

    def test_scores_always_in_bounds(self):
        grid = product(
            list(IndustrySector),
            ["Atlantis", "Taiwan", "United Arab Emirates", "Norway"],
            list(TreatmentLevel),
            list(IntakeQuality),
            [True, False],
        )
        for sector, country, treatment, intake, flag in grid:
            result = evaluate(
                _make_profile(
                    industry_sector=sector,
                    country=country,
                    current_treatment=treatment,
                    intake_water_quality=intake,
                    water_disruptions_past_5y=flag,
                    discharge_compliance_concerns=flag,
                    primary_contaminants=list(Contaminant)[:7] if flag else None,
                ),
                MODEL_V1_0,
            )
            rp = result.risk_profile
            for d in rp.dimensions():
                assert 0 <= d.score <= 100
            assert 0 <= rp.overall <= 100
            assert len(result.recommendations) <= 4

    def test_overall_matches_weighted_sum(self):
        for country in ("Taiwan", "India", "Germany", "Atlantis"):
            rp = evaluate(_make_profile(country=country, water_disruptions_past_5y=True), MODEL_V1_0).risk_profile
            expected = aggregate(*(d.score for d in rp.dimensions()), weights=DEFAULT_WEIGHTS)
            assert rp.overall == expected

    def test_region_over_country_over_default(self):
        region = evaluate(_make_profile(country="India", region="Tamil Nadu"), MODEL_V1_0).risk_profile
        country = evaluate(_make_profile(country="India", region="Kerala"), MODEL_V1_0).risk_profile
        default = evaluate(_make_profile(country="Atlantis", region="Tamil Nadu"), MODEL_V1_0).risk_profile

        assert (region.physical.score, region.physical_lookup_tier) == (75, LookupTier.REGION)
        assert (country.physical.score, country.physical_lookup_tier) == (65, LookupTier.COUNTRY)
        assert (default.physical.score, default.physical_lookup_tier) == (35, LookupTier.DEFAULT)


class TestScoringModel:

    def test_registry_lookup(self):
        assert get_scoring_model("1.0") is MODEL_V1_0

    def test_unknown_version(self):
        with pytest.raises(UnknownModelVersion):
            get_scoring_model("9.9")

    def test_substituted_weights(self):
        physical_only = replace(
            MODEL_V1_0,
            version="test-physical-only",
            weights=DimensionWeights(
                physical=Decimal("1"),
                regulatory=Decimal("0"),
                reputational=Decimal("0"),
                financial=Decimal("0"),
                water_quality=Decimal("0"),
            ),
        )
        rp = evaluate(_make_profile(country="Taiwan"), physical_only).risk_profile
        assert rp.overall == rp.physical.score == 60
        assert rp.model_version == "test-physical-only"
