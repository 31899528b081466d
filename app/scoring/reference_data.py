"""
Reference Data Tables — v1.0

Static lookups consumed by the normalizer, the dimension scorers and the
recommendation generator:

  1. Industry benchmark profiles (typical water use, sources, treatment)
  2. Country / region water-stress baselines for physical risk
  3. Sector sensitivity classes (regulation, visibility, water intensity)
  4. Water-quality lookups (intake rating, severe contaminants, monitoring gap)
  5. Recommendation rule catalog + example project catalog

Everything here is read-only after import. Scoring models reference these
tables through ReferenceTables; nothing mutates them at runtime.

Convention: HIGHER score = HIGHER risk (0-100).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from app.schemas.profile import (
    Contaminant,
    DischargeMethod,
    IndustrySector,
    IntakeQuality,
    MonitoringFrequency,
    TreatmentLevel,
    UpstreamPollutionSource,
    WaterSource,
)
from app.schemas.risk_response import Priority, RiskDimension


# ═══════════════════════════════════════════════════════════════
# 1. INDUSTRY BENCHMARKS
#    Per-facility annual water use in m³/year. Fields without an
#    industry-specific value take the quick-scan defaults below.
# ═══════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class IndustryBenchmark:
    water_use_per_facility: float
    water_use_per_day: str
    water_sources: tuple[WaterSource, ...]
    current_treatment: TreatmentLevel
    intake_water_quality: IntakeQuality
    description: str
    primary_contaminants: tuple[Contaminant, ...] = ()
    discharge_method: DischargeMethod = DischargeMethod.MUNICIPAL_SEWER
    discharge_compliance_concerns: bool = False
    upstream_pollution_sources: tuple[UpstreamPollutionSource, ...] = ()
    water_quality_testing_frequency: MonitoringFrequency = MonitoringFrequency.NEVER
    water_disruptions_past_5y: bool = False
    facilities_count: int = 1


INDUSTRY_BENCHMARKS: Mapping[IndustrySector, IndustryBenchmark] = MappingProxyType({
    IndustrySector.SEMICONDUCTORS: IndustryBenchmark(
        water_use_per_facility=5_500_000,
        water_use_per_day="4-10 million gallons per fab",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.ADVANCED,
        intake_water_quality=IntakeQuality.GOOD,
        description="Semiconductor fabs require ultrapure water for wafer cleaning",
    ),
    IndustrySector.DATA_CENTERS: IndustryBenchmark(
        water_use_per_facility=1_500_000,
        water_use_per_day="1-5 million gallons per facility",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.GOOD,
        description="Data centers use water for cooling systems",
    ),
    IndustrySector.FOOD_BEVERAGE: IndustryBenchmark(
        water_use_per_facility=800_000,
        water_use_per_day="500K-2M gallons per facility",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.ADVANCED,
        intake_water_quality=IntakeQuality.GOOD,
        description="Food & beverage requires water as ingredient and for cleaning",
    ),
    IndustrySector.PHARMACEUTICALS: IndustryBenchmark(
        water_use_per_facility=500_000,
        water_use_per_day="200K-1M gallons per facility",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.ADVANCED,
        intake_water_quality=IntakeQuality.EXCELLENT,
        description="Pharma requires highly purified water for production",
    ),
    IndustrySector.CHEMICALS: IndustryBenchmark(
        water_use_per_facility=2_000_000,
        water_use_per_day="1-5M gallons per facility",
        water_sources=(WaterSource.MUNICIPAL, WaterSource.SURFACE_WATER),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.FAIR,
        description="Chemical manufacturing uses water for processing and cooling",
    ),
    IndustrySector.MINING: IndustryBenchmark(
        water_use_per_facility=4_000_000,
        water_use_per_day="2-10M gallons per site",
        water_sources=(WaterSource.SURFACE_WATER, WaterSource.GROUNDWATER),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.POOR,
        description="Mining operations require water for processing and dust control",
    ),
    IndustrySector.TEXTILES: IndustryBenchmark(
        water_use_per_facility=1_000_000,
        water_use_per_day="500K-2M gallons per facility",
        water_sources=(WaterSource.MUNICIPAL, WaterSource.GROUNDWATER),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.FAIR,
        description="Textile dyeing and finishing are water-intensive",
    ),
    IndustrySector.MANUFACTURING: IndustryBenchmark(
        water_use_per_facility=500_000,
        water_use_per_day="200K-1M gallons per facility",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.FAIR,
        description="General manufacturing uses water for cooling and processing",
    ),
    IndustrySector.AGRICULTURE: IndustryBenchmark(
        water_use_per_facility=2_000_000,
        water_use_per_day="1-5M gallons per operation",
        water_sources=(WaterSource.SURFACE_WATER, WaterSource.GROUNDWATER),
        current_treatment=TreatmentLevel.NONE,
        intake_water_quality=IntakeQuality.FAIR,
        description="Agriculture uses water for irrigation and livestock",
    ),
    IndustrySector.ENERGY: IndustryBenchmark(
        water_use_per_facility=3_000_000,
        water_use_per_day="1-10M gallons per plant",
        water_sources=(WaterSource.SURFACE_WATER, WaterSource.MUNICIPAL),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.FAIR,
        description="Power plants use water for cooling and steam generation",
    ),
    IndustrySector.OTHER: IndustryBenchmark(
        water_use_per_facility=500_000,
        water_use_per_day="Varies",
        water_sources=(WaterSource.MUNICIPAL,),
        current_treatment=TreatmentLevel.BASIC,
        intake_water_quality=IntakeQuality.FAIR,
        description="Water usage varies by operation type",
    ),
})


# ═══════════════════════════════════════════════════════════════
# 2. WATER STRESS — physical-risk base scores
#    Keys are case-folded. Region entries are keyed by (country, region)
#    and take precedence over the country baseline.
# ═══════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class WaterStress:
    score: int
    note: Optional[str] = None


DEFAULT_WATER_STRESS = 35

COUNTRY_ALIASES: Mapping[str, str] = MappingProxyType({
    "usa": "united states",
    "us": "united states",
    "u.s.": "united states",
    "united states of america": "united states",
    "uae": "united arab emirates",
    "uk": "united kingdom",
    "great britain": "united kingdom",
    "republic of china": "taiwan",
    "the netherlands": "netherlands",
    "holland": "netherlands",
    "ksa": "saudi arabia",
})

COUNTRY_WATER_STRESS: Mapping[str, WaterStress] = MappingProxyType({
    "united arab emirates": WaterStress(80, "Extremely high baseline water stress, heavy reliance on desalination"),
    "saudi arabia": WaterStress(80, "Fossil groundwater depletion and desalination dependence"),
    "israel": WaterStress(70, "Chronic scarcity offset by large-scale reuse and desalination"),
    "egypt": WaterStress(70, "Near-total dependence on Nile allocations"),
    "india": WaterStress(65, "Many Indian regions face severe groundwater depletion"),
    "taiwan": WaterStress(60, "Taiwan experienced severe droughts in 2021-2023 affecting semiconductor production"),
    "chile": WaterStress(60, "Mining regions face water scarcity and regulatory changes for groundwater"),
    "australia": WaterStress(60, "Drought cycles common, high water prices in many regions"),
    "south africa": WaterStress(60, "Recurring municipal supply crises in major metros"),
    "mexico": WaterStress(55, "Northern industrial corridors face persistent shortages"),
    "spain": WaterStress(55, "Southern basins under long-term drought restrictions"),
    "china": WaterStress(50, "Northern provinces face structural scarcity"),
    "singapore": WaterStress(45, "Singapore has high water prices but excellent infrastructure"),
    "united states": WaterStress(40),
    "italy": WaterStress(40),
    "japan": WaterStress(30),
    "united kingdom": WaterStress(25),
    "germany": WaterStress(25),
    "france": WaterStress(30),
    "netherlands": WaterStress(20, "EU Water Framework Directive applies"),
    "ireland": WaterStress(20, "Data center moratoriums and community opposition to water use"),
    "canada": WaterStress(15),
    "norway": WaterStress(10),
})

REGION_WATER_STRESS: Mapping[tuple[str, str], WaterStress] = MappingProxyType({
    ("united states", "arizona"): WaterStress(
        75, "Arizona faces Colorado River allocation cuts and groundwater restrictions"),
    ("united states", "california"): WaterStress(
        70, "California has some of the strictest water regulations in the US"),
    ("united states", "nevada"): WaterStress(75, "Lake Mead shortage declarations"),
    ("united states", "texas"): WaterStress(
        60, "Increasing drought conditions and groundwater depletion in some regions"),
    ("united states", "new mexico"): WaterStress(70),
    ("united states", "oregon"): WaterStress(30),
    ("united states", "new york"): WaterStress(20),
    ("taiwan", "hsinchu"): WaterStress(65, "Hsinchu Science Park reservoirs ran low in the 2021 drought"),
    ("taiwan", "taichung"): WaterStress(65),
    ("chile", "antofagasta"): WaterStress(85, "Atacama mining region, desalination required for new projects"),
    ("india", "tamil nadu"): WaterStress(75, "Chennai's 2019 day-zero crisis"),
    ("india", "maharashtra"): WaterStress(70),
    ("australia", "western australia"): WaterStress(65),
    ("spain", "andalusia"): WaterStress(70),
    ("mexico", "nuevo leon"): WaterStress(75, "Monterrey's 2022 supply crisis"),
    ("china", "hebei"): WaterStress(70),
})


# ═══════════════════════════════════════════════════════════════
# 3. SECTOR CLASSES
# ═══════════════════════════════════════════════════════════════
HIGH_REGULATION_SECTORS = frozenset({
    IndustrySector.SEMICONDUCTORS,
    IndustrySector.PHARMACEUTICALS,
    IndustrySector.MINING,
    IndustrySector.FOOD_BEVERAGE,
})

HIGH_VISIBILITY_SECTORS = frozenset({
    IndustrySector.FOOD_BEVERAGE,
    IndustrySector.TEXTILES,
    IndustrySector.MINING,
    IndustrySector.AGRICULTURE,
})

WATER_INTENSIVE_SECTORS = frozenset({
    IndustrySector.SEMICONDUCTORS,
    IndustrySector.DATA_CENTERS,
    IndustrySector.PHARMACEUTICALS,
    IndustrySector.FOOD_BEVERAGE,
})


# ═══════════════════════════════════════════════════════════════
# 4. WATER QUALITY / GOVERNANCE LOOKUPS
# ═══════════════════════════════════════════════════════════════
INTAKE_QUALITY_BASE: Mapping[IntakeQuality, int] = MappingProxyType({
    IntakeQuality.EXCELLENT: 5,
    IntakeQuality.GOOD: 15,
    IntakeQuality.FAIR: 30,
    IntakeQuality.POOR: 50,
    IntakeQuality.UNKNOWN: 35,
})

SEVERE_CONTAMINANTS = frozenset({
    Contaminant.HEAVY_METALS,
    Contaminant.PFAS,
    Contaminant.ORGANIC_COMPOUNDS,
})

# Checklist markers that are not contaminants themselves
CONTAMINANT_MARKERS = frozenset({Contaminant.NONE_KNOWN, Contaminant.NOT_TESTED})

MONITORING_GAP_PENALTY: Mapping[MonitoringFrequency, int] = MappingProxyType({
    MonitoringFrequency.CONTINUOUS: 0,
    MonitoringFrequency.DAILY: 2,
    MonitoringFrequency.WEEKLY: 5,
    MonitoringFrequency.MONTHLY: 10,
    MonitoringFrequency.ANNUALLY_OR_LESS: 13,
    MonitoringFrequency.NEVER: 15,
})


# ═══════════════════════════════════════════════════════════════
# 5. RECOMMENDATION CATALOG
#    Triggers are evaluated in declaration order; that order is the
#    tiebreak when two recommendations share a priority.
# ═══════════════════════════════════════════════════════════════
class Trigger(str, Enum):
    PHYSICAL = "physical"
    FINANCIAL = "financial"
    REGULATORY = "regulatory"
    REPUTATIONAL = "reputational"
    WATER_QUALITY = "water_quality"
    GOVERNANCE = "governance"


# Water-quality and governance rules both read the combined dimension score.
TRIGGER_DIMENSION: Mapping[Trigger, RiskDimension] = MappingProxyType({
    Trigger.PHYSICAL: RiskDimension.PHYSICAL,
    Trigger.FINANCIAL: RiskDimension.FINANCIAL,
    Trigger.REGULATORY: RiskDimension.REGULATORY,
    Trigger.REPUTATIONAL: RiskDimension.REPUTATIONAL,
    Trigger.WATER_QUALITY: RiskDimension.WATER_QUALITY,
    Trigger.GOVERNANCE: RiskDimension.WATER_QUALITY,
})


@dataclass(frozen=True)
class CatalogEntry:
    title: str
    priority: Priority
    description: str
    expected_impact: str
    technology_types: tuple[str, ...] = ()


RECOMMENDATION_CATALOG: Mapping[Trigger, tuple[CatalogEntry, ...]] = MappingProxyType({
    Trigger.PHYSICAL: (
        CatalogEntry(
            title="Implement Water Recycling (85%+ Recovery)",
            priority=Priority.HIGH,
            description="Reduce freshwater dependency by recycling process water. Critical for drought resilience.",
            expected_impact="Reduce freshwater demand by 60-80% with a typical payback of 2-4 years.",
            technology_types=("reuse", "circular_systems"),
        ),
        CatalogEntry(
            title="Develop On-Site Water Storage",
            priority=Priority.MEDIUM,
            description="Build emergency storage capacity to buffer against supply disruptions.",
            expected_impact="7-14 days of operational buffer during rationing periods.",
        ),
    ),
    Trigger.FINANCIAL: (
        CatalogEntry(
            title="Water Efficiency Audit & Quick Wins",
            priority=Priority.HIGH,
            description="Identify and fix water waste to reduce costs immediately.",
            expected_impact="10-30% reduction in water costs, often with under one year payback.",
            technology_types=("reuse", "treatment", "smart_metering"),
        ),
    ),
    Trigger.REGULATORY: (
        CatalogEntry(
            title="Upgrade Wastewater Treatment",
            priority=Priority.HIGH,
            description="Meet current and anticipated discharge standards with advanced treatment.",
            expected_impact="Full regulatory compliance and readiness for stricter future standards.",
            technology_types=("treatment", "circular_systems"),
        ),
    ),
    Trigger.REPUTATIONAL: (
        CatalogEntry(
            title="Proactive Water Stewardship Program",
            priority=Priority.MEDIUM,
            description="Engage with community, set public targets, report transparently on water use.",
            expected_impact="Improved community relations, reduced opposition risk and better ESG ratings.",
            technology_types=("nature_based",),
        ),
    ),
    Trigger.WATER_QUALITY: (
        CatalogEntry(
            title="Advanced Intake Treatment System",
            priority=Priority.HIGH,
            description="Implement RO/UF for intake water to address quality concerns and ensure operational reliability.",
            expected_impact="Stable process water quality and fewer contamination-driven stoppages.",
            technology_types=("treatment",),
        ),
        CatalogEntry(
            title="Continuous Quality Monitoring",
            priority=Priority.LOW,
            description="Implement real-time water quality monitoring to detect contamination early.",
            expected_impact="Early detection of intake contamination before it reaches production.",
            technology_types=("smart_metering",),
        ),
    ),
    Trigger.GOVERNANCE: (
        CatalogEntry(
            title="Secure Long-Term Water Rights",
            priority=Priority.HIGH,
            description="Review and strengthen water allocation agreements. Consider alternative sources.",
            expected_impact="Supply security for 10+ years and protection from allocation cuts.",
        ),
    ),
})

# Default set when no trigger fires
BASELINE_RECOMMENDATION = RECOMMENDATION_CATALOG[Trigger.FINANCIAL][0]
RESILIENCE_RECOMMENDATION = RECOMMENDATION_CATALOG[Trigger.PHYSICAL][0]


@dataclass(frozen=True)
class ExampleProjectRecord:
    name: str
    technology_type: str
    sector: IndustrySector
    country: str
    water_saved_m3_year: Optional[float] = None
    roi_percent: Optional[float] = None


EXAMPLE_PROJECTS: tuple[ExampleProjectRecord, ...] = (
    ExampleProjectRecord("Hsinchu Fab Reclaimed Water Plant", "reuse", IndustrySector.SEMICONDUCTORS, "Taiwan", 3_650_000),
    ExampleProjectRecord("Arizona Fab Closed-Loop Cooling", "circular_systems", IndustrySector.SEMICONDUCTORS, "United States", 1_200_000),
    ExampleProjectRecord("Brewery CIP Water Recovery", "reuse", IndustrySector.FOOD_BEVERAGE, "Mexico", 250_000),
    ExampleProjectRecord("Dairy MBR Effluent Upgrade", "treatment", IndustrySector.FOOD_BEVERAGE, "Ireland", None, 18.0),
    ExampleProjectRecord("API Plant Wastewater Polishing", "treatment", IndustrySector.PHARMACEUTICALS, "India", 120_000),
    ExampleProjectRecord("Copper Concentrator Tailings Water Recovery", "circular_systems", IndustrySector.MINING, "Chile", 5_000_000),
    ExampleProjectRecord("Data Center Smart Cooling Metering", "smart_metering", IndustrySector.DATA_CENTERS, "Netherlands", 90_000),
    ExampleProjectRecord("Textile Dyehouse Wetland Buffer", "nature_based", IndustrySector.TEXTILES, "India", 60_000),
    ExampleProjectRecord("Watershed Restoration Partnership", "nature_based", IndustrySector.AGRICULTURE, "United States", 400_000),
    ExampleProjectRecord("Plant-Wide Sub-Metering Rollout", "smart_metering", IndustrySector.MANUFACTURING, "Germany", 45_000, 35.0),
)


# ═══════════════════════════════════════════════════════════════
# Bundle handed to the scoring model
# ═══════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class ReferenceTables:
    benchmarks: Mapping[IndustrySector, IndustryBenchmark]
    default_water_stress: int
    country_aliases: Mapping[str, str]
    country_water_stress: Mapping[str, WaterStress]
    region_water_stress: Mapping[tuple[str, str], WaterStress]
    high_regulation_sectors: frozenset
    high_visibility_sectors: frozenset
    water_intensive_sectors: frozenset
    intake_quality_base: Mapping[IntakeQuality, int]
    severe_contaminants: frozenset
    contaminant_markers: frozenset
    monitoring_gap_penalty: Mapping[MonitoringFrequency, int]
    recommendation_catalog: Mapping[Trigger, tuple[CatalogEntry, ...]]
    baseline_recommendation: CatalogEntry
    resilience_recommendation: CatalogEntry
    example_projects: tuple[ExampleProjectRecord, ...]

    def benchmark_for(self, sector) -> IndustryBenchmark:
        """Benchmark for a sector; anything unrecognized gets the 'Other' profile."""
        return self.benchmarks.get(sector) or self.benchmarks[IndustrySector.OTHER]

    def canonical_country(self, country: str) -> str:
        key = " ".join(country.split()).casefold()
        return self.country_aliases.get(key, key)


DEFAULT_TABLES = ReferenceTables(
    benchmarks=INDUSTRY_BENCHMARKS,
    default_water_stress=DEFAULT_WATER_STRESS,
    country_aliases=COUNTRY_ALIASES,
    country_water_stress=COUNTRY_WATER_STRESS,
    region_water_stress=REGION_WATER_STRESS,
    high_regulation_sectors=HIGH_REGULATION_SECTORS,
    high_visibility_sectors=HIGH_VISIBILITY_SECTORS,
    water_intensive_sectors=WATER_INTENSIVE_SECTORS,
    intake_quality_base=INTAKE_QUALITY_BASE,
    severe_contaminants=SEVERE_CONTAMINANTS,
    contaminant_markers=CONTAMINANT_MARKERS,
    monitoring_gap_penalty=MONITORING_GAP_PENALTY,
    recommendation_catalog=RECOMMENDATION_CATALOG,
    baseline_recommendation=BASELINE_RECOMMENDATION,
    resilience_recommendation=RESILIENCE_RECOMMENDATION,
    example_projects=EXAMPLE_PROJECTS,
)
