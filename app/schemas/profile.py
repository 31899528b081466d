"""
Operational profile of a facility.

Arrives either as an explicit structured form or as the best-effort output
of the free-text extractor. The normalizer turns it into a NormalizedProfile
with every field populated and a provenance tag per field.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Closed vocabularies (labels match the assessment form) ──

class IndustrySector(str, Enum):
    MANUFACTURING = "Manufacturing"
    FOOD_BEVERAGE = "Food & Beverage"
    PHARMACEUTICALS = "Pharmaceuticals"
    SEMICONDUCTORS = "Semiconductors"
    MINING = "Mining"
    AGRICULTURE = "Agriculture"
    ENERGY = "Energy"
    DATA_CENTERS = "Data Centers"
    TEXTILES = "Textiles"
    CHEMICALS = "Chemicals"
    OTHER = "Other"


class WaterSource(str, Enum):
    MUNICIPAL = "Municipal supply"
    GROUNDWATER = "Groundwater"
    SURFACE_WATER = "Surface water"
    RECYCLED = "Recycled/reclaimed"
    DESALINATED = "Desalinated"
    RAINWATER = "Rainwater"


class TreatmentLevel(str, Enum):
    NONE = "None"
    BASIC = "Basic"
    ADVANCED = "Advanced"
    ZERO_LIQUID_DISCHARGE = "Zero Liquid Discharge"


class IntakeQuality(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    UNKNOWN = "Unknown"


class Contaminant(str, Enum):
    HIGH_TDS = "High TDS/Salinity"
    HEAVY_METALS = "Heavy metals (arsenic, lead, chromium)"
    ORGANIC_COMPOUNDS = "Organic compounds (pesticides, solvents)"
    MICROBIAL = "Microbial contamination"
    PFAS = "PFAS/Forever chemicals"
    NUTRIENTS = "Nitrates/phosphates"
    SEDIMENT = "High sediment/turbidity"
    NONE_KNOWN = "None known"       # marker, not a contaminant
    NOT_TESTED = "Not tested"       # marker, not a contaminant


class DischargeMethod(str, Enum):
    SURFACE_WATER = "Direct to surface water (river, ocean)"
    MUNICIPAL_SEWER = "Municipal sewer system"
    ZERO_LIQUID_DISCHARGE = "Zero liquid discharge (no external discharge)"
    EVAPORATION_PONDS = "Evaporation ponds"
    RECYCLED_INTERNALLY = "Recycled internally"
    OTHER = "Other"


class UpstreamPollutionSource(str, Enum):
    AGRICULTURAL_RUNOFF = "Agricultural runoff (fertilizers, pesticides)"
    INDUSTRIAL = "Other industrial facilities"
    URBAN_STORMWATER = "Urban stormwater"
    MINING = "Mining operations"
    WASTEWATER_PLANTS = "Wastewater treatment plants"
    NONE_KNOWN = "None known"


class MonitoringFrequency(str, Enum):
    CONTINUOUS = "Continuous online monitoring"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    ANNUALLY_OR_LESS = "Annually or less"
    NEVER = "Never / Don't know"


class WaterUnit(str, Enum):
    M3_PER_YEAR = "m3/year"
    ML_PER_YEAR = "ML/year"
    GALLONS_PER_YEAR = "gallons/year"


class Provenance(str, Enum):
    STATED = "stated"
    INFERRED = "inferred"


# Fields a user may correct during review; company name is display-only.
PROFILE_FIELDS: tuple[str, ...] = (
    "industry_sector",
    "country",
    "region",
    "facilities_count",
    "water_sources",
    "annual_water_volume",
    "water_unit",
    "current_treatment",
    "intake_water_quality",
    "primary_contaminants",
    "discharge_method",
    "discharge_compliance_concerns",
    "upstream_pollution_sources",
    "water_quality_testing_frequency",
    "water_disruptions_past_5y",
)


def _dedupe(values):
    if values is None:
        return None
    seen = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


class PartialOperationalProfile(BaseModel):
    """Best-effort profile returned by the extractor. Every field is optional."""
    model_config = ConfigDict(extra="ignore")

    company_name: Optional[str] = None
    industry_sector: Optional[IndustrySector] = None
    country: Optional[str] = None
    region: Optional[str] = None
    facilities_count: Optional[int] = Field(None, gt=0)
    water_sources: Optional[list[WaterSource]] = None
    annual_water_volume: Optional[float] = Field(None, gt=0)
    water_unit: Optional[WaterUnit] = None
    current_treatment: Optional[TreatmentLevel] = None
    intake_water_quality: Optional[IntakeQuality] = None
    primary_contaminants: Optional[list[Contaminant]] = None
    discharge_method: Optional[DischargeMethod] = None
    discharge_compliance_concerns: Optional[bool] = None
    upstream_pollution_sources: Optional[list[UpstreamPollutionSource]] = None
    water_quality_testing_frequency: Optional[MonitoringFrequency] = None
    water_disruptions_past_5y: Optional[bool] = None

    @field_validator("industry_sector", mode="before")
    @classmethod
    def unknown_sector_is_other(cls, v):
        if v is None or isinstance(v, IndustrySector):
            return v
        for sector in IndustrySector:
            if str(v).strip().casefold() == sector.value.casefold():
                return sector
        return IndustrySector.OTHER


class OperationalProfile(BaseModel):
    """
    Structured facility profile.

    Industry sector and country are required; everything else may be left
    unset and is filled from the industry benchmark by the normalizer.
    """
    company_name: Optional[str] = Field(None, max_length=200)
    industry_sector: IndustrySector
    country: str = Field(min_length=1, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    facilities_count: Optional[int] = Field(None, gt=0)
    water_sources: Optional[list[WaterSource]] = None
    annual_water_volume: Optional[float] = Field(None, gt=0)
    water_unit: WaterUnit = WaterUnit.M3_PER_YEAR
    current_treatment: Optional[TreatmentLevel] = None
    intake_water_quality: Optional[IntakeQuality] = None
    primary_contaminants: Optional[list[Contaminant]] = None
    discharge_method: Optional[DischargeMethod] = None
    discharge_compliance_concerns: Optional[bool] = None
    upstream_pollution_sources: Optional[list[UpstreamPollutionSource]] = None
    water_quality_testing_frequency: Optional[MonitoringFrequency] = None
    water_disruptions_past_5y: Optional[bool] = None

    provenance: dict[str, Provenance] = Field(
        default_factory=dict,
        description="Per-field confidence from the extractor. Absent entries count as stated.",
    )

    @field_validator("country")
    @classmethod
    def strip_country(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("country must not be blank")
        return v

    @field_validator("region")
    @classmethod
    def blank_region_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("water_sources", "primary_contaminants", "upstream_pollution_sources")
    @classmethod
    def dedupe_sets(cls, v):
        return _dedupe(v)

    @field_validator("water_sources")
    @classmethod
    def sources_not_empty(cls, v):
        # An empty source mix carries no information; let the benchmark fill it.
        return v or None


class NormalizedProfile(BaseModel):
    """Fully populated, immutable profile. The only input the scorers accept."""
    model_config = ConfigDict(frozen=True)

    company_name: Optional[str] = None
    industry_sector: IndustrySector
    country: str
    region: Optional[str] = None
    facilities_count: int
    water_sources: tuple[WaterSource, ...]
    annual_water_volume: float
    water_unit: WaterUnit
    current_treatment: TreatmentLevel
    intake_water_quality: IntakeQuality
    primary_contaminants: tuple[Contaminant, ...]
    discharge_method: DischargeMethod
    discharge_compliance_concerns: bool
    upstream_pollution_sources: tuple[UpstreamPollutionSource, ...]
    water_quality_testing_frequency: MonitoringFrequency
    water_disruptions_past_5y: bool
    provenance: dict[str, Provenance]

    def inferred_fields(self) -> list[str]:
        return [f for f in PROFILE_FIELDS if self.provenance.get(f) == Provenance.INFERRED]
