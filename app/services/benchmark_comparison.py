"""
Industry benchmark comparison.

Puts the facility's annual water use next to the sector average for the
same number of facilities:
  - within ±10% of the average   → average
  - below                        → efficient
  - above                        → high
"""
from __future__ import annotations

from app.schemas.profile import NormalizedProfile, WaterUnit
from app.schemas.risk_response import BenchmarkComparison, BenchmarkStatus
from app.scoring.reference_data import ReferenceTables

M3_PER_UNIT = {
    WaterUnit.M3_PER_YEAR: 1.0,
    WaterUnit.ML_PER_YEAR: 1_000.0,
    WaterUnit.GALLONS_PER_YEAR: 0.003785411784,
}

AVERAGE_BAND_PCT = 10.0


def to_m3_per_year(volume: float, unit: WaterUnit) -> float:
    return volume * M3_PER_UNIT[unit]


def compare_to_benchmark(profile: NormalizedProfile, tables: ReferenceTables) -> BenchmarkComparison:
    benchmark = tables.benchmark_for(profile.industry_sector)

    user_m3 = to_m3_per_year(profile.annual_water_volume, profile.water_unit)
    average_m3 = benchmark.water_use_per_facility * profile.facilities_count
    pct = (user_m3 - average_m3) * 100 / average_m3

    sector = profile.industry_sector.value
    if abs(pct) <= AVERAGE_BAND_PCT:
        status = BenchmarkStatus.AVERAGE
        insight = f"Water use is in line with typical {sector} operations of this size."
    elif pct < 0:
        status = BenchmarkStatus.EFFICIENT
        insight = (
            f"Water use is {abs(pct):.0f}% below the {sector} average; "
            "existing efficiency measures are paying off."
        )
    else:
        status = BenchmarkStatus.HIGH
        insight = (
            f"Water use is {pct:.0f}% above the {sector} average; "
            "an efficiency audit is likely to find savings."
        )

    return BenchmarkComparison(
        user_consumption_m3=round(user_m3, 1),
        industry_average_m3=round(average_m3, 1),
        percentage_difference=round(pct, 1),
        status=status,
        insight=insight,
    )
