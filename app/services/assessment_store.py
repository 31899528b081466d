"""
Persistence of completed assessments.

A saved assessment is written as one row (profile, risk profile,
recommendations and benchmark together) in a single transaction. Database
errors surface as PersistenceError so the session layer can keep the
in-memory result and let the user retry.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.risk_assessment import WaterRiskAssessment
from app.schemas.risk_response import AssessmentResult

logger = structlog.get_logger()


class PersistenceError(Exception):
    pass


@dataclass(frozen=True)
class AssessmentRecord:
    session_id: str
    result: AssessmentResult
    input_mode: str
    raw_description: Optional[str] = None


class AssessmentStore(Protocol):
    async def save(self, record: AssessmentRecord) -> str:
        """Persist the record; returns the new assessment id."""
        ...


def to_row(assessment_id: str, record: AssessmentRecord) -> WaterRiskAssessment:
    result = record.result
    profile = result.profile
    risk = result.risk_profile
    return WaterRiskAssessment(
        assessment_id=assessment_id,
        session_id=record.session_id,
        company_name=profile.company_name,
        industry_sector=profile.industry_sector.value,
        country=profile.country,
        region=profile.region,
        model_version=risk.model_version,
        physical_score=risk.physical.score,
        regulatory_score=risk.regulatory.score,
        reputational_score=risk.reputational.score,
        financial_score=risk.financial.score,
        water_quality_score=risk.water_quality.score,
        overall_score=risk.overall,
        physical_lookup_tier=risk.physical_lookup_tier.value,
        profile_json=profile.model_dump(mode="json"),
        risk_profile_json=risk.model_dump(mode="json"),
        recommendations_json=[r.model_dump(mode="json") for r in result.recommendations],
        benchmark_json=result.benchmark.model_dump(mode="json"),
        input_mode=record.input_mode,
        raw_description=record.raw_description,
        evaluated_at=result.evaluated_at,
    )


class SqlAssessmentStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save(self, record: AssessmentRecord) -> str:
        assessment_id = str(uuid.uuid4())
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    db.add(to_row(assessment_id, record))
        except SQLAlchemyError as e:
            logger.error("assessment_persist_failed", session_id=record.session_id, error=str(e))
            raise PersistenceError(f"Could not save assessment: {e.__class__.__name__}") from e

        logger.info("assessment_persisted", session_id=record.session_id, assessment_id=assessment_id)
        return assessment_id
