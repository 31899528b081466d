"""
Persisted water risk assessments — one row per saved session.
Schema: water_risk_engine.water_risk_assessment
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, JSON, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class WaterRiskAssessment(Base):
    __tablename__ = "water_risk_assessment"
    __table_args__ = {"schema": "water_risk_engine"}

    assessment_id = Column(String(36), primary_key=True)
    session_id = Column(String(36), nullable=False, unique=True, index=True)

    # ── Facility ──
    company_name = Column(String(200), nullable=True)
    industry_sector = Column(String(50), nullable=False, index=True)
    country = Column(String(100), nullable=False, index=True)
    region = Column(String(100), nullable=True)

    # ── Scoring outputs ──
    model_version = Column(String(10), nullable=False)
    physical_score = Column(Integer, nullable=False)
    regulatory_score = Column(Integer, nullable=False)
    reputational_score = Column(Integer, nullable=False)
    financial_score = Column(Integer, nullable=False)
    water_quality_score = Column(Integer, nullable=False)
    overall_score = Column(Integer, nullable=False)
    physical_lookup_tier = Column(String(20), nullable=False)

    # ── Full payloads for replay ──
    profile_json = Column(JSON, nullable=False)
    risk_profile_json = Column(JSON, nullable=False)
    recommendations_json = Column(JSON, nullable=False)
    benchmark_json = Column(JSON, nullable=False)

    # ── Input ──
    input_mode = Column(String(20), nullable=False)
    raw_description = Column(Text, nullable=True)

    # ── Metadata ──
    evaluated_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    def __repr__(self):
        return f"<WaterRiskAssessment {self.assessment_id} overall={self.overall_score}>"
