"""
001 — Initial schema: water_risk_assessment table

Revision ID: 001
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSON

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS water_risk_engine")

    op.create_table(
        "water_risk_assessment",
        sa.Column("assessment_id", sa.String(36), primary_key=True),
        sa.Column("session_id", sa.String(36), nullable=False, unique=True),

        sa.Column("company_name", sa.String(200), nullable=True),
        sa.Column("industry_sector", sa.String(50), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100), nullable=True),

        sa.Column("model_version", sa.String(10), nullable=False),
        sa.Column("physical_score", sa.Integer, nullable=False),
        sa.Column("regulatory_score", sa.Integer, nullable=False),
        sa.Column("reputational_score", sa.Integer, nullable=False),
        sa.Column("financial_score", sa.Integer, nullable=False),
        sa.Column("water_quality_score", sa.Integer, nullable=False),
        sa.Column("overall_score", sa.Integer, nullable=False),
        sa.Column("physical_lookup_tier", sa.String(20), nullable=False),

        sa.Column("profile_json", JSON, nullable=False),
        sa.Column("risk_profile_json", JSON, nullable=False),
        sa.Column("recommendations_json", JSON, nullable=False),
        sa.Column("benchmark_json", JSON, nullable=False),

        sa.Column("input_mode", sa.String(20), nullable=False),
        sa.Column("raw_description", sa.Text, nullable=True),

        sa.Column("evaluated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),

        schema="water_risk_engine",
    )

    op.create_index("ix_water_risk_assessment_session_id", "water_risk_assessment", ["session_id"], schema="water_risk_engine")
    op.create_index("ix_water_risk_assessment_industry_sector", "water_risk_assessment", ["industry_sector"], schema="water_risk_engine")
    op.create_index("ix_water_risk_assessment_country", "water_risk_assessment", ["country"], schema="water_risk_engine")
    op.create_index("ix_water_risk_assessment_evaluated_at", "water_risk_assessment", ["evaluated_at"], schema="water_risk_engine")


def downgrade() -> None:
    op.drop_table("water_risk_assessment", schema="water_risk_engine")
