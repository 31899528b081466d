"""Alembic migration environment.

Takes the database URL from the service settings (DATABASE_URL env var or
.env) and swaps the asyncpg driver for psycopg2, since Alembic runs sync:
    postgresql+asyncpg://...  →  postgresql://...
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from app.core.config import get_settings
from app.models.risk_assessment import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

sync_url = (
    get_settings().database_url
    .replace("postgresql+asyncpg://", "postgresql://")
    .replace("postgresql+psycopg2://", "postgresql://")
)
config.set_main_option("sqlalchemy.url", sync_url)

target_metadata = Base.metadata


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=True,
        )
        with context.begin_transaction():
            context.run_migrations()


run_migrations_online()
