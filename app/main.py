"""
Water Risk Engine — FastAPI Application Entry Point

POST /v1/risk/evaluate   → stateless scoring
GET  /v1/risk/health     → health check
     /v1/assessments     → interactive assessment sessions
GET  /docs               → OpenAPI / Swagger UI
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from app.api.assessment_endpoint import router as assessment_router
from app.api.risk_endpoint import router as risk_router
from app.core.config import get_settings
from app.models.database import async_session_factory, engine
from app.scoring.model import get_scoring_model
from app.services.assessment_store import SqlAssessmentStore
from app.services.extraction import GatewayExtractor
from app.services.session import AssessmentController
from app.services.session_registry import SessionRegistry

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if get_settings().app_env == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(get_settings().log_level),
)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    model = get_scoring_model(settings.scoring_model_version)

    app.state.registry = SessionRegistry()
    app.state.controller = AssessmentController(
        extractor=GatewayExtractor.from_settings(settings),
        store=SqlAssessmentStore(async_session_factory),
        model=model,
        min_description_length=settings.min_description_length,
    )

    logger.info("water_risk_engine_starting", model_version=model.version, env=settings.app_env)
    yield
    logger.info("water_risk_engine_shutting_down", live_sessions=len(app.state.registry))
    await engine.dispose()


app = FastAPI(
    title="Water Risk Engine",
    description="Industrial water risk scoring and recommendation service",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in production
    allow_methods=["POST", "GET", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# ── Prometheus metrics ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── Routes ──
app.include_router(risk_router)
app.include_router(assessment_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": get_settings().app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "evaluate": "POST /v1/risk/evaluate",
        "assessments": "POST /v1/assessments",
    }
