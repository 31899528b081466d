"""
FastAPI dependencies. Collaborators live on `app.state`, set up in the
lifespan handler; tests swap them via `app.dependency_overrides`.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from app.core.config import get_settings
from app.scoring.model import ScoringModel, UnknownModelVersion, get_scoring_model
from app.services.session import AssessmentController, AssessmentSession
from app.services.session_registry import SessionNotFound, SessionRegistry


def get_model() -> ScoringModel:
    version = get_settings().scoring_model_version
    try:
        return get_scoring_model(version)
    except UnknownModelVersion as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_controller(request: Request) -> AssessmentController:
    return request.app.state.controller


def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> AssessmentSession:
    try:
        return registry.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail=f"Assessment session {session_id} not found")
