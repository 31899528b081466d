"""
Assessment Session API — the interactive describe → review → save flow.

Endpoints:
  POST   /v1/assessments                 → create a session (optionally submit right away)
  GET    /v1/assessments/{id}            → current state, profile and result
  POST   /v1/assessments/{id}/submit     → submit free text or a structured profile
  PATCH  /v1/assessments/{id}/fields     → correct one profile field, full recompute
  POST   /v1/assessments/{id}/save       → persist the reviewed assessment
  POST   /v1/assessments/{id}/reset      → back to input, result discarded
  DELETE /v1/assessments/{id}            → abandon the session

Extraction and form-validation problems are part of the flow: the session
returns to `input` with `error_message` set and the call still succeeds.
"""
from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, ValidationError

from app.api.dependencies import get_controller, get_registry, get_session
from app.schemas.profile import OperationalProfile
from app.schemas.risk_response import AssessmentResult
from app.services.assessment_store import PersistenceError
from app.services.session import (
    AssessmentController,
    AssessmentSession,
    InputMode,
    InvalidFieldError,
    SessionState,
    SessionStateError,
)
from app.services.session_registry import SessionRegistry

logger = structlog.get_logger()
router = APIRouter(prefix="/v1/assessments", tags=["assessments"])


# ── Pydantic Schemas ──

class SubmitRequest(BaseModel):
    description: Optional[str] = Field(None, description="Free-text description of the operations")
    profile: Optional[dict[str, Any]] = Field(None, description="Structured operational profile")


class FieldEdit(BaseModel):
    field: str
    value: Any = None


class SessionView(BaseModel):
    session_id: str
    state: SessionState
    input_mode: Optional[InputMode] = None
    error_message: Optional[str] = None
    generation: int
    assessment_id: Optional[str] = None
    profile: Optional[OperationalProfile] = None
    result: Optional[AssessmentResult] = None

    @classmethod
    def of(cls, session: AssessmentSession) -> "SessionView":
        return cls(
            session_id=session.session_id,
            state=session.state,
            input_mode=session.input_mode,
            error_message=session.error_message,
            generation=session.generation,
            assessment_id=session.assessment_id,
            profile=session.profile,
            result=session.result,
        )


async def _submit(controller: AssessmentController, session: AssessmentSession, body: SubmitRequest):
    try:
        await controller.submit(session, description=body.description, profile=body.profile)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Scoring engine error: {e}")


# ── Routes ──

@router.post("", response_model=SessionView, status_code=201)
async def create_assessment(
    body: Optional[SubmitRequest] = None,
    registry: SessionRegistry = Depends(get_registry),
    controller: AssessmentController = Depends(get_controller),
) -> SessionView:
    session = registry.create()
    if body is not None and (body.description is not None or body.profile is not None):
        await _submit(controller, session, body)
    return SessionView.of(session)


@router.get("/{session_id}", response_model=SessionView)
async def get_assessment(session: AssessmentSession = Depends(get_session)) -> SessionView:
    return SessionView.of(session)


@router.post("/{session_id}/submit", response_model=SessionView)
async def submit_assessment(
    body: SubmitRequest,
    session: AssessmentSession = Depends(get_session),
    controller: AssessmentController = Depends(get_controller),
) -> SessionView:
    await _submit(controller, session, body)
    return SessionView.of(session)


@router.patch("/{session_id}/fields", response_model=SessionView)
async def edit_field(
    edit: FieldEdit,
    session: AssessmentSession = Depends(get_session),
    controller: AssessmentController = Depends(get_controller),
) -> SessionView:
    try:
        controller.edit_field(session, edit.field, edit.value)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidFieldError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Scoring engine error: {e}")
    return SessionView.of(session)


@router.post("/{session_id}/save", response_model=SessionView)
async def save_assessment(
    session: AssessmentSession = Depends(get_session),
    controller: AssessmentController = Depends(get_controller),
) -> SessionView:
    try:
        await controller.save(session)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=session.error_message or str(e))
    return SessionView.of(session)


@router.post("/{session_id}/reset", response_model=SessionView)
async def reset_assessment(
    session: AssessmentSession = Depends(get_session),
    controller: AssessmentController = Depends(get_controller),
) -> SessionView:
    controller.reset(session)
    return SessionView.of(session)


@router.delete("/{session_id}", status_code=204)
async def abandon_assessment(
    session: AssessmentSession = Depends(get_session),
    registry: SessionRegistry = Depends(get_registry),
    controller: AssessmentController = Depends(get_controller),
) -> Response:
    # Bumps the generation so an in-flight extraction for this session is dropped
    controller.reset(session)
    registry.discard(session.session_id)
    return Response(status_code=204)
