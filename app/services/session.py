"""
Assessment session — the interactive flow around the scoring engine.

    input ──submit──▶ processing ──ok──▶ review ──save──▶ complete
      ▲                   │               │  ▲
      └──── error ────────┘               └──┘ edit_field
      ◀──────────────── reset (from any state) ─────────────────

Every submit/edit/reset takes a new generation number. A completion that
finishes under an older generation is dropped, so a slow extraction or
recompute never overwrites a newer state.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError

from app.schemas.profile import PROFILE_FIELDS, OperationalProfile, Provenance
from app.schemas.risk_response import AssessmentResult
from app.scoring.engine import evaluate
from app.scoring.model import ScoringModel
from app.services.assessment_store import AssessmentRecord, AssessmentStore, PersistenceError
from app.services.extraction import ExtractionResult, Extractor

logger = structlog.get_logger()


class SessionState(str, Enum):
    INPUT = "input"
    PROCESSING = "processing"
    REVIEW = "review"
    COMPLETE = "complete"


class InputMode(str, Enum):
    FREE_TEXT = "free_text"
    STRUCTURED = "structured"


class SessionStateError(Exception):
    """Operation not allowed in the session's current state."""

    def __init__(self, operation: str, state: SessionState):
        super().__init__(f"Cannot {operation} while session is in '{state.value}' state")
        self.operation = operation
        self.state = state


class InvalidFieldError(ValueError):
    pass


@dataclass
class AssessmentSession:
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    state: SessionState = SessionState.INPUT
    input_mode: Optional[InputMode] = None
    raw_description: Optional[str] = None
    profile: Optional[OperationalProfile] = None
    result: Optional[AssessmentResult] = None
    error_message: Optional[str] = None
    generation: int = 0
    assessment_id: Optional[str] = None


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "profile"
        parts.append(f"{loc}: {err['msg']}")
    return "Please complete the profile. " + "; ".join(parts)


class AssessmentController:
    def __init__(
        self,
        extractor: Extractor,
        store: AssessmentStore,
        model: ScoringModel,
        min_description_length: int = 20,
    ):
        self.extractor = extractor
        self.store = store
        self.model = model
        self.min_description_length = min_description_length

    # ═══════════════════════════════════════════════════════════════
    # submit: input → processing → review | input
    # ═══════════════════════════════════════════════════════════════
    async def submit(
        self,
        session: AssessmentSession,
        description: Optional[str] = None,
        profile: Optional[Union[OperationalProfile, dict[str, Any]]] = None,
    ) -> AssessmentSession:
        if session.state != SessionState.INPUT:
            raise SessionStateError("submit", session.state)
        if (description is None) == (profile is None):
            raise ValueError("Provide either a description or a structured profile")

        session.generation += 1
        generation = session.generation
        session.state = SessionState.PROCESSING
        session.error_message = None

        if description is not None:
            session.input_mode = InputMode.FREE_TEXT
            session.raw_description = description
            validated = await self._extract(session, description, generation)
        else:
            session.input_mode = InputMode.STRUCTURED
            session.raw_description = None
            validated = self._validate_structured(session, profile)

        if validated is None or session.generation != generation:
            return session

        logger.info(
            "session_submitted",
            session_id=session.session_id,
            input_mode=session.input_mode.value,
            generation=generation,
        )
        self._recompute(session, validated, generation)
        return session

    async def _extract(
        self, session: AssessmentSession, description: str, generation: int,
    ) -> Optional[OperationalProfile]:
        text = description.strip()
        if len(text) < self.min_description_length:
            self._fail(
                session,
                f"Please describe your operations in at least {self.min_description_length} characters.",
            )
            return None

        try:
            extracted = await self.extractor.extract(text)
        except Exception:
            logger.exception("extraction_crashed", session_id=session.session_id, generation=generation)
            extracted = ExtractionResult(error="Failed to extract data from the description.")

        # reset() or a newer submit happened while waiting on the extractor
        if session.generation != generation:
            logger.info("stale_extraction_discarded", session_id=session.session_id, generation=generation)
            return None

        if not extracted.ok:
            self._fail(session, extracted.error or "Failed to extract data from the description.")
            return None

        data = extracted.profile.model_dump(exclude_none=True)
        data["provenance"] = extracted.provenance
        try:
            return OperationalProfile.model_validate(data)
        except ValidationError as e:
            logger.warning("extraction_incomplete", session_id=session.session_id, errors=e.error_count())
            self._fail(
                session,
                "Could not determine the industry and country from the description. "
                "Please add them or use the structured form.",
            )
            return None

    def _validate_structured(self, session, profile) -> Optional[OperationalProfile]:
        if isinstance(profile, OperationalProfile):
            return profile
        try:
            return OperationalProfile.model_validate(profile)
        except ValidationError as e:
            self._fail(session, _validation_message(e))
            return None

    def _fail(self, session: AssessmentSession, message: str) -> None:
        logger.info("session_submit_failed", session_id=session.session_id, reason=message)
        session.state = SessionState.INPUT
        session.error_message = message

    def _recompute(self, session: AssessmentSession, profile: OperationalProfile, generation: int) -> None:
        try:
            result = evaluate(profile, self.model)
        except Exception:
            logger.exception("scoring_failed", session_id=session.session_id, generation=generation)
            if session.state == SessionState.PROCESSING:
                session.state = SessionState.INPUT
            raise

        if session.generation != generation:
            logger.info("stale_recompute_discarded", session_id=session.session_id, generation=generation)
            return

        # profile and result are replaced together
        session.profile, session.result = profile, result
        session.state = SessionState.REVIEW

    # ═══════════════════════════════════════════════════════════════
    # edit_field: review → review, full recompute
    # ═══════════════════════════════════════════════════════════════
    def edit_field(self, session: AssessmentSession, name: str, value: Any) -> AssessmentSession:
        if session.state != SessionState.REVIEW:
            raise SessionStateError("edit a field", session.state)
        if name not in PROFILE_FIELDS:
            raise InvalidFieldError(f"Unknown profile field '{name}'")

        data = session.profile.model_dump(exclude_unset=True)
        data[name] = value
        data["provenance"] = {**session.profile.provenance, name: Provenance.STATED}
        # Raises ValidationError; the session keeps its current profile and result
        updated = OperationalProfile.model_validate(data)

        session.generation += 1
        logger.info("session_field_edited", session_id=session.session_id, field=name, generation=session.generation)
        self._recompute(session, updated, session.generation)
        return session

    # ═══════════════════════════════════════════════════════════════
    # save: review → complete
    # ═══════════════════════════════════════════════════════════════
    async def save(self, session: AssessmentSession) -> AssessmentSession:
        if session.state != SessionState.REVIEW:
            raise SessionStateError("save", session.state)

        record = AssessmentRecord(
            session_id=session.session_id,
            result=session.result,
            input_mode=session.input_mode.value,
            raw_description=session.raw_description,
        )
        try:
            assessment_id = await self.store.save(record)
        except PersistenceError:
            session.error_message = "Saving the assessment failed. Your results are kept; please try again."
            raise

        session.assessment_id = assessment_id
        session.error_message = None
        session.state = SessionState.COMPLETE
        logger.info("session_saved", session_id=session.session_id, assessment_id=assessment_id)
        return session

    def reset(self, session: AssessmentSession) -> AssessmentSession:
        session.generation += 1
        session.state = SessionState.INPUT
        session.input_mode = None
        session.raw_description = None
        session.profile = None
        session.result = None
        session.error_message = None
        session.assessment_id = None
        logger.info("session_reset", session_id=session.session_id, generation=session.generation)
        return session
