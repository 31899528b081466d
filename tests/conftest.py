"""Shared fixtures: deterministic extractor stub and in-memory store."""
from __future__ import annotations

import pytest

from app.schemas.profile import PartialOperationalProfile
from app.scoring.model import MODEL_V1_0
from app.services.assessment_store import AssessmentRecord, PersistenceError
from app.services.extraction import ExtractionResult
from app.services.session import AssessmentController
from app.services.session_registry import SessionRegistry


class StubExtractor:
    """Returns a canned result and records what it was asked."""

    def __init__(self, result: ExtractionResult | None = None):
        self.result = result or ExtractionResult(
            profile=PartialOperationalProfile(
                company_name="Acme Semis",
                industry_sector="Semiconductors",
                country="Taiwan",
                region="Hsinchu",
                water_disruptions_past_5y=True,
            ),
            provenance={"region": "stated", "water_disruptions_past_5y": "inferred"},
        )
        self.calls: list[str] = []
        self.on_call = None

    async def extract(self, text: str) -> ExtractionResult:
        self.calls.append(text)
        if self.on_call is not None:
            self.on_call()
        return self.result


class InMemoryStore:
    def __init__(self):
        self.records: dict[str, AssessmentRecord] = {}
        self.fail = False

    async def save(self, record: AssessmentRecord) -> str:
        if self.fail:
            raise PersistenceError("Could not save assessment: OperationalError")
        assessment_id = f"A-{len(self.records) + 1:04d}"
        self.records[assessment_id] = record
        return assessment_id


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def extractor() -> StubExtractor:
    return StubExtractor()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def controller(extractor, store) -> AssessmentController:
    return AssessmentController(extractor=extractor, store=store, model=MODEL_V1_0, min_description_length=20)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()
