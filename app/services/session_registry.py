"""In-process registry of live assessment sessions. Not shared across workers."""
from __future__ import annotations

import structlog

from app.services.session import AssessmentSession

logger = structlog.get_logger()


class SessionNotFound(KeyError):
    pass


class SessionRegistry:
    def __init__(self):
        self._sessions: dict[str, AssessmentSession] = {}

    def create(self) -> AssessmentSession:
        session = AssessmentSession()
        self._sessions[session.session_id] = session
        logger.info("session_created", session_id=session.session_id, live_sessions=len(self._sessions))
        return session

    def get(self, session_id: str) -> AssessmentSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None

    def discard(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFound(session_id)
        logger.info("session_discarded", session_id=session_id, live_sessions=len(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)
