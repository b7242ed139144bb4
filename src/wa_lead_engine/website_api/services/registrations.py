"""In-memory registry of registration wizard sessions."""

import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Dict, Tuple

from ...intake.wizard import IntakeSession
from ...storage.database import LeadDatabase

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=2)


class RegistrationRegistry:
    """Keeps one IntakeSession per applicant between HTTP requests."""

    def __init__(self, ttl: timedelta = SESSION_TTL):
        self.ttl = ttl
        self._sessions: Dict[str, Tuple[IntakeSession, datetime]] = {}
        self._lock = threading.Lock()

    def create(self, db: LeadDatabase) -> Tuple[str, IntakeSession]:
        """Start a new wizard backed by the given database."""
        session_id = str(uuid.uuid4())
        session = IntakeSession(credentials=db, profiles=db)
        with self._lock:
            self._expire()
            self._sessions[session_id] = (session, datetime.now())
        return session_id, session

    def get(self, session_id: str) -> IntakeSession:
        """Look up a session. Raises KeyError if unknown or expired."""
        with self._lock:
            self._expire()
            session, _ = self._sessions[session_id]
            self._sessions[session_id] = (session, datetime.now())
            return session

    def discard(self, session_id: str):
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire(self):
        cutoff = datetime.now() - self.ttl
        stale = [sid for sid, (_, seen) in self._sessions.items() if seen < cutoff]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info(f"Expired {len(stale)} registration sessions")


_registry = RegistrationRegistry()


def get_registry() -> RegistrationRegistry:
    return _registry
