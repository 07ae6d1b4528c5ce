"""
In-memory implementation of SessionRepository.

Used for local runs and as the default store of ``build_in_memory_engine``.
Access is serialised with an asyncio.Lock and sessions are stored as deep
copies, so callers never share objects with the store.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from domain.exceptions import ActiveSessionExists, SessionNotFound
from domain.models import WorkoutSession

logger = logging.getLogger(__name__)


class InMemorySessionRepository:
    """
    In-memory implementation of the SessionRepository protocol.

    Enforces the "at most one active or paused session" rule on ``save``
    and ``update``.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, WorkoutSession] = {}
        self._lock = asyncio.Lock()

    def _open_sessions(self, excluding: Optional[str] = None) -> List[WorkoutSession]:
        return [
            s for s in self._sessions.values() if s.is_open and s.id != excluding
        ]

    async def fetch_active(self) -> Optional[WorkoutSession]:
        async with self._lock:
            open_sessions = self._open_sessions()
            if not open_sessions:
                return None
            return open_sessions[0].model_copy(deep=True)

    async def fetch(self, session_id: str) -> Optional[WorkoutSession]:
        async with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session is not None else None

    async def save(self, session: WorkoutSession) -> None:
        async with self._lock:
            if session.is_open:
                others = self._open_sessions(excluding=session.id)
                if others:
                    raise ActiveSessionExists(others[0].id)
            self._sessions[session.id] = session.model_copy(deep=True)
            logger.debug(f"Saved session {session.id}")

    async def update(self, session: WorkoutSession) -> None:
        async with self._lock:
            if session.id not in self._sessions:
                raise SessionNotFound(session.id)
            if session.is_open:
                others = self._open_sessions(excluding=session.id)
                if others:
                    raise ActiveSessionExists(others[0].id)
            self._sessions[session.id] = session.model_copy(deep=True)

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    async def list_completed(self) -> List[WorkoutSession]:
        """Completed sessions, most recent first."""
        async with self._lock:
            done = [s for s in self._sessions.values() if not s.is_open]
            return [
                s.model_copy(deep=True)
                for s in sorted(done, key=lambda s: s.end_date, reverse=True)
            ]
