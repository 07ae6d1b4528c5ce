"""
Session lifecycle use cases: end, cancel, pause, resume and lookup.
"""

import logging
from typing import Optional

from application.ports import SessionRepository
from application.services.health_sync import HealthSyncService
from application.use_cases.base import Clock, SessionUseCase
from domain.clock import utc_now
from domain.exceptions import PersistenceFailure
from domain.models import WorkoutSession
from domain.services import session_lifecycle

logger = logging.getLogger(__name__)


class EndSessionUseCase(SessionUseCase):
    """
    Complete a session and export it to the health store.

    Sets are left as they are; ending does not complete outstanding sets.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        health_sync: Optional[HealthSyncService] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._health_sync = health_sync

    async def execute(self, session_id: str) -> WorkoutSession:
        """
        Raises:
            SessionNotFound: If the session does not exist
            InvalidOperation: If the session is already completed
        """
        session = await self._load_session(session_id)
        ended = await self._persist(session_lifecycle.end(session, now=self._clock()))

        logger.info(
            f"Ended session {session_id}: {ended.completed_set_count}/"
            f"{ended.total_set_count} sets, volume {ended.total_volume:g}"
        )
        if self._health_sync is not None:
            self._health_sync.schedule_end(ended)
        return ended


class CancelSessionUseCase(SessionUseCase):
    """Discard an active or paused session, including its health workout."""

    def __init__(
        self,
        session_repo: SessionRepository,
        health_sync: Optional[HealthSyncService] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._health_sync = health_sync

    async def execute(self, session_id: str) -> None:
        """
        Raises:
            SessionNotFound: If the session does not exist
            InvalidOperation: If the session is completed
            PersistenceFailure: If the delete failed
        """
        session = await self._load_session(session_id)
        session_lifecycle.ensure_cancellable(session)

        if self._health_sync is not None:
            await self._health_sync.cancel(session)

        try:
            await self._session_repo.delete(session_id)
        except Exception as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            raise PersistenceFailure("delete", e) from e
        logger.info(f"Cancelled session {session_id}")


class PauseSessionUseCase(SessionUseCase):
    """Move an active session to paused."""

    async def execute(self, session_id: str) -> WorkoutSession:
        session = await self._load_session(session_id)
        paused = await self._persist(session_lifecycle.pause(session))
        logger.info(f"Paused session {session_id}")
        return paused


class ResumeSessionUseCase(SessionUseCase):
    """Move a paused session back to active."""

    async def execute(self, session_id: str) -> WorkoutSession:
        session = await self._load_session(session_id)
        resumed = await self._persist(session_lifecycle.resume(session))
        logger.info(f"Resumed session {session_id}")
        return resumed


class GetActiveSessionUseCase:
    """Return the active or paused session, if any."""

    def __init__(self, session_repo: SessionRepository) -> None:
        self._session_repo = session_repo

    async def execute(self) -> Optional[WorkoutSession]:
        try:
            return await self._session_repo.fetch_active()
        except Exception as e:
            logger.error(f"Failed to fetch active session: {e}")
            raise PersistenceFailure("fetch active", e) from e
