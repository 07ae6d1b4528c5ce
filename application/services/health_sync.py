"""
Health-data export running alongside the session lifecycle.

Export is fire-and-forget: starting or ending a session schedules a
background task and returns immediately. Exporter failures are logged and
never reach the caller. Background tasks are held in a strong-reference set
until they finish; ``drain()`` awaits all of them (shutdown, tests).

The start task receives a correlation id from the exporter some time after
the session was saved. By then other use cases may have written newer
versions of the session, so the task re-fetches the current aggregate and
attaches the id to that copy instead of writing back its own snapshot.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Coroutine, Dict, Optional, Set

from application.ports import HealthExporter, SessionRepository
from domain.models import SessionState, WorkoutSession

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_TYPE = "traditional_strength_training"
DEFAULT_MET = 6.0
DEFAULT_BODY_WEIGHT_KG = 80.0


def estimate_energy(
    duration_seconds: float,
    met: float = DEFAULT_MET,
    body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
) -> float:
    """Estimated active energy in kcal: MET x body weight (kg) x hours."""
    return met * body_weight_kg * (duration_seconds / 3600.0)


def build_metadata(session: WorkoutSession) -> Dict[str, Any]:
    """Summary values attached to the exported workout."""
    return {
        "totalVolume": session.total_volume,
        "exerciseCount": len(session.all_exercises),
        "workoutName": session.template_name or "Workout",
    }


class HealthSyncService:
    """
    Schedules health export tasks for session start, end and cancel.

    Args:
        session_repo: Repository used to re-fetch sessions before attaching ids
        exporter: Health store adapter
        enabled: When False, nothing is exported
        met: MET value for the energy estimate
        body_weight_kg: Body weight for the energy estimate
        activity_type: Activity identifier passed to the exporter
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        exporter: HealthExporter,
        *,
        enabled: bool = True,
        met: float = DEFAULT_MET,
        body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
        activity_type: str = DEFAULT_ACTIVITY_TYPE,
    ) -> None:
        self._session_repo = session_repo
        self._exporter = exporter
        self.enabled = enabled
        self.met = met
        self.body_weight_kg = body_weight_kg
        self.activity_type = activity_type
        self._tasks: Set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Task bookkeeping
    # -------------------------------------------------------------------------

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled export task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def schedule_start(self, session: WorkoutSession) -> Optional[asyncio.Task]:
        """Start a health workout for a newly saved session in the background."""
        if not self.enabled:
            return None
        return self._spawn(
            self._start(session.id, session.start_date),
            name=f"health-start-{session.id}",
        )

    def schedule_end(self, session: WorkoutSession) -> Optional[asyncio.Task]:
        """Export a completed session in the background."""
        if not self.enabled or session.health_session_id is None:
            return None
        return self._spawn(self._end(session), name=f"health-end-{session.id}")

    async def cancel(self, session: WorkoutSession) -> None:
        """Discard the health workout of a cancelled session. Failures are logged."""
        if not self.enabled or session.health_session_id is None:
            return
        try:
            await self._exporter.cancel_session(session.health_session_id)
            logger.info(f"Cancelled health session for {session.id}")
        except Exception as e:
            logger.warning(f"Failed to cancel health session for {session.id}: {e}")

    # -------------------------------------------------------------------------
    # Background work
    # -------------------------------------------------------------------------

    async def _start(self, session_id: str, start_date: datetime) -> None:
        try:
            correlation_id = await self._exporter.start_session(self.activity_type, start_date)
        except Exception as e:
            logger.warning(f"Failed to start health session for {session_id}: {e}")
            return

        try:
            fresh = await self._session_repo.fetch(session_id)
            if fresh is None:
                # Cancelled before the exporter answered
                logger.info(f"Session {session_id} is gone, discarding health session")
                await self._exporter.cancel_session(correlation_id)
                return

            attached = fresh.with_health_session_id(correlation_id)
            await self._session_repo.update(attached)
            logger.info(f"Attached health session {correlation_id} to {session_id}")
        except Exception as e:
            logger.warning(f"Failed to attach health session to {session_id}: {e}")
            return

        if attached.state == SessionState.COMPLETED:
            # Ended before the exporter answered, so the end export was skipped
            await self._end(attached)

    async def _end(self, session: WorkoutSession) -> None:
        end_date = session.end_date or session.start_date
        energy = estimate_energy(
            (end_date - session.start_date).total_seconds(),
            met=self.met,
            body_weight_kg=self.body_weight_kg,
        )
        try:
            await self._exporter.end_session(
                session.health_session_id,
                end_date,
                energy,
                build_metadata(session),
            )
            logger.info(f"Exported session {session.id} ({energy:.0f} kcal)")
        except Exception as e:
            logger.warning(f"Failed to export session {session.id}: {e}")
