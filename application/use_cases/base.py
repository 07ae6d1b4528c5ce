"""
Shared plumbing for session use cases.

Every mutating use case follows the same workflow:
1. Fetch the current aggregate from the repository by id
2. Apply exactly one pure domain operation
3. Check aggregate invariants
4. Persist the new aggregate with a single write
5. Return the new aggregate

Use cases never accept an aggregate from the caller, so they can never
write back a stale copy.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from application.ports import ExerciseCatalog, SessionRepository
from domain.clock import utc_now
from domain.exceptions import (
    ExerciseNotFound,
    InvalidInput,
    InvalidOperation,
    PersistenceFailure,
    SessionEngineError,
    SessionNotFound,
)
from domain.invariants import ensure_valid
from domain.models import SessionExercise, SessionExerciseGroup, WorkoutSession
from domain.services import session_lifecycle

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
SessionOperation = Callable[[WorkoutSession], WorkoutSession]


def validation_to_invalid_input(error: ValidationError) -> InvalidInput:
    """Translate a pydantic ValidationError into InvalidInput."""
    messages = [
        f"{'.'.join(str(p) for p in e['loc']) or 'value'}: {e['msg']}"
        for e in error.errors()
    ]
    return InvalidInput(f"Invalid input: {'; '.join(messages)}", errors=messages)


class SessionUseCase:
    """
    Base class for use cases operating on one stored session.

    Args:
        session_repo: Repository holding the aggregate
        clock: Source of "now" (injectable for tests)
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._session_repo = session_repo
        self._clock = clock

    # -------------------------------------------------------------------------
    # Repository access
    # -------------------------------------------------------------------------

    async def _load_session(self, session_id: str) -> WorkoutSession:
        """Fetch a fresh aggregate, raising SessionNotFound if absent."""
        try:
            session = await self._session_repo.fetch(session_id)
        except SessionEngineError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch session {session_id}: {e}")
            raise PersistenceFailure("fetch", e) from e

        if session is None:
            raise SessionNotFound(session_id)
        return session

    async def _persist(self, session: WorkoutSession) -> WorkoutSession:
        """Check invariants and replace the stored aggregate."""
        ensure_valid(session)
        try:
            await self._session_repo.update(session)
        except SessionEngineError:
            raise
        except Exception as e:
            logger.error(f"Failed to update session {session.id}: {e}")
            raise PersistenceFailure("update", e) from e
        return session

    async def _mutate(self, session_id: str, operation: SessionOperation) -> WorkoutSession:
        """
        Run the fetch / apply / check / persist workflow for one operation.

        A no-op operation (one that returns the same instance) is not written.

        Raises:
            SessionNotFound: If the session does not exist
            InvalidOperation: If the session is completed or the result is
                inconsistent
            InvalidInput: If the operation rejected its input
            PersistenceFailure: If the repository write failed
        """
        session = await self._load_session(session_id)
        session_lifecycle.ensure_mutable(session)

        try:
            updated = operation(session)
        except ValidationError as e:
            raise validation_to_invalid_input(e) from e

        if updated is session:
            logger.debug(f"Operation left session {session_id} unchanged, skipping write")
            return session
        return await self._persist(updated)

    # -------------------------------------------------------------------------
    # Aggregate navigation
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_ungrouped_exercise(
        session: WorkoutSession, exercise_id: str
    ) -> SessionExercise:
        """
        Find an ungrouped exercise.

        Group members hold exactly one set per round, so set add/remove and
        warmup operations may not target them.
        """
        exercise = session.find_exercise(exercise_id)
        if exercise is not None:
            return exercise
        if session.group_containing(exercise_id) is not None:
            raise InvalidOperation(
                f"Exercise {exercise_id} belongs to an exercise group; "
                "use the group set operations instead"
            )
        raise ExerciseNotFound(exercise_id)

    @staticmethod
    def _require_group(session: WorkoutSession, group_id: str) -> SessionExerciseGroup:
        if not session.is_grouped:
            raise InvalidOperation(
                f"Session {session.id} is a {session.workout_type.value} session "
                "without exercise groups"
            )
        return session.require_group(group_id)


class CatalogHistoryMixin:
    """Best-effort update of the catalog's last-used weight/reps."""

    _catalog: Optional[ExerciseCatalog]

    async def _record_history(
        self,
        exercise_id: str,
        weight: float,
        reps: int,
        date: datetime,
    ) -> None:
        if self._catalog is None:
            return
        try:
            await self._catalog.update_last_used(exercise_id, weight, reps, date)
        except Exception as e:
            logger.warning(f"Failed to update last-used history for {exercise_id}: {e}")
