"""
Exercise-level use cases: finish, reorder, add from catalog, notes.
"""

import logging
from typing import List, Optional

from application.ports import ExerciseCatalog, SessionRepository
from application.use_cases.base import Clock, SessionUseCase
from domain.clock import utc_now
from domain.exceptions import ExerciseNotFound, InvalidInput
from domain.models import (
    MAX_NOTES_LENGTH,
    CatalogExercise,
    SessionExercise,
    SessionSet,
    WorkoutSession,
)

logger = logging.getLogger(__name__)


class FinishExerciseUseCase(SessionUseCase):
    """Mark an exercise as finished (or reopen it with ``finished=False``)."""

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        finished: bool = True,
    ) -> WorkoutSession:
        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            if exercise.is_finished == finished:
                return session
            return session.with_exercise(exercise.with_finished(finished))

        return await self._mutate(session_id, operation)


class ReorderExercisesUseCase(SessionUseCase):
    """
    Reorder the ungrouped exercises of a session.

    The caller passes every ungrouped session exercise id in the new order;
    ``order_index`` is reassigned 0..n-1 following that order.
    """

    async def execute(self, session_id: str, exercise_ids: List[str]) -> WorkoutSession:
        """
        Raises:
            InvalidInput: If ``exercise_ids`` is not a permutation of the
                session's ungrouped exercise ids
        """

        def operation(session: WorkoutSession) -> WorkoutSession:
            current = {e.id: e for e in session.exercises}
            if len(exercise_ids) != len(current) or set(exercise_ids) != set(current):
                raise InvalidInput(
                    "Reorder must list every ungrouped exercise exactly once",
                    errors=[f"expected {sorted(current)}, got {list(exercise_ids)}"],
                )
            return session.with_exercises(
                [current[eid].with_order_index(i) for i, eid in enumerate(exercise_ids)]
            )

        updated = await self._mutate(session_id, operation)
        logger.info(f"Reordered {len(exercise_ids)} exercises in {session_id}")
        return updated


class AddExerciseToSessionUseCase(SessionUseCase):
    """
    Append a catalog exercise to a running session.

    The new exercise goes after every ungrouped exercise and gets a default
    set list seeded from the catalog's last-used history.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        catalog: ExerciseCatalog,
        *,
        default_set_count: int = 3,
        default_reps: int = 8,
        default_rest_time: float = 90.0,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._catalog = catalog
        self._default_set_count = default_set_count
        self._default_reps = default_reps
        self._default_rest_time = default_rest_time

    def _build_exercise(self, entry: CatalogExercise, order_index: int) -> SessionExercise:
        set_count = entry.last_used_set_count or self._default_set_count
        weight = entry.last_used_weight or 0.0
        reps = entry.last_used_reps or self._default_reps
        rest = (
            entry.last_used_rest_time
            if entry.last_used_rest_time is not None
            else self._default_rest_time
        )
        return SessionExercise(
            exercise_id=entry.id,
            name=entry.name,
            sets=[
                SessionSet(weight=weight, reps=reps, rest_time=rest, order_index=i)
                for i in range(set_count)
            ],
            rest_time_to_next=rest,
            order_index=order_index,
        )

    async def execute(self, session_id: str, catalog_exercise_id: str) -> WorkoutSession:
        """
        Raises:
            ExerciseNotFound: If the catalog has no such exercise
        """
        entry = await self._catalog.fetch(catalog_exercise_id)
        if entry is None:
            raise ExerciseNotFound(catalog_exercise_id)

        def operation(session: WorkoutSession) -> WorkoutSession:
            next_index = max((e.order_index for e in session.exercises), default=-1) + 1
            new_exercise = self._build_exercise(entry, next_index)
            return session.with_exercises([*session.exercises, new_exercise])

        updated = await self._mutate(session_id, operation)
        logger.info(f"Added {entry.name!r} to session {session_id}")
        return updated


class UpdateExerciseNotesUseCase(SessionUseCase):
    """
    Set the notes of an exercise (ungrouped or group member).

    Notes are trimmed; an empty result clears them.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        *,
        max_notes_length: int = MAX_NOTES_LENGTH,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._max_notes_length = max_notes_length

    def _normalize(self, notes: Optional[str]) -> Optional[str]:
        trimmed = (notes or "").strip()
        if len(trimmed) > self._max_notes_length:
            raise InvalidInput(
                f"Notes are {len(trimmed)} characters; maximum is {self._max_notes_length}"
            )
        return trimmed or None

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        notes: Optional[str],
    ) -> WorkoutSession:
        normalized = self._normalize(notes)

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = session.find_exercise(exercise_id)
            if exercise is not None:
                return session.with_exercise(exercise.with_notes(normalized))
            group = session.group_containing(exercise_id)
            if group is None:
                raise ExerciseNotFound(exercise_id)
            member = group.find_exercise(exercise_id)
            return session.with_group(group.with_exercise(member.with_notes(normalized)))

        return await self._mutate(session_id, operation)
