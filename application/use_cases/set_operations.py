"""
Set use cases for ungrouped exercises.

Add, remove, edit and toggle sets of a straight-sets exercise. Members of
a superset/circuit group are rejected here; their sets are edited through
the group use cases so every member keeps one set per round.
"""

import logging
from typing import Optional

from application.ports import ExerciseCatalog, SessionRepository
from application.use_cases.base import CatalogHistoryMixin, Clock, SessionUseCase
from domain.clock import utc_now
from domain.models import WorkoutSession
from domain.services import set_ordering_policy

logger = logging.getLogger(__name__)


class AddSetUseCase(CatalogHistoryMixin, SessionUseCase):
    """
    Append a set to an exercise.

    Weight and reps default to the exercise's current last set. On success
    the catalog's last-used history is updated (best effort).

    Usage:
        >>> use_case = AddSetUseCase(session_repo=repo, catalog=catalog)
        >>> session = await use_case.execute(session_id, exercise_id, weight=100, reps=5)
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        catalog: Optional[ExerciseCatalog] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._catalog = catalog

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> WorkoutSession:
        """
        Args:
            session_id: Session to modify
            exercise_id: Session exercise id
            weight: Weight of the new set (defaults to the last set's weight)
            reps: Reps of the new set (defaults to the last set's reps)

        Raises:
            ExerciseNotFound: If the exercise is not in the session
            InvalidInput: If the resulting weight or reps is not positive
            InvalidOperation: If the exercise belongs to a group
        """
        added = {}

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            last = exercise.last_set
            added["weight"] = weight if weight is not None else (last.weight if last else 0.0)
            added["reps"] = reps if reps is not None else (last.reps if last else 0)
            added["catalog_id"] = exercise.exercise_id
            return session.with_exercise(
                set_ordering_policy.add_set(exercise, added["weight"], added["reps"])
            )

        updated = await self._mutate(session_id, operation)
        logger.info(
            f"Added set to {exercise_id} in {session_id}: "
            f"{added['weight']:g} x {added['reps']}"
        )
        await self._record_history(
            added["catalog_id"], added["weight"], added["reps"], self._clock()
        )
        return updated


class RemoveSetUseCase(SessionUseCase):
    """Remove a set and renumber the remaining sets 0..n-1."""

    async def execute(self, session_id: str, exercise_id: str, set_id: str) -> WorkoutSession:
        """
        Raises:
            SetNotFound: If the set is not part of the exercise
            InvalidOperation: If it is the exercise's last set
        """

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            return session.with_exercise(set_ordering_policy.remove_set(exercise, set_id))

        updated = await self._mutate(session_id, operation)
        logger.info(f"Removed set {set_id} from {exercise_id} in {session_id}")
        return updated


class UpdateSetUseCase(CatalogHistoryMixin, SessionUseCase):
    """Edit weight and/or reps of one set."""

    def __init__(
        self,
        session_repo: SessionRepository,
        catalog: Optional[ExerciseCatalog] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._catalog = catalog

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        set_id: str,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> WorkoutSession:
        edited = {}

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            updated_exercise = set_ordering_policy.update_set(exercise, set_id, weight, reps)
            edited["set"] = updated_exercise.find_set(set_id)
            edited["catalog_id"] = exercise.exercise_id
            return session.with_exercise(updated_exercise)

        updated = await self._mutate(session_id, operation)
        changed = edited["set"]
        await self._record_history(
            edited["catalog_id"], changed.weight, changed.reps, self._clock()
        )
        return updated


class UpdateAllSetsUseCase(CatalogHistoryMixin, SessionUseCase):
    """Apply weight and/or reps to every incomplete set of an exercise."""

    def __init__(
        self,
        session_repo: SessionRepository,
        catalog: Optional[ExerciseCatalog] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._catalog = catalog

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> WorkoutSession:
        edited = {}

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            updated_exercise = set_ordering_policy.update_incomplete_sets(
                exercise, weight, reps
            )
            edited["exercise"] = updated_exercise
            return session.with_exercise(updated_exercise)

        updated = await self._mutate(session_id, operation)
        working = edited["exercise"].working_sets
        if working:
            await self._record_history(
                edited["exercise"].exercise_id,
                working[0].weight,
                working[0].reps,
                self._clock(),
            )
        return updated


class ToggleSetCompletionUseCase(SessionUseCase):
    """
    Flip the completion state of one set.

    This is a toggle: toggling a completed set uncompletes it.
    """

    async def execute(self, session_id: str, exercise_id: str, set_id: str) -> WorkoutSession:
        now = self._clock()

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            return session.with_exercise(
                set_ordering_policy.toggle_completion(exercise, set_id, now)
            )

        return await self._mutate(session_id, operation)
