"""
Warmup use cases.

Warmup sets are calculated from an exercise's first working set and
inserted in front of all existing sets. Exercises that already have warmup
sets are left alone, so repeating the request never duplicates warmups.
"""

import logging
from typing import Optional

from application.ports import SessionRepository
from application.use_cases.base import Clock, SessionUseCase
from domain.clock import utc_now
from domain.models import SessionExercise, WarmupStrategy, WorkoutSession
from domain.services import set_ordering_policy
from domain.services.warmup_calculator import StrategyLike, WarmupCalculator

logger = logging.getLogger(__name__)


def with_warmups(
    exercise: SessionExercise,
    calculator: WarmupCalculator,
    strategy: StrategyLike,
) -> SessionExercise:
    """Return the exercise with calculated warmups, or unchanged if not applicable."""
    if exercise.has_warmup_sets:
        return exercise
    working = exercise.working_sets
    if not working:
        return exercise
    first = working[0]
    steps = calculator.calculate(first.weight, first.reps, strategy)
    return set_ordering_policy.insert_warmup_batch(exercise, steps)


class _WarmupUseCase(SessionUseCase):
    def __init__(
        self,
        session_repo: SessionRepository,
        calculator: Optional[WarmupCalculator] = None,
        *,
        default_strategy: str = "standard",
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(session_repo, clock=clock)
        self._calculator = calculator or WarmupCalculator()
        self._default_strategy = default_strategy

    def _strategy(self, strategy: Optional[StrategyLike]) -> WarmupStrategy:
        resolved = strategy if strategy is not None else self._default_strategy
        # Fail on an unknown strategy before touching the session
        return self._calculator.resolve_strategy(resolved)


class AddWarmupSetsUseCase(_WarmupUseCase):
    """
    Add warmup sets to one exercise.

    Usage:
        >>> use_case = AddWarmupSetsUseCase(session_repo=repo)
        >>> session = await use_case.execute(session_id, exercise_id, "conservative")
    """

    async def execute(
        self,
        session_id: str,
        exercise_id: str,
        strategy: Optional[StrategyLike] = None,
    ) -> WorkoutSession:
        """
        Raises:
            ExerciseNotFound: If the exercise is not in the session
            InvalidOperation: If the exercise belongs to a group
            InvalidInput: If the strategy is unknown or malformed
        """
        resolved = self._strategy(strategy)

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercise = self._require_ungrouped_exercise(session, exercise_id)
            updated = with_warmups(exercise, self._calculator, resolved)
            if updated is exercise:
                return session
            return session.with_exercise(updated)

        updated = await self._mutate(session_id, operation)
        logger.info(f"Warmups ({resolved.name}) applied to {exercise_id} in {session_id}")
        return updated


class AddWarmupSetsToAllExercisesUseCase(_WarmupUseCase):
    """
    Add warmup sets to every ungrouped exercise at once.

    All insertions are computed on one snapshot of the session and written
    with a single update.
    """

    async def execute(
        self,
        session_id: str,
        strategy: Optional[StrategyLike] = None,
    ) -> WorkoutSession:
        resolved = self._strategy(strategy)
        changed = []

        def operation(session: WorkoutSession) -> WorkoutSession:
            exercises = []
            for exercise in session.exercises:
                updated = with_warmups(exercise, self._calculator, resolved)
                if updated is not exercise:
                    changed.append(exercise.id)
                exercises.append(updated)
            if not changed:
                return session
            return session.with_exercises(exercises)

        updated = await self._mutate(session_id, operation)
        logger.info(
            f"Warmups ({resolved.name}) applied to {len(changed)} exercise(s) in {session_id}"
        )
        return updated
